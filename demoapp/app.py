"""
Demo server for ostrich-canvas.
Runs the canvas API with the seed sales data and the scripted chat assistant.
"""

import logging

from ostrich_canvas import config, create_app
from ostrich_canvas.data import SALES_DATA

config.configure_logging()
logger = logging.getLogger("demoapp")

app = create_app()


if __name__ == '__main__':
    logger.info("Canvas demo running at http://localhost:%s", config.PORT)
    logger.info("Loaded %d sample records", len(SALES_DATA))
    if not config.ANTHROPIC_API_KEY:
        logger.warning("ANTHROPIC_API_KEY not set; unscripted prompts get the generic reply "
                       "and the /api/analyze, /api/clean, /api/forecast, /api/summarize routes return 500")
    app.run(debug=config.DEBUG, port=config.PORT)
