"""
Configuration for the 0str1ch canvas demo.
Values come from the environment (a .env file is loaded if present).
"""

import logging
import os

from dotenv import load_dotenv

load_dotenv()

# Anthropic
ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY")
MODEL = os.getenv("OSTRICH_MODEL", "claude-sonnet-4-6")

# Simulated "thinking" latency, in seconds
ANALYZE_DELAY = float(os.getenv("OSTRICH_ANALYZE_DELAY", 1.2))
FORECAST_DELAY = float(os.getenv("OSTRICH_FORECAST_DELAY", 1.5))

# Server
PORT = int(os.getenv("PORT", 5003))
DEBUG = os.getenv("DEBUG", "true").lower() == "true"
LOG_LEVEL = os.getenv("OSTRICH_LOG_LEVEL", "INFO").upper()

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = None):
    """Set up root logging once for the demo server or scripts."""
    logging.basicConfig(level=level or LOG_LEVEL, format=LOG_FORMAT)
