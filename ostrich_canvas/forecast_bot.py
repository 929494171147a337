"""
ForecastBot - extrapolates monthly sales with Claude.

The canvas itself shows a fixed forecast (see data.FORECAST_DATA); this bot
backs the /api/forecast endpoint.
"""

from typing import List

from .base import LLMBaseAgent
from .schemas import ForecastInput, ForecastOutput, Sale


class ForecastBot(LLMBaseAgent):
    """
    Usage:
        bot = ForecastBot()
        rows = bot.forecast(ForecastInput(months=3, sales_data=history))
    """

    def __init__(self, model=None, client=None):
        super().__init__(model=model, max_tokens=2000, client=client)
        self.system_prompt = """You are an expert sales forecaster. Given sales data, forecast sales for the requested number of months.

Forecast each product/region combination present in the data, one entry per month.

CRITICAL: Return ONLY a valid JSON array. No markdown, no explanations.

Return format:
[{"product": "...", "region": "...", "revenue": 0, "month": "..."}, ...]"""

    def forecast(self, payload: ForecastInput) -> List[Sale]:
        """
        Forecast the next payload.months months.

        Raises:
            FlowError: API failure or a response that isn't a list of sales
        """
        lines = "\n".join(
            f"- Product: {s.product}, Region: {s.region}, Revenue: {s.revenue}, Month: {s.month}"
            for s in payload.sales_data
        )
        response_text = self.call_api(
            self.system_prompt,
            [{"role": "user", "content": f"Forecast sales for the next {payload.months} months.\n\nSales Data:\n{lines}"}]
        )
        return self.parse_output(response_text, ForecastOutput, key="forecast").forecast
