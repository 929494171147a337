"""
CleanerBot - asks Claude to standardize raw sales rows and explain what changed.
"""

import json

from .base import LLMBaseAgent
from .schemas import CleanDataInput, CleanDataOutput


class CleanerBot(LLMBaseAgent):
    """
    Cleans sales data: region names, product and month capitalization,
    missing values.

    Usage:
        bot = CleanerBot()
        out = bot.clean(CleanDataInput(sales_data=rows))
        out.cleaned_data, out.summary
    """

    def __init__(self, model=None, client=None):
        super().__init__(model=model, max_tokens=4000, client=client)
        self.system_prompt = """You are an expert data cleansing service. Clean the provided sales data according to these rules:
1. Standardize region names. The only valid regions are 'North', 'South', 'East', and 'West'. Correct any variations (e.g., 'north', 'S.', 'eastern').
2. Ensure product names are properly capitalized. For example, 'gadget x' should become 'Gadget X'.
3. Ensure month names are properly capitalized. For example, 'january' should become 'January'.
4. There should be no empty or null values. You can make a reasonable inference if a value is missing, but state your assumption in the summary.

CRITICAL: Return ONLY valid JSON. No markdown, no explanations, ONLY the JSON object.

Return format:
{
  "cleanedData": [{"product": "...", "region": "...", "revenue": 0, "month": "..."}, ...],
  "summary": "A brief, bulleted summary of the specific changes you made"
}"""

    def clean(self, payload: CleanDataInput) -> CleanDataOutput:
        """
        Clean a batch of sales rows.

        Raises:
            FlowError: API failure or a response that isn't a CleanDataOutput
        """
        rows = [sale.model_dump() for sale in payload.sales_data]
        response_text = self.call_api(
            self.system_prompt,
            [{"role": "user", "content": f"Here is the data to clean:\n{json.dumps(rows, indent=2)}"}]
        )
        return self.parse_output(response_text, CleanDataOutput)
