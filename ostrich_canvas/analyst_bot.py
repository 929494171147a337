"""
AnalystBot - answers free-form questions about the sales data in the voice of
the demo assistant. Totals are computed by a calculate_total tool rather than
by the model's own arithmetic.
"""

import json
import logging
from typing import Dict, List

from .base import FlowError, LLMBaseAgent
from .schemas import AnalyzeQueryInput, AnalyzeQueryOutput, CalculateTotalInput

logger = logging.getLogger(__name__)

NUMERIC_COLUMNS = ('revenue', 'marketingSpend', 'cac')

CALCULATE_TOTAL_TOOL = {
    "name": "calculate_total",
    "description": (
        "Calculates the total sum of a specified numeric column in the sales data. "
        "Use this tool for any questions about totals, sums, or aggregations."
    ),
    "input_schema": {
        "type": "object",
        "properties": {
            "columnName": {
                "type": "string",
                "enum": list(NUMERIC_COLUMNS),
                "description": "The numeric column to sum.",
            },
        },
        "required": ["columnName"],
    },
}


def calculate_total(column_name: str, sales_data: str) -> Dict:
    """
    Sum a numeric column over sales rows given as a JSON string.
    Non-numeric cells are skipped.

    Raises:
        ValueError: column_name is not one of revenue, marketingSpend, cac
    """
    if column_name not in NUMERIC_COLUMNS:
        raise ValueError(
            f"Invalid column name: {column_name}. Must be one of {', '.join(NUMERIC_COLUMNS)}."
        )
    rows = json.loads(sales_data)
    total = 0
    for row in rows:
        value = row.get(column_name)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            total += value
    return {"columnName": column_name, "total": total}


class AnalystBot(LLMBaseAgent):
    """
    Answers natural language questions about the sales data as if it had
    just performed the requested action on the user's canvas.

    Usage:
        bot = AnalystBot()
        out = bot.analyze(AnalyzeQueryInput(query="total revenue?", sales_data=json_rows))
        out.summary  # "The total revenue is $228,000."
    """

    def __init__(self, model=None, client=None):
        super().__init__(model=model, max_tokens=1000, client=client)
        self.system_prompt = self._build_system_prompt()

    def _build_system_prompt(self) -> str:
        return """You are an AI assistant for a powerful Work OS called 0str1ch. You are conducting an interactive product demo.

Your responses should be helpful, concise, and act as if you are performing the requested actions on the user's canvas.
When a user asks you to do something, respond as if you have already completed the action.
For example, if asked to create a chart, say "I've added the chart to your canvas."

When asked to perform a calculation like a sum or total on the data, you MUST use the 'calculate_total' tool.
After the tool returns a result, formulate a natural language response (e.g., "The total revenue is $...").

The available data contains: product, region, month, revenue, marketingSpend, and cac (customer acquisition cost).

Answer in plain text only, without markdown or code blocks."""

    def _build_messages(self, payload: AnalyzeQueryInput) -> List[Dict]:
        history = "\n".join(f"- {m.sender}: {m.text}" for m in payload.history) or "(none)"
        return [{
            "role": "user",
            "content": (
                f"Sales Data: {payload.sales_data}\n\n"
                f"Conversation History:\n{history}\n\n"
                f"User's Current Request: {payload.query}"
            ),
        }]

    def analyze(self, payload: AnalyzeQueryInput) -> AnalyzeQueryOutput:
        """
        Answer a query about the sales data.

        Raises:
            FlowError: API failure or no text answer
        """
        def _calculate(tool_input: Dict) -> Dict:
            args = CalculateTotalInput.model_validate(tool_input)
            return calculate_total(args.column_name, args.sales_data or payload.sales_data)

        text = self.call_with_tools(
            self.system_prompt,
            self._build_messages(payload),
            tools=[CALCULATE_TOTAL_TOOL],
            handlers={"calculate_total": _calculate},
        )
        if not text.strip():
            raise FlowError("Empty answer from model")
        logger.info("Analyzed query (%d chars answer)", len(text))
        return AnalyzeQueryOutput(summary=text.strip())
