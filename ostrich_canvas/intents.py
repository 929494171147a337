"""
Prompt matching: map free-form chat text onto the fixed set of canvas intents.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence, Tuple


class Mutation(str, Enum):
    ADD_TILES = "add_tiles"
    FILTER_ROWS = "filter_rows"
    HIGHLIGHT = "highlight"
    FORECAST = "forecast"
    NONE = "none"


@dataclass(frozen=True)
class Intent:
    """
    A trigger phrase and the canvas mutation it causes.

    tiles: artifact keys placed by ADD_TILES (FORECAST also places its tile)
    regions: region prefixes kept by FILTER_ROWS
    """
    key: str
    trigger: str
    mutation: Mutation
    reply: str
    activity: Optional[str] = None
    tiles: Tuple[str, ...] = field(default_factory=tuple)
    regions: Tuple[str, ...] = field(default_factory=tuple)


UNRECOGNIZED = Intent(
    key="unrecognized",
    trigger="",
    mutation=Mutation.NONE,
    reply="I'm not quite sure how to do that. Could you try asking in a different way?",
)

# Checked top to bottom; the first trigger found in the prompt wins.
INTENT_TABLE: Tuple[Intent, ...] = (
    Intent("forecast", "forecast", Mutation.FORECAST,
           "I've generated the revenue forecast and added the new chart to your canvas.",
           activity="Generated a 3-month revenue forecast.",
           tiles=("forecast",)),
    Intent("clean", "clean it up", Mutation.ADD_TILES,
           "Done. I've cleaned up the data, standardized the names, and added it to a spreadsheet on your canvas.",
           activity="Cleaned the sales data and added the spreadsheet.",
           tiles=("spreadsheet",)),
    Intent("kpis", "kpi cards", Mutation.ADD_TILES,
           "I've added KPI cards for Total Revenue, Total Sales, and Average Sale Value to your canvas.",
           activity="Added KPI cards.",
           tiles=("kpi-revenue", "kpi-sales", "kpi-avg-sale")),
    Intent("chart", "chart showing revenue by region", Mutation.ADD_TILES,
           "I've added the Revenue by Region chart to your canvas.",
           activity="Added the Revenue by Region chart.",
           tiles=("chart",)),
    Intent("pivot", "pivot table", Mutation.ADD_TILES,
           "Certainly. I've added a pivot table summarizing revenue by product and region.",
           activity="Added a pivot table of revenue by product and region.",
           tiles=("pivot-table",)),
    Intent("filter", "filter the data to show only", Mutation.FILTER_ROWS,
           "Okay, I've filtered the data to show only the North and East regions. "
           "I've also enabled versioning on the chart so you can compare.",
           activity="Filtered the data to the North and East regions.",
           regions=("north", "east")),
    Intent("highlight", "conditional formatting", Mutation.HIGHLIGHT,
           "I've applied conditional formatting to the spreadsheet to highlight all revenue values above $17,000.",
           activity="Highlighted revenue values above $17,000."),
    Intent("what_if", "what if we increased marketing spend", Mutation.ADD_TILES,
           "Interesting question. I've run a simulation and added a What-If analysis chart to your canvas.",
           activity="Ran a what-if simulation on marketing spend.",
           tiles=("what-if",)),
    Intent("ab_test", "which variant performed better", Mutation.ADD_TILES,
           "I've analyzed the results and added an A/B Test report. Variant B is the clear winner.",
           activity="Added the A/B test report.",
           tiles=("ab-test",)),
    Intent("workflow", "automated workflow", Mutation.ADD_TILES,
           "I've created an agentic workflow to sync this data with Salesforce and added it to the canvas. "
           "You can click on any node to configure it.",
           activity="Created the Salesforce sync workflow.",
           tiles=("salesforce-pipeline",)),
)


def match_intent(text: str, table: Sequence[Intent] = INTENT_TABLE) -> Optional[Intent]:
    """
    Find the intent for a chat prompt.

    Args:
        text: The user's prompt
        table: Ordered intents to scan

    Returns:
        The first intent whose trigger appears in text (case-insensitive),
        UNRECOGNIZED if none does, or None for empty, whitespace-only or
        non-string input.
    """
    if not isinstance(text, str) or not text.strip():
        return None
    lowered = text.lower()
    for intent in table:
        if intent.trigger and intent.trigger.lower() in lowered:
            return intent
    return UNRECOGNIZED
