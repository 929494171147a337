from .base import LLMBaseAgent, FlowError, clean_json_string
from .models import DashboardState, Sheet, Row, LayoutItem, ChatMessage, Activity
from .intents import Intent, Mutation, INTENT_TABLE, UNRECOGNIZED, match_intent
from .dispatcher import dispatch
from .filter_engine import FilterEngine, make_filter
from .delay import MockDelay, DelayCancelled
from .session import (
    DemoSession, ScriptCursor, Status, DEMO_SCRIPT,
    SessionError, SessionBusyError, EmptyPromptError,
)
from .analyst_bot import AnalystBot, calculate_total
from .cleaner_bot import CleanerBot
from .forecast_bot import ForecastBot
from .thread_summary_bot import ThreadSummaryBot
from .api import create_app

__all__ = [
    "LLMBaseAgent",
    "FlowError",
    "clean_json_string",
    "DashboardState",
    "Sheet",
    "Row",
    "LayoutItem",
    "ChatMessage",
    "Activity",
    "Intent",
    "Mutation",
    "INTENT_TABLE",
    "UNRECOGNIZED",
    "match_intent",
    "dispatch",
    "FilterEngine",
    "make_filter",
    "MockDelay",
    "DelayCancelled",
    "DemoSession",
    "ScriptCursor",
    "Status",
    "DEMO_SCRIPT",
    "SessionError",
    "SessionBusyError",
    "EmptyPromptError",
    "AnalystBot",
    "calculate_total",
    "CleanerBot",
    "ForecastBot",
    "ThreadSummaryBot",
    "create_app",
]
