"""
DemoSession - the chat side of the canvas.

Holds the dashboard state, the append-only transcript and the cursor into the
scripted demo. A submission goes awaiting-input -> processing -> awaiting-input
(or script-complete once every scripted prompt has been played).
"""

import asyncio
import json
import logging
from enum import Enum
from typing import Callable, List, Optional

from . import config
from .base import FlowError
from .delay import DelayCancelled, MockDelay
from .dispatcher import dispatch
from .intents import UNRECOGNIZED, Mutation, match_intent
from .models import ChatMessage, DashboardState
from .schemas import AnalyzeQueryInput, HistoryMessage
from .state import initial_state
from .utils import rows_to_records

logger = logging.getLogger(__name__)

DEMO_SCRIPT = (
    "Hi there, I've just uploaded `q1_sales_report.csv`. Can you clean it up for me? "
    "I need capitalization standardized and region names corrected.",
    "Great. Can you create some KPI cards for total revenue, total sales, and average sale value?",
    "Perfect. Now, create a chart showing revenue by region.",
    "That looks good. Now, can you filter the data to show only the 'North' and 'East' regions? "
    "I want to compare their performance.",
    "In the main spreadsheet, can you apply conditional formatting to the revenue column? "
    "Highlight all values above $17,000 in green.",
    "Interesting. What is the total revenue per product?",
    "Given our current CAC and marketing spend, can you generate a 3-month revenue forecast based on this data?",
    "Thanks. What if we increased marketing spend by 20%? Show me a what-if analysis for that.",
    "Okay, we ran an A/B test on the new checkout flow. Can you show me which variant performed better, "
    "considering both conversion rate and the cost per conversion?",
    "Finally, let's set up an automated workflow to sync this data with Salesforce. Add it to the canvas.",
    "This is powerful. I see I can configure the workflow. Can I switch to a faster AI model if I need to?",
)

WELCOME = ChatMessage(
    sender="assistant",
    text="Welcome to the 0str1ch interactive demo! Let's build a dashboard from scratch. "
         "Click the prompt below to get started.",
)

ERROR_REPLY = "Sorry, I encountered an error. Please try again."


class Status(str, Enum):
    AWAITING_INPUT = "awaiting-input"
    PROCESSING = "processing"
    SCRIPT_COMPLETE = "script-complete"


class SessionError(Exception):
    pass


class EmptyPromptError(SessionError):
    pass


class SessionBusyError(SessionError):
    pass


class ScriptCursor:
    """Position in a fixed sequence of prompts. Advancing past the end is a no-op."""

    def __init__(self, script=DEMO_SCRIPT):
        self.script = tuple(script)
        self.position = 0

    @property
    def complete(self) -> bool:
        return self.position >= len(self.script)

    def current(self) -> Optional[str]:
        return None if self.complete else self.script[self.position]

    def advance(self):
        if not self.complete:
            self.position += 1

    def rewind(self):
        self.position = 0


class DemoSession:
    """
    One demo run.

    Args:
        analyst: Optional callable(AnalyzeQueryInput) -> object with .summary.
                 Prompts no intent recognizes are forwarded to it; without one
                 they get the generic "not sure" reply.
        analyze_delay / forecast_delay: Simulated latency in seconds
        delay_factory: Builds the delay object; tests can swap in their own

    Usage:
        session = DemoSession()
        reply = asyncio.run(session.submit_next())
        session.state.active_sheet.tile_keys()  # ['spreadsheet']
    """

    def __init__(self, analyst: Callable = None, analyze_delay: float = None,
                 forecast_delay: float = None, delay_factory: Callable[[float], MockDelay] = MockDelay,
                 script=DEMO_SCRIPT):
        self.analyst = analyst
        self.analyze_delay = config.ANALYZE_DELAY if analyze_delay is None else analyze_delay
        self.forecast_delay = config.FORECAST_DELAY if forecast_delay is None else forecast_delay
        self.delay_factory = delay_factory
        self.cursor = ScriptCursor(script)
        self.state: DashboardState = initial_state()
        self.messages: List[ChatMessage] = [WELCOME]
        self._processing = False
        self._generation = 0
        self.pending_delay: Optional[MockDelay] = None

    @property
    def status(self) -> Status:
        if self._processing:
            return Status.PROCESSING
        if self.cursor.complete:
            return Status.SCRIPT_COMPLETE
        return Status.AWAITING_INPUT

    def next_prompt(self) -> Optional[str]:
        return self.cursor.current()

    async def submit_next(self) -> ChatMessage:
        """Play the next scripted prompt."""
        prompt = self.next_prompt()
        if prompt is None:
            raise SessionError("The demo script is complete; type a prompt or reset")
        return await self.submit(prompt)

    async def submit(self, text: str) -> ChatMessage:
        """
        Run one chat exchange.

        Failures after the prompt is accepted (a cancelled delay, a broken
        analyst) become the ERROR_REPLY message with the dashboard unchanged.
        If the session is reset while this runs, the reply is returned but
        not recorded.

        Raises:
            EmptyPromptError: text is empty, whitespace or not a string
            SessionBusyError: another submission is still processing

        Returns:
            The assistant's reply (also appended to messages)
        """
        intent = match_intent(text)
        if intent is None:
            raise EmptyPromptError("Prompt is empty")
        if self._processing:
            raise SessionBusyError("Still working on the previous request")

        self._processing = True
        generation = self._generation
        self.messages.append(ChatMessage(sender="user", text=text))
        try:
            seconds = self.forecast_delay if intent.mutation == Mutation.FORECAST else self.analyze_delay
            self.pending_delay = self.delay_factory(seconds)
            await self.pending_delay.wait()

            if intent is UNRECOGNIZED and self.analyst is not None:
                new_state, reply_text = self.state, await self._ask_analyst(text)
            else:
                new_state, reply_text = dispatch(intent, self.state)
        except DelayCancelled:
            logger.info("Request cancelled before it completed")
            new_state, reply_text = self.state, ERROR_REPLY
        except Exception:
            logger.exception("Chat request failed")
            new_state, reply_text = self.state, ERROR_REPLY
        finally:
            if generation == self._generation:
                self.pending_delay = None
                self._processing = False

        reply = ChatMessage(sender="assistant", text=reply_text)
        if generation != self._generation:
            logger.info("Session was reset during the request; dropping its reply")
            return reply
        self.state = new_state
        self.messages.append(reply)
        self.cursor.advance()
        return reply

    async def _ask_analyst(self, text: str) -> str:
        # the transcript already ends with this prompt; history is what came before it
        history = [HistoryMessage(sender=m.sender, text=m.text) for m in self.messages[:-1]]
        payload = AnalyzeQueryInput(
            query=text,
            sales_data=json.dumps(rows_to_records(self.state.rows)),
            history=history,
        )
        # the flow makes a blocking HTTP call; keep it off the event loop
        try:
            answer = await asyncio.to_thread(self.analyst, payload)
        except FlowError as e:
            logger.error("Analyst flow failed: %s", e)
            return ERROR_REPLY
        return answer.summary

    def reset(self):
        """
        Back to the welcome message, the first scripted prompt and the seed
        dashboard. A request still in flight is cancelled and its reply dropped.
        """
        if self._processing:
            logger.info("Reset while a request is pending; cancelling it")
            if self.pending_delay is not None:
                self.pending_delay.cancel()
        self._generation += 1
        self._processing = False
        self.pending_delay = None
        self.messages = [WELCOME]
        self.cursor.rewind()
        self.state = initial_state()
