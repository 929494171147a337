"""
Canvas Mutation Dispatcher - turns a matched intent into a state transition
and the assistant's confirmation text.
"""

import logging
from typing import Tuple

from . import state as transitions
from .data import FORECAST_DATA
from .filter_engine import make_filter
from .intents import Intent, Mutation
from .models import DashboardState

logger = logging.getLogger(__name__)

ASSISTANT_USER = "AI Assistant"
ASSISTANT_AVATAR = "AI"


def dispatch(intent: Intent, state: DashboardState) -> Tuple[DashboardState, str]:
    """
    Apply an intent to the dashboard.

    The input state is never modified. FORECAST does not wait here; the caller
    runs the mock delay before dispatching.

    Returns:
        (new_state, reply_text)
    """
    mutation = intent.mutation

    if mutation == Mutation.NONE:
        return state, intent.reply

    if mutation == Mutation.ADD_TILES:
        new_state = transitions.add_artifacts_to_layout(state, intent.tiles)
    elif mutation == Mutation.FILTER_ROWS:
        spec = make_filter('region', list(intent.regions), match='prefix',
                           description=f"Only regions: {', '.join(r.title() for r in intent.regions)}")
        new_state = transitions.apply_filter(state, spec)
    elif mutation == Mutation.HIGHLIGHT:
        new_state = transitions.set_highlight(state, True)
    elif mutation == Mutation.FORECAST:
        new_state = transitions.set_forecast(state, FORECAST_DATA)
        new_state = transitions.add_artifacts_to_layout(new_state, intent.tiles)
    else:
        raise ValueError(f"Unknown mutation: {mutation}")

    if intent.activity:
        new_state = transitions.add_activity(new_state, 'action', ASSISTANT_USER, ASSISTANT_AVATAR,
                                             intent.activity)
    logger.info("Dispatched intent %s (%s)", intent.key, mutation.value)
    return new_state, intent.reply
