"""
Reducer-style transitions over DashboardState.

Every function takes a state and returns a new one. Invalid transitions
(removing the last sheet, blank names, unknown ids) return the state unchanged.
"""

import logging
import uuid
from typing import Dict, Iterable, List

from .data import ARTIFACT_NAMES, FULL_LAYOUT, SALES_DATA, SEED_ACTIVITIES
from .filter_engine import FilterEngine
from .models import Activity, DashboardState, LayoutItem, Row, Sheet

logger = logging.getLogger(__name__)

DEMO_SHEET_ID = "sheet1"

_engine = FilterEngine()


def initial_state() -> DashboardState:
    """The seed state: a blank demo sheet, the full dashboard, unfiltered rows."""
    rows = list(SALES_DATA)
    return DashboardState(
        sheets=[
            Sheet(id=DEMO_SHEET_ID, name="Demo Sheet", layout=[]),
            Sheet(id="sheet2", name="Full Dashboard", layout=list(FULL_LAYOUT)),
        ],
        active_sheet_id=DEMO_SHEET_ID,
        rows=rows,
        filtered_rows=list(rows),
        artifact_names=dict(ARTIFACT_NAMES),
        activities=list(SEED_ACTIVITIES),
    )


# --- Layout ---

def _replace_sheet(state: DashboardState, sheet: Sheet) -> DashboardState:
    sheets = [sheet if s.id == sheet.id else s for s in state.sheets]
    return state.model_copy(update={'sheets': sheets})


def add_artifacts_to_layout(state: DashboardState, artifact_keys: Iterable[str]) -> DashboardState:
    """
    Place the given artifacts on the active sheet at their full-dashboard
    positions. Keys already on the sheet, or with no known position, are skipped.
    """
    keys = list(artifact_keys)
    sheet = state.active_sheet
    present = set(sheet.tile_keys())
    new_items = [item for item in FULL_LAYOUT if item.i in keys and item.i not in present]
    if not new_items:
        return state
    return _replace_sheet(state, sheet.model_copy(update={'layout': sheet.layout + new_items}))


def update_layout(state: DashboardState, layout: List[LayoutItem]) -> DashboardState:
    """Replace the active sheet's layout (tiles dragged or resized)."""
    sheet = state.active_sheet
    return _replace_sheet(state, sheet.model_copy(update={'layout': list(layout)}))


# --- Sheets ---

def add_sheet(state: DashboardState) -> DashboardState:
    """Append a blank sheet named after its position and make it active."""
    n = len(state.sheets) + 1
    existing = {s.id for s in state.sheets}
    sheet_id = f"sheet{n}"
    while sheet_id in existing:
        n += 1
        sheet_id = f"sheet{n}"
    sheet = Sheet(id=sheet_id, name=f"Sheet {len(state.sheets) + 1}", layout=[])
    return state.model_copy(update={'sheets': state.sheets + [sheet], 'active_sheet_id': sheet.id})


def remove_sheet(state: DashboardState, sheet_id: str) -> DashboardState:
    """Remove a sheet. The only remaining sheet can't be removed."""
    if len(state.sheets) <= 1:
        logger.debug("Refusing to remove the only sheet")
        return state
    index = next((i for i, s in enumerate(state.sheets) if s.id == sheet_id), None)
    if index is None:
        return state

    sheets = [s for s in state.sheets if s.id != sheet_id]
    active = state.active_sheet_id
    if active == sheet_id:
        active = sheets[max(0, index - 1)].id
    return state.model_copy(update={'sheets': sheets, 'active_sheet_id': active})


def rename_sheet(state: DashboardState, sheet_id: str, new_name: str) -> DashboardState:
    new_name = (new_name or '').strip()
    if not new_name:
        return state
    sheets = [s.model_copy(update={'name': new_name}) if s.id == sheet_id else s for s in state.sheets]
    return state.model_copy(update={'sheets': sheets})


def set_active_sheet(state: DashboardState, sheet_id: str) -> DashboardState:
    if not any(s.id == sheet_id for s in state.sheets):
        return state
    return state.model_copy(update={'active_sheet_id': sheet_id})


# --- Artifacts ---

def rename_artifact(state: DashboardState, key: str, new_name: str) -> DashboardState:
    new_name = (new_name or '').strip()
    if not new_name or key not in state.artifact_names:
        return state
    return state.model_copy(update={'artifact_names': {**state.artifact_names, key: new_name}})


# --- Rows and filters ---

def add_row(state: DashboardState) -> DashboardState:
    """Append a blank row to the master list and to the current view."""
    row = Row(id=str(uuid.uuid4()), product="New Item", region="N/A", month="N/A",
              revenue=0, marketing_spend=0, cac=0)
    return state.model_copy(update={
        'rows': state.rows + [row],
        'filtered_rows': state.filtered_rows + [row],
    })


def delete_row(state: DashboardState, row_id: str) -> DashboardState:
    if not any(r.id == row_id for r in state.rows):
        return state
    return state.model_copy(update={
        'rows': [r for r in state.rows if r.id != row_id],
        'filtered_rows': [r for r in state.filtered_rows if r.id != row_id],
    })


def apply_filter(state: DashboardState, filter_spec: Dict) -> DashboardState:
    """
    Replace the filtered view with the rows matching the filter stack plus
    filter_spec. The previous view is kept so the chart can compare versions.
    """
    filters = state.filters + [filter_spec]
    return state.model_copy(update={
        'filters': filters,
        'filtered_rows': _engine.apply(state.rows, filters),
        'previous_filtered_rows': state.filtered_rows,
    })


def clear_filters(state: DashboardState) -> DashboardState:
    return state.model_copy(update={
        'filters': [],
        'filtered_rows': list(state.rows),
        'previous_filtered_rows': None,
    })


def set_highlight(state: DashboardState, enabled: bool = True) -> DashboardState:
    return state.model_copy(update={'highlight_high_revenue': bool(enabled)})


def set_forecast(state: DashboardState, forecast: List[Row]) -> DashboardState:
    return state.model_copy(update={'forecast': list(forecast)})


# --- History panel ---

def add_activity(state: DashboardState, activity_type: str, user: str, avatar_fallback: str,
                 text: str, artifact_name: str = None) -> DashboardState:
    """Prepend an activity; the newest entry is always first."""
    activity = Activity(id=f"act-{uuid.uuid4().hex[:12]}", type=activity_type, user=user,
                        avatar_fallback=avatar_fallback, timestamp="Just now",
                        text=text, artifact_name=artifact_name)
    return state.model_copy(update={'activities': [activity] + state.activities})


def add_comment(state: DashboardState, artifact_name: str, text: str,
                user: str = "You", avatar_fallback: str = "U") -> DashboardState:
    text = (text or '').strip()
    if not text:
        return state
    return add_activity(state, 'comment', user, avatar_fallback, text, artifact_name=artifact_name)


def resolve_comment(state: DashboardState, activity_id: str) -> DashboardState:
    activities = [
        a.model_copy(update={'resolved': True}) if a.id == activity_id else a
        for a in state.activities
    ]
    return state.model_copy(update={'activities': activities})


def scrap_comment(state: DashboardState, activity_id: str) -> DashboardState:
    return state.model_copy(update={'activities': [a for a in state.activities if a.id != activity_id]})
