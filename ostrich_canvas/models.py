"""
Pydantic models for the canvas state.

All models are frozen: state transitions build new objects with
model_copy(update=...) and never mutate in place, so two states can be
compared structurally with ==.
"""

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Row(_Frozen):
    """One sales record."""
    id: str
    product: str
    region: str
    month: str
    revenue: float
    marketing_spend: float = Field(alias="marketingSpend")
    cac: float


class LayoutItem(_Frozen):
    """A placed artifact tile on a sheet's grid."""
    i: str
    x: int
    y: int
    w: int
    h: int
    min_w: int = Field(default=1, alias="minW")
    min_h: int = Field(default=1, alias="minH")


class Sheet(_Frozen):
    id: str
    name: str
    layout: List[LayoutItem] = Field(default_factory=list)

    def tile_keys(self) -> List[str]:
        return [item.i for item in self.layout]


class Activity(_Frozen):
    """An entry in the history panel: a comment on an artifact or an AI action."""
    id: str
    type: Literal["comment", "action"]
    user: str
    avatar_fallback: str = Field(alias="avatarFallback")
    timestamp: str
    text: str
    artifact_name: Optional[str] = Field(default=None, alias="artifactName")
    resolved: bool = False


class ChatMessage(_Frozen):
    sender: Literal["user", "assistant"]
    text: str


class ABTestResult(_Frozen):
    variant: str
    users: int
    conversions: int
    marketing_spend: float = Field(alias="marketingSpend")


class WhatIfScenario(_Frozen):
    name: str
    pessimistic: float
    neutral: float
    optimistic: float


class DashboardState(_Frozen):
    """
    Everything the canvas renders from.

    rows is the master list; filtered_rows is the view derived from it by
    the active filters. previous_filtered_rows holds the view before the last
    filter so the chart can show both versions.
    """
    sheets: List[Sheet]
    active_sheet_id: str
    rows: List[Row]
    filters: List[Dict] = Field(default_factory=list)
    filtered_rows: List[Row]
    previous_filtered_rows: Optional[List[Row]] = None
    highlight_high_revenue: bool = False
    artifact_names: Dict[str, str]
    forecast: Optional[List[Row]] = None
    activities: List[Activity] = Field(default_factory=list)

    @property
    def active_sheet(self) -> Sheet:
        for sheet in self.sheets:
            if sheet.id == self.active_sheet_id:
                return sheet
        raise LookupError(f"active sheet {self.active_sheet_id!r} not found")
