"""Input and output contracts for the AI flows.

The HTTP layer speaks camelCase (salesData, cleanedData); fields accept
either spelling and dump by alias.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _Schema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class HistoryMessage(_Schema):
    sender: str
    text: str


class Sale(_Schema):
    product: str
    region: str
    revenue: float
    month: str


class AnalyzeQueryInput(_Schema):
    query: str
    sales_data: str = Field(alias="salesData", description="Sales rows as a JSON string")
    history: List[HistoryMessage] = Field(default_factory=list)

    @field_validator("query")
    @classmethod
    def query_nonempty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Query cannot be empty")
        return v.strip()


class AnalyzeQueryOutput(_Schema):
    summary: str


class CleanDataInput(_Schema):
    sales_data: List[Sale] = Field(alias="salesData")


class CleanDataOutput(_Schema):
    cleaned_data: List[Sale] = Field(alias="cleanedData")
    summary: str


class ForecastInput(_Schema):
    months: int = Field(ge=1, le=24)
    sales_data: List[Sale] = Field(alias="salesData")


class ForecastOutput(_Schema):
    forecast: List[Sale]


class SummarizeThreadInput(_Schema):
    thread: str = Field(description="The conversation thread as a JSON string")


class SummarizeThreadOutput(_Schema):
    summary: str


class CalculateTotalInput(_Schema):
    column_name: str = Field(alias="columnName")
    sales_data: Optional[str] = Field(default=None, alias="salesData")
