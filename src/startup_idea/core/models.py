"""Pydantic data models: articles, reports and pipeline errors."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class PayloadShape(str, Enum):
    """Shapes an upstream news payload can take."""

    LIST = "list"
    DATA = "data"
    ARTICLES = "articles"
    OTHER = "other"


class NormalizedArticle(BaseModel):
    """An upstream article reduced to the fields the prompt needs."""

    title: str = Field(min_length=1)
    url: Optional[str] = None
    summary: str = ""


class TamEstimate(BaseModel):
    estimate: str
    methodology: str


class ReportSource(BaseModel):
    title: str
    url: str


class OpportunityReport(BaseModel):
    """The report shape the model is asked to produce.

    Advisory only: the pipeline returns whatever JSON the model produced and
    never validates against this model.
    """

    opportunity: str
    tam: TamEstimate
    why_now: str = Field(alias="whyNow")
    getting_started: list[str] = Field(alias="gettingStarted")
    source: ReportSource


class PipelineError(BaseModel):
    """Structured error returned through the normal reply channel."""

    error: str
    raw: Optional[str] = None

    def to_payload(self) -> dict:
        return self.model_dump(exclude_none=True)

