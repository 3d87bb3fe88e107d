"""Pydantic schemas for the intake API."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field


# ── input ─────────────────────────────────────────────────────────────────────

class TicketText(BaseModel):
    text: str = Field(..., max_length=5000,
                      examples=["Mon imprimante ne fonctionne plus, c'est urgent !"])


class ClassifyIn(TicketText):
    ticket_type: Optional[Literal["incident", "request"]] = Field(
        None, description="Only used by the category task; inferred when omitted",
    )


# ── per-task results ──────────────────────────────────────────────────────────

Source = Literal["model", "rules", "default"]


class TypeOut(BaseModel):
    type:       Literal["incident", "request"]
    type_id:    int
    confidence: float = Field(..., ge=0.0, le=1.0)
    source:     Source


class CategoryOut(BaseModel):
    category:    str
    category_id: int
    confidence:  float = Field(..., ge=0.0, le=1.0)
    source:      Source


class UrgencyOut(BaseModel):
    urgency:    int = Field(..., ge=1, le=5, description="1 = most urgent")
    confidence: float = Field(..., ge=0.0, le=1.0)
    source:     Source


class SentimentOut(BaseModel):
    sentiment:  Literal["negative", "neutral", "positive"]
    confidence: float = Field(..., ge=0.0, le=1.0)
    source:     Source
    scale:      str


class ComplexityOut(BaseModel):
    complexity: Literal["simple", "moderate", "complex"]
    confidence: float = Field(..., ge=0.0, le=1.0)
    source:     Source
    score:      int = Field(..., ge=1, le=3)


class EntitiesOut(BaseModel):
    dates:         list[str] = []
    emails:        list[str] = []
    phones:        list[str] = []
    urls:          list[str] = []
    ips:           list[str] = []
    people:        list[str] = []
    organizations: list[str] = []
    locations:     list[str] = []


class FollowUpOut(BaseModel):
    is_follow_up:  bool
    ticket_number: Optional[str] = None
    keywords:      list[str] = []


class AnalysisOut(BaseModel):
    original_text: str
    improved_text: str
    title:         str
    type:          TypeOut
    category:      CategoryOut
    category_name: str
    urgency:       UrgencyOut
    sentiment:     SentimentOut
    complexity:    ComplexityOut
    entities:      EntitiesOut
    follow_up:     FollowUpOut
    missing_info:  list[str] = Field(..., min_length=1)


class ClassificationOut(BaseModel):
    """Flat view of any single-task result."""
    task:       str
    label:      str | int
    label_id:   Optional[int] = None
    confidence: float = Field(..., ge=0.0, le=1.0)
    source:     Source


# ── shared ────────────────────────────────────────────────────────────────────

class HealthOut(BaseModel):
    status:         Literal["ok"] = "ok"
    mode:           Literal["ensemble", "rules"]
    models_ready:   bool
    tasks:          list[str]
    uptime_seconds: float
