"""Assistant ("Clippy") schemas."""

from typing import List

from pydantic import BaseModel, Field, field_validator

from .base import ApiModel, strip_required


class AskRequest(ApiModel):
    question: str

    @field_validator('question')
    @classmethod
    def validate_question(cls, v: str) -> str:
        return strip_required(v, label="Question")


class AskResponse(ApiModel):
    answer: str


class UpdateContextResponse(ApiModel):
    message: str


class QueryPlan(BaseModel):
    """Planner output: which query operations to run, and why."""
    queries: List[str] = Field(default_factory=list)
    reasoning: str = ""
