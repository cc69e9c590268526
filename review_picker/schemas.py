"""Pydantic models for HTTP responses."""
from typing import Any, Optional

from pydantic import BaseModel


class NextReviewResponse(BaseModel):
    done: bool = False
    review: Any = None
    remaining: int


class NoReviewsResponse(BaseModel):
    done: bool = True
    message: str
    review: Optional[Any] = None


class StatusResponse(BaseModel):
    count: int


class ErrorResponse(BaseModel):
    error: str
