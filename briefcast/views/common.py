"""Common response schemas."""

from typing import Optional

from pydantic import BaseModel


class ErrorDetail(BaseModel):
    message: str
    stage: Optional[str] = None
    label: Optional[str] = None


class ErrorResponse(BaseModel):
    detail: ErrorDetail
