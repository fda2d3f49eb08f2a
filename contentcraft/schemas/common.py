"""Common schemas (errors, delete acknowledgements)."""
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str = Field(..., description="Error message")
    code: Optional[str] = Field(None, description="Error taxonomy tag")
    extra: Optional[Dict[str, Any]] = Field(None, description="Extra context")


class SuccessResponse(BaseModel):
    """Acknowledgement returned by delete operations."""

    success: bool = Field(True, description="True when the record was removed")
