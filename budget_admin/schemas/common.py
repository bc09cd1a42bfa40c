"""
Shared Pydantic v2 schemas reused across modules.

Provides the localized-text alias, the generic message envelope and the
error body returned by the exception handlers.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, Field

# ``{locale: text}`` mapping used by every translatable field
LocalizedText = Annotated[
    dict[str, str],
    Field(description="Text per locale, e.g. {'en': 'Name', 'es': 'Nombre'}."),
]


class MessageResponse(BaseModel):
    """Generic message envelope for operations that do not return a resource.

    Attributes:
        message: Short human-readable result summary.
        detail: Optional extended information.
    """

    message: str = Field(..., description="Short summary of the operation result.")
    detail: str | None = Field(
        default=None,
        description="Additional information (error context, hint, etc.).",
    )


class ErrorResponse(BaseModel):
    """Body returned for every ``BudgetAdminError``.

    Attributes:
        code: Machine-readable error code.
        message: Human-readable message.
        errors: Field-level messages for validation failures.
    """

    code: str
    message: str
    errors: dict[str, list[str]] | None = None
