"""
Diagnostic models.

A diagnostic is a compile-time error bound to a source location. The
compiler never raises for malformed user input; it returns diagnostics
next to its output instead.
"""

from pydantic import BaseModel, ConfigDict, Field

from nativeexport.models.base import DiagnosticKind
from nativeexport.models.syntax import Span


class Diagnostic(BaseModel):
    """A compile error attached to a source location.

    Attributes:
        message: Human-readable error text
        kind: Error category
        span: Location of the offending token
        method: Name of the method the error belongs to, if any
    """

    model_config = ConfigDict(frozen=True)

    message: str = Field(..., min_length=1)
    kind: DiagnosticKind = DiagnosticKind.SIGNATURE
    span: Span | None = None
    method: str | None = None

    def located(self, span: Span | None, method: str | None = None) -> "Diagnostic":
        """Copy with a fallback span and method name filled in."""
        return self.model_copy(
            update={
                "span": self.span or span,
                "method": self.method or method,
            }
        )

    def __str__(self) -> str:
        location = str(self.span) if self.span else "<unknown>"
        return f"{location}: error: {self.message}"
