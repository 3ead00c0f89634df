"""
Registration procedure models.

The emitter lowers each accepted exported method into a
``RegistrationStatement`` and each rejected one into an ``ErrorMarker``.
A ``RegistrationProcedure`` holds them in declaration order.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, computed_field

from nativeexport.models.base import RpcMode
from nativeexport.models.diagnostics import Diagnostic
from nativeexport.models.syntax import Span


class WrapperArg(BaseModel):
    """A parameter as seen by the dispatch wrapper."""

    name: str = Field(..., min_length=1)
    annotation: str | None = None


class RegistrationStatement(BaseModel):
    """One builder call registering an exported method.

    Attributes:
        class_name: Class owning the method
        method_name: Name the method is registered under
        receiver: Receiver parameter
        owner: Owner/context parameter
        required: Required parameters after the owner
        optional: Trailing optional parameters
        returns: Return annotation text
        rpc_mode: Remote-call mode passed to the builder
        span: Location of the method name
    """

    kind: Literal["statement"] = "statement"
    class_name: str
    method_name: str
    receiver: WrapperArg
    owner: WrapperArg
    required: list[WrapperArg] = Field(default_factory=list)
    optional: list[WrapperArg] = Field(default_factory=list)
    returns: str = "None"
    rpc_mode: RpcMode = RpcMode.DISABLED
    span: Span | None = None

    @computed_field
    @property
    def arity(self) -> int:
        """Total parameter count including receiver and owner."""
        return 2 + len(self.required) + len(self.optional)


class ErrorMarker(BaseModel):
    """Visible placeholder for a method that could not be registered."""

    kind: Literal["error"] = "error"
    method_name: str
    diagnostics: list[Diagnostic] = Field(default_factory=list)


RegistrationItem = Annotated[
    Union[RegistrationStatement, ErrorMarker],
    Field(discriminator="kind"),
]


class RegistrationProcedure(BaseModel):
    """The registration function generated for one class.

    Attributes:
        class_name: Class the procedure registers methods for
        builder_name: Name of the sole builder parameter
        items: Statements and error markers in declaration order
    """

    class_name: str
    builder_name: str = "builder"
    items: list[RegistrationItem] = Field(default_factory=list)

    @property
    def statements(self) -> list[RegistrationStatement]:
        return [i for i in self.items if isinstance(i, RegistrationStatement)]

    @property
    def errors(self) -> list[ErrorMarker]:
        return [i for i in self.items if isinstance(i, ErrorMarker)]
