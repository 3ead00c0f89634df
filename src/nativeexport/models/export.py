"""
Export metadata models.

An ``ExportArgs`` is the parsed directive of one export marker. An
``ExportMethod`` pairs it with the method's signature, and a
``ClassMethodExport`` collects them for one implementation block in
declaration order.
"""

from functools import total_ordering

from pydantic import BaseModel, ConfigDict, Field, computed_field

from nativeexport.models.base import ExportStatus, RpcMode
from nativeexport.models.diagnostics import Diagnostic
from nativeexport.models.syntax import Method


@total_ordering
class ExportArgs(BaseModel):
    """Configuration parsed from one export directive.

    Attributes:
        optional_arg_count: Number of trailing optional parameters, None when
            no parameter is marked optional
        rpc_mode: Remote-call mode of the method
    """

    model_config = ConfigDict(frozen=True)

    optional_arg_count: int | None = Field(
        default=None,
        ge=0,
        description="Trailing optional parameter count",
    )
    rpc_mode: RpcMode = Field(default=RpcMode.DISABLED, description="Remote-call mode")

    def sort_key(self) -> tuple[bool, int, int]:
        """Key ordering None before any count, then count, then mode."""
        return (
            self.optional_arg_count is not None,
            self.optional_arg_count or 0,
            self.rpc_mode.rank,
        )

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ExportArgs):
            return NotImplemented
        return self.sort_key() < other.sort_key()


class ExportMethod(BaseModel):
    """A method carrying the export marker.

    Attributes:
        signature: Full method declaration, markers already stripped
        args: Parsed directive
        member_index: Position of the method in the implementation block
    """

    signature: Method
    args: ExportArgs = Field(default_factory=ExportArgs)
    member_index: int = Field(default=0, ge=0)

    @property
    def name(self) -> str:
        return self.signature.name


class ClassMethodExport(BaseModel):
    """Exported methods of one implementation block.

    Attributes:
        class_name: Type name of the class
        methods: Exported methods in declaration order
    """

    class_name: str = Field(..., min_length=1)
    methods: list[ExportMethod] = Field(default_factory=list)

    @computed_field
    @property
    def method_count(self) -> int:
        return len(self.methods)

    def add(self, method: ExportMethod) -> None:
        """Append a method, keeping declaration order."""
        self.methods.append(method)

    def names(self) -> list[str]:
        return [m.name for m in self.methods]


class ValidationOutcome(BaseModel):
    """Result of validating one exported method.

    Attributes:
        method: The method, normalized when accepted
        status: Accepted or rejected
        diagnostics: Signature diagnostics, empty when accepted
    """

    method: ExportMethod
    status: ExportStatus = ExportStatus.PARSED
    diagnostics: list[Diagnostic] = Field(default_factory=list)

    @property
    def accepted(self) -> bool:
        return self.status == ExportStatus.ACCEPTED
