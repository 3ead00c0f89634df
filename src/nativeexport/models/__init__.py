"""
Data models for the export compiler.

- base: shared enumerations (RpcMode, DiagnosticKind, ...)
- syntax: language-neutral syntax tree of an implementation block
- export: parsed directives and exported-method records
- diagnostics: compile errors bound to source locations
- registration: lowered registration procedure
"""

from nativeexport.models.base import (
    DiagnosticKind,
    ExportStatus,
    GenericKind,
    LitType,
    ParamKind,
    RpcMode,
)
from nativeexport.models.diagnostics import Diagnostic
from nativeexport.models.export import (
    ClassMethodExport,
    ExportArgs,
    ExportMethod,
    ValidationOutcome,
)
from nativeexport.models.registration import (
    ErrorMarker,
    RegistrationProcedure,
    RegistrationStatement,
    WrapperArg,
)
from nativeexport.models.syntax import (
    Attribute,
    GenericParam,
    ImplBlock,
    ListMeta,
    LitMeta,
    Method,
    NameValueMeta,
    Param,
    PathMeta,
    RawMeta,
    Span,
    VerbatimItem,
)

__all__ = [
    # Enums
    "DiagnosticKind",
    "ExportStatus",
    "GenericKind",
    "LitType",
    "ParamKind",
    "RpcMode",
    # Syntax tree
    "Attribute",
    "GenericParam",
    "ImplBlock",
    "ListMeta",
    "LitMeta",
    "Method",
    "NameValueMeta",
    "Param",
    "PathMeta",
    "RawMeta",
    "Span",
    "VerbatimItem",
    # Export metadata
    "ClassMethodExport",
    "ExportArgs",
    "ExportMethod",
    "ValidationOutcome",
    # Diagnostics
    "Diagnostic",
    # Registration
    "ErrorMarker",
    "RegistrationProcedure",
    "RegistrationStatement",
    "WrapperArg",
]
