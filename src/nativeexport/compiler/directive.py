"""
Export directive parsing.

Turns the payload of one export marker into an ``ExportArgs``. Problems are
collected as diagnostics instead of raised: a malformed top-level payload
stops parsing of that directive, a bad name/value pair is dropped and the
remaining pairs are still parsed.
"""

import logging
from dataclasses import dataclass, field

from nativeexport.models import (
    Attribute,
    Diagnostic,
    DiagnosticKind,
    ExportArgs,
    ListMeta,
    LitMeta,
    LitType,
    NameValueMeta,
    RpcMode,
    Span,
)

logger = logging.getLogger(__name__)

RPC_KEY = "rpc"


@dataclass
class DirectiveResult:
    """Parsed directive and the diagnostics produced while parsing it.

    Attributes:
        args: Export configuration, defaults for anything not parsed
        diagnostics: Errors in payload order
    """

    args: ExportArgs = field(default_factory=ExportArgs)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics


def parse_directive(attr: Attribute) -> DirectiveResult:
    """Parse the payload of an export marker.

    Args:
        attr: The export marker attribute

    Returns:
        DirectiveResult with the parsed ExportArgs and any diagnostics
    """
    result = DirectiveResult()
    payload = attr.args

    if payload is None:
        return result

    if isinstance(payload, ListMeta):
        pairs: list[NameValueMeta] = []
        for item in payload.items:
            if isinstance(item, NameValueMeta):
                pairs.append(item)
            else:
                result.diagnostics.append(
                    _error(
                        f"unexpected argument in list: {item.render()}",
                        item.span or attr.span,
                        DiagnosticKind.SEMANTIC,
                    )
                )
    elif isinstance(payload, NameValueMeta):
        pairs = [payload]
    else:
        result.diagnostics.append(
            _error(
                f"unexpected attribute argument: {payload.render()}",
                payload.span or attr.span,
                DiagnosticKind.DIRECTIVE_SHAPE,
            )
        )
        return result

    rpc_mode: RpcMode | None = None

    for pair in pairs:
        span = pair.span or attr.span
        key = pair.key

        if key is None:
            result.diagnostics.append(
                _error("the path should not be empty", span, DiagnosticKind.SEMANTIC)
            )
            continue

        if key != RPC_KEY:
            result.diagnostics.append(
                _error(f"unknown option for export: `{key}`", span, DiagnosticKind.SEMANTIC)
            )
            continue

        value = pair.value
        if not (isinstance(value, LitMeta) and value.lit_type == LitType.STR):
            result.diagnostics.append(
                _error(
                    "unexpected type for rpc value, expected string",
                    span,
                    DiagnosticKind.SEMANTIC,
                )
            )
            continue

        mode = RpcMode.parse(str(value.value))
        if mode is None:
            result.diagnostics.append(
                _error(
                    f"unexpected value for rpc: `{value.value}`",
                    value.span or span,
                    DiagnosticKind.SEMANTIC,
                )
            )
            continue

        if rpc_mode is not None:
            result.diagnostics.append(
                _error("rpc mode was set more than once", span, DiagnosticKind.SEMANTIC)
            )
            continue

        rpc_mode = mode

    if rpc_mode is not None:
        result.args = ExportArgs(rpc_mode=rpc_mode)

    logger.debug(
        f"Parsed directive {attr.render()}: rpc={result.args.rpc_mode.value}, "
        f"{len(result.diagnostics)} diagnostics"
    )
    return result


def _error(message: str, span: Span | None, kind: DiagnosticKind) -> Diagnostic:
    return Diagnostic(message=message, kind=kind, span=span)
