"""
Signature validation and normalization of exported methods.

Each exported method is either accepted, with a normalized signature that
the dispatch wrapper can call, or rejected with signature diagnostics.
Rejections affect only the method itself.
"""

import logging

from nativeexport.models import (
    Attribute,
    Diagnostic,
    DiagnosticKind,
    ExportMethod,
    ExportStatus,
    GenericKind,
    Method,
    Param,
    ParamKind,
    Span,
    ValidationOutcome,
)

logger = logging.getLogger(__name__)

# Receiver and owner
FIXED_PARAM_COUNT = 2

UNUSED_ARG_TEMPLATE = "___unused_arg_{index}"

_GENERIC_MESSAGES = [
    (GenericKind.TYPE, "type parameters not allowed in exported functions"),
    (GenericKind.LIFETIME, "lifetime parameters not allowed in exported functions"),
    (GenericKind.CONST, "const parameters not allowed in exported functions"),
]


def check_optional_bound(param_count: int, optional_count: int | None) -> str | None:
    """Check that the optional parameters fit after receiver and owner.

    Args:
        param_count: Total parameter count
        optional_count: Declared or derived optional count

    Returns:
        Error message, or None if the count is within bounds
    """
    if optional_count is None:
        return None
    max_optional = param_count - FIXED_PARAM_COUNT
    if optional_count > max_optional:
        return (
            f"there can be at most {max_optional} optional arguments, got {optional_count}"
        )
    return None


class SignatureValidator:
    """Validates and normalizes exported method signatures.

    Rules, in order:
    1. At least two parameters (receiver and owner); nothing else is checked
       when this fails.
    2. No type, lifetime or const generic parameters.
    3. Not a coroutine.
    4. Only positional parameters.
    5. Optional parameters come after the owner and form a trailing run.
    6. The optional count fits after receiver and owner.

    Accepted methods are normalized: optional and mutable markers removed,
    discard parameters named, unsafety dropped. Rejected methods only lose
    their optional markers (see strip_optional).
    """

    def __init__(
        self,
        optional_marker: str = "opt",
        mutable_marker: str = "mut",
        unsafe_marker: str = "unsafe",
    ) -> None:
        """Initialize the validator.

        Args:
            optional_marker: Parameter marker for optional parameters
            mutable_marker: Parameter marker for mutable bindings
            unsafe_marker: Method marker for unsafe methods
        """
        self.optional_marker = optional_marker
        self.mutable_marker = mutable_marker
        self.unsafe_marker = unsafe_marker

    def validate(self, method: ExportMethod) -> ValidationOutcome:
        """Validate one exported method.

        Args:
            method: Exported method as produced by the extractor

        Returns:
            ValidationOutcome, accepted with a normalized method or rejected
            with diagnostics
        """
        sig = method.signature
        span = sig.span

        if len(sig.params) < FIXED_PARAM_COUNT:
            return self._reject(
                method,
                [self._error("exported methods must take self and owner as arguments", span, sig)],
            )

        diagnostics: list[Diagnostic] = []

        for kind, message in _GENERIC_MESSAGES:
            offending = sig.generics_of(kind)
            if offending:
                diagnostics.append(self._error(message, offending[0].span or span, sig))

        if sig.is_async:
            diagnostics.append(self._error("async methods cannot be exported", span, sig))

        for param in sig.params:
            if param.kind != ParamKind.POSITIONAL:
                diagnostics.append(
                    self._error(
                        "variadic and keyword-only parameters not allowed in exported functions",
                        param.span or span,
                        sig,
                    )
                )
                break

        optional_count, placement = self._count_optional(sig)
        diagnostics.extend(placement)

        if diagnostics:
            return self._reject(method, diagnostics)

        if optional_count is None:
            optional_count = method.args.optional_arg_count

        bound_error = check_optional_bound(len(sig.params), optional_count)
        if bound_error:
            return self._reject(method, [self._error(bound_error, span, sig)])

        args = method.args.model_copy(update={"optional_arg_count": optional_count})
        normalized = method.model_copy(
            update={"signature": self.normalize(sig), "args": args}
        )

        logger.debug(
            f"Accepted {sig.name}: {len(sig.params)} params, "
            f"{optional_count or 0} optional, rpc={args.rpc_mode.value}"
        )
        return ValidationOutcome(method=normalized, status=ExportStatus.ACCEPTED)

    def _count_optional(self, sig: Method) -> tuple[int | None, list[Diagnostic]]:
        """Count optional parameters and check their placement.

        Args:
            sig: Method signature

        Returns:
            Tuple of (optional count or None if none marked, diagnostics)
        """
        count: int | None = None
        diagnostics: list[Diagnostic] = []

        for index, param in enumerate(sig.params):
            span = param.span or sig.span
            if param.has_marker(self.optional_marker):
                if index < FIXED_PARAM_COUNT:
                    diagnostics.append(
                        self._error("self or owner cannot be optional", span, sig)
                    )
                    continue
                count = (count or 0) + 1
            elif count is not None:
                diagnostics.append(
                    self._error("cannot add required parameters after optional ones", span, sig)
                )

        return count, diagnostics

    def normalize(self, sig: Method) -> Method:
        """Produce the exported form of a method signature.

        Args:
            sig: Accepted method signature

        Returns:
            New Method with markers, mutability and unsafety removed and
            every parameter named
        """
        params = [self._normalize_param(index, p) for index, p in enumerate(sig.params)]
        attributes = [a for a in sig.attributes if not a.is_marker(self.unsafe_marker)]
        return sig.model_copy(update={"params": params, "attributes": attributes, "unsafe": False})

    def strip_optional(self, sig: Method) -> Method:
        """Remove optional markers from every parameter, leaving all else as written.

        Applies to every exported method, accepted or rejected.
        """
        params = [
            p.model_copy(update={"attributes": self._without(p, self.optional_marker)})
            for p in sig.params
        ]
        return sig.model_copy(update={"params": params})

    def _normalize_param(self, index: int, param: Param) -> Param:
        attributes = self._without(param, self.optional_marker, self.mutable_marker)
        name = param.name if param.name is not None else UNUSED_ARG_TEMPLATE.format(index=index)
        return param.model_copy(update={"name": name, "mutable": False, "attributes": attributes})

    @staticmethod
    def _without(param: Param, *markers: str) -> list[Attribute]:
        return [a for a in param.attributes if not any(a.is_marker(m) for m in markers)]

    def _reject(self, method: ExportMethod, diagnostics: list[Diagnostic]) -> ValidationOutcome:
        logger.debug(f"Rejected {method.name}: {'; '.join(d.message for d in diagnostics)}")
        return ValidationOutcome(
            method=method,
            status=ExportStatus.REJECTED,
            diagnostics=diagnostics,
        )

    @staticmethod
    def _error(message: str, span: Span | None, sig: Method) -> Diagnostic:
        return Diagnostic(
            message=message,
            kind=DiagnosticKind.SIGNATURE,
            span=span or sig.span,
            method=sig.name,
        )
