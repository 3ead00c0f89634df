"""
Registration procedure emission.

Lowers validated exported methods into builder calls. Every method keeps
its declaration-order position: accepted ones become statements, rejected
ones become error markers.
"""

import logging

from nativeexport.compiler.validator import FIXED_PARAM_COUNT, check_optional_bound
from nativeexport.models import (
    Diagnostic,
    DiagnosticKind,
    ErrorMarker,
    Param,
    RegistrationProcedure,
    RegistrationStatement,
    ValidationOutcome,
    WrapperArg,
)

logger = logging.getLogger(__name__)


class RegistrationEmitter:
    """Builds the registration procedure of one class.

    Usage:
        emitter = RegistrationEmitter(builder_name="builder")
        procedure, diagnostics = emitter.emit("Player", outcomes)
    """

    def __init__(self, builder_name: str = "builder") -> None:
        """Initialize the emitter.

        Args:
            builder_name: Name of the procedure's builder parameter
        """
        self.builder_name = builder_name

    def emit(
        self,
        class_name: str,
        outcomes: list[ValidationOutcome],
    ) -> tuple[RegistrationProcedure, list[Diagnostic]]:
        """Emit the registration procedure for a class.

        Args:
            class_name: Class the methods belong to
            outcomes: Validation outcomes in declaration order

        Returns:
            Tuple of (procedure, diagnostics raised during emission)
        """
        procedure = RegistrationProcedure(class_name=class_name, builder_name=self.builder_name)
        diagnostics: list[Diagnostic] = []

        for outcome in outcomes:
            if not outcome.accepted:
                procedure.items.append(
                    ErrorMarker(method_name=outcome.method.name, diagnostics=outcome.diagnostics)
                )
                continue

            item = self.emit_method(class_name, outcome)
            if isinstance(item, ErrorMarker):
                diagnostics.extend(item.diagnostics)
            procedure.items.append(item)

        logger.debug(
            f"Emitted registration for {class_name}: {len(procedure.statements)} statements, "
            f"{len(procedure.errors)} error markers"
        )
        return procedure, diagnostics

    def emit_method(
        self,
        class_name: str,
        outcome: ValidationOutcome,
    ) -> RegistrationStatement | ErrorMarker:
        """Lower one accepted method.

        The optional count is checked again against the final arity.

        Args:
            class_name: Class owning the method
            outcome: Accepted validation outcome

        Returns:
            RegistrationStatement, or ErrorMarker if the method cannot be
            registered
        """
        method = outcome.method
        sig = method.signature
        params = sig.params

        if len(params) < FIXED_PARAM_COUNT:
            return self._marker(
                method.name,
                "exported methods must take self and owner as arguments",
                outcome,
            )

        bound_error = check_optional_bound(len(params), method.args.optional_arg_count)
        if bound_error:
            return self._marker(method.name, bound_error, outcome)

        optional_count = method.args.optional_arg_count or 0
        split = len(params) - optional_count
        required = [_wrapper_arg(p) for p in params[FIXED_PARAM_COUNT:split]]
        optional = [_wrapper_arg(p) for p in params[split:]]

        return RegistrationStatement(
            class_name=class_name,
            method_name=sig.name,
            receiver=_wrapper_arg(params[0]),
            owner=_wrapper_arg(params[1]),
            required=required,
            optional=optional,
            returns=sig.returns or "None",
            rpc_mode=method.args.rpc_mode,
            span=sig.span,
        )

    @staticmethod
    def _marker(name: str, message: str, outcome: ValidationOutcome) -> ErrorMarker:
        sig = outcome.method.signature
        diag = Diagnostic(
            message=message,
            kind=DiagnosticKind.SIGNATURE,
            span=sig.span,
            method=name,
        )
        return ErrorMarker(method_name=name, diagnostics=[diag])


def _wrapper_arg(param: Param) -> WrapperArg:
    if param.name is None:
        raise ValueError("parameters must be named before emission")
    return WrapperArg(name=param.name, annotation=param.annotation)
