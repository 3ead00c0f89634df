"""
Export compiler pipeline.

Drives one implementation block through extraction, validation and
emission:

    block -> MethodExtractor -> SignatureValidator -> RegistrationEmitter

The pipeline never raises for user errors. Every diagnostic is returned in
``DeriveResult.diagnostics`` in pass order: directive diagnostics first,
then signature diagnostics, both in declaration order.
"""

import logging
from dataclasses import dataclass, field

from nativeexport.compiler.emitter import RegistrationEmitter
from nativeexport.compiler.extractor import MethodExtractor
from nativeexport.compiler.validator import SignatureValidator
from nativeexport.config.models import NativeExportConfig
from nativeexport.models import (
    ClassMethodExport,
    Diagnostic,
    ImplBlock,
    RegistrationProcedure,
    ValidationOutcome,
)

logger = logging.getLogger(__name__)


@dataclass
class DeriveResult:
    """Everything produced for one implementation block.

    Attributes:
        implementation: Rewritten block, markers stripped and accepted
            methods normalized
        export: Exported methods as parsed, in declaration order
        outcomes: Validation outcome per exported method
        registration: Generated registration procedure
        diagnostics: All diagnostics of the pass
    """

    implementation: ImplBlock
    export: ClassMethodExport
    outcomes: list[ValidationOutcome]
    registration: RegistrationProcedure
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics

    @property
    def class_name(self) -> str:
        return self.implementation.type_name


def derive_methods(
    block: ImplBlock,
    config: NativeExportConfig | None = None,
) -> DeriveResult:
    """Compile the exported methods of an implementation block.

    Args:
        block: Input implementation block (not modified)
        config: Compiler configuration, defaults if None

    Returns:
        DeriveResult with the rewritten block, registration procedure and
        diagnostics
    """
    config = config or NativeExportConfig()
    markers = config.markers

    extractor = MethodExtractor(export_marker=markers.export)
    validator = SignatureValidator(
        optional_marker=markers.optional,
        mutable_marker=markers.mutable,
        unsafe_marker=markers.unsafe,
    )
    emitter = RegistrationEmitter(builder_name=config.codegen.builder_name)

    extraction = extractor.extract(block)
    diagnostics = list(extraction.diagnostics)

    outcomes = [validator.validate(method) for method in extraction.export.methods]
    for outcome in outcomes:
        diagnostics.extend(outcome.diagnostics)

    registration, emit_diagnostics = emitter.emit(block.type_name, outcomes)
    diagnostics.extend(emit_diagnostics)

    items = list(extraction.block.items)
    for outcome in outcomes:
        signature = outcome.method.signature
        if not outcome.accepted:
            signature = validator.strip_optional(signature)
        items[outcome.method.member_index] = signature
    implementation = extraction.block.model_copy(update={"items": items})

    logger.info(
        f"{block.type_name}: {len(registration.statements)} methods registered, "
        f"{len(diagnostics)} diagnostics"
    )

    return DeriveResult(
        implementation=implementation,
        export=extraction.export,
        outcomes=outcomes,
        registration=registration,
        diagnostics=diagnostics,
    )
