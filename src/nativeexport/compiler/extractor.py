"""
Exported method extraction.

Walks the members of an implementation block, strips export markers from
the methods carrying them and records one ``ExportMethod`` per marked
method. The input block is never modified; a new block is returned.
"""

import logging
from dataclasses import dataclass, field

from nativeexport.compiler.directive import parse_directive
from nativeexport.models import (
    ClassMethodExport,
    Diagnostic,
    DiagnosticKind,
    ExportMethod,
    ImplBlock,
    Method,
)

logger = logging.getLogger(__name__)

DEFAULT_EXPORT_MARKER = "export"


@dataclass
class ExtractionResult:
    """Output of the extractor.

    Attributes:
        block: Implementation block with export markers removed
        export: Exported methods in declaration order
        diagnostics: Directive diagnostics in declaration order
    """

    block: ImplBlock
    export: ClassMethodExport
    diagnostics: list[Diagnostic] = field(default_factory=list)


class MethodExtractor:
    """Separates exported methods from the rest of an implementation block.

    Usage:
        extractor = MethodExtractor(export_marker="export")
        result = extractor.extract(block)
        for method in result.export.methods:
            ...
    """

    def __init__(self, export_marker: str = DEFAULT_EXPORT_MARKER) -> None:
        """Initialize the extractor.

        Args:
            export_marker: Last path segment identifying the export marker
        """
        self.export_marker = export_marker

    def extract(self, block: ImplBlock) -> ExtractionResult:
        """Extract exported methods from an implementation block.

        Args:
            block: The implementation block to process

        Returns:
            ExtractionResult with the rewritten block, the exported methods
            and the directive diagnostics
        """
        export = ClassMethodExport(class_name=block.type_name)
        diagnostics: list[Diagnostic] = []
        items = []

        for index, item in enumerate(block.items):
            if not isinstance(item, Method):
                items.append(item)
                continue

            method, exported, errors = self._extract_method(item, index)
            items.append(method)
            diagnostics.extend(errors)
            if exported is not None:
                export.add(exported)

        logger.debug(
            f"Extracted {export.method_count} exported methods from {block.type_name} "
            f"({len(block.items)} members, {len(diagnostics)} diagnostics)"
        )

        rewritten = block.model_copy(update={"items": items})
        return ExtractionResult(block=rewritten, export=export, diagnostics=diagnostics)

    def _extract_method(
        self,
        method: Method,
        index: int,
    ) -> tuple[Method, ExportMethod | None, list[Diagnostic]]:
        """Strip export markers from one method and parse the first one.

        Args:
            method: Method member
            index: Position of the member in the block

        Returns:
            Tuple of (rewritten method, export record or None, diagnostics)
        """
        markers = [a for a in method.attributes if a.is_marker(self.export_marker)]
        if not markers:
            return method, None, []

        diagnostics: list[Diagnostic] = []

        directive = parse_directive(markers[0])
        for diag in directive.diagnostics:
            diagnostics.append(diag.located(markers[0].span or method.span, method.name))

        for duplicate in markers[1:]:
            diagnostics.append(
                Diagnostic(
                    message="export marker was applied more than once",
                    kind=DiagnosticKind.DIRECTIVE_SHAPE,
                    span=duplicate.span or method.span,
                    method=method.name,
                )
            )

        remaining = [a for a in method.attributes if not a.is_marker(self.export_marker)]
        stripped = method.model_copy(update={"attributes": remaining})

        exported = ExportMethod(signature=stripped, args=directive.args, member_index=index)
        return stripped, exported, diagnostics
