"""
Compilation driver.

Connects the front-ends, the compiler pipeline and the Python writer:

    Python module -> PythonSourceReader -> derive_methods (per class)
                  -> PythonWriter -> module text + diagnostics

    JSON/YAML tree -> load_tree -> derive_methods (per block) -> results
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from nativeexport.codegen.python_writer import PythonWriter
from nativeexport.compiler.pipeline import DeriveResult, derive_methods
from nativeexport.config.models import NativeExportConfig
from nativeexport.frontend.python_source import FrontendError, PythonSourceReader
from nativeexport.frontend.tree_loader import is_tree_file, load_tree
from nativeexport.models import Diagnostic, ImplBlock

logger = logging.getLogger(__name__)


@dataclass
class CompileResult:
    """Output of compiling one input.

    Attributes:
        source: Input name
        results: Per-class results in source order
        output: Generated module text, None for tree input
    """

    source: str
    results: list[DeriveResult] = field(default_factory=list)
    output: str | None = None

    @property
    def diagnostics(self) -> list[Diagnostic]:
        """All diagnostics in class order."""
        return [d for r in self.results for d in r.diagnostics]

    @property
    def ok(self) -> bool:
        return not self.diagnostics

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "source": self.source,
            "classes": [
                {
                    "class_name": r.class_name,
                    "implementation": r.implementation.model_dump(mode="json"),
                    "export": r.export.model_dump(mode="json"),
                    "registration": r.registration.model_dump(mode="json"),
                    "diagnostics": [d.model_dump(mode="json") for d in r.diagnostics],
                }
                for r in self.results
            ],
        }


def compile_source(
    source: str,
    filename: str = "<input>",
    config: NativeExportConfig | None = None,
) -> CompileResult:
    """Compile the marked classes of a Python module.

    Args:
        source: Module source text
        filename: Name used in spans and diagnostics
        config: Compiler configuration, defaults if None

    Returns:
        CompileResult with the rewritten module text

    Raises:
        FrontendError: If the source cannot be parsed
    """
    config = config or NativeExportConfig()
    reader = PythonSourceReader(config.markers)
    writer = PythonWriter(config.codegen, config.markers)

    module = reader.read(source, filename)
    result = CompileResult(source=filename)

    for source_class in module.classes:
        result.results.append(derive_methods(source_class.block, config))

    result.output = writer.render_module(
        module.tree,
        [(c, r.implementation) for c, r in zip(module.classes, result.results)],
        [r.registration for r in result.results],
    )

    logger.info(
        f"Compiled {filename}: {len(result.results)} classes, "
        f"{len(result.diagnostics)} diagnostics"
    )
    return result


def compile_tree(
    blocks: list[ImplBlock],
    source: str = "<input>",
    config: NativeExportConfig | None = None,
) -> CompileResult:
    """Compile implementation blocks loaded from a serialized tree.

    Args:
        blocks: Implementation blocks
        source: Input name
        config: Compiler configuration, defaults if None

    Returns:
        CompileResult without module text
    """
    result = CompileResult(source=source)
    for block in blocks:
        result.results.append(derive_methods(block, config))

    logger.info(
        f"Compiled {source}: {len(result.results)} blocks, "
        f"{len(result.diagnostics)} diagnostics"
    )
    return result


def compile_path(path: Path, config: NativeExportConfig | None = None) -> CompileResult:
    """Compile a Python module or a JSON/YAML tree, chosen by suffix.

    Args:
        path: Input file
        config: Compiler configuration, defaults if None

    Returns:
        CompileResult

    Raises:
        FrontendError: If the input cannot be read
    """
    if is_tree_file(path):
        return compile_tree(load_tree(path), str(path), config)

    try:
        source = path.read_text(encoding="utf-8")
    except OSError as e:
        raise FrontendError(f"Cannot read source: {e}", path=str(path))
    return compile_source(source, str(path), config)
