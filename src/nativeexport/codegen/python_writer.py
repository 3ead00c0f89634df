"""
Python code writer.

Renders compiler output back into Python source:
- rewritten classes are rebuilt from deep copies of the original ``ast``
  nodes, keeping only the attributes left in the rewritten model;
- registration procedures are rendered as functions decorated with the
  runtime's capability hook.

Generated text is deterministic: string literals go through ``repr`` and
items are written in declaration order.
"""

import ast
import copy
import logging

from nativeexport.config.models import CodegenConfig, MarkerConfig
from nativeexport.frontend.python_source import SourceClass, iter_arguments, split_annotated
from nativeexport.models import (
    ErrorMarker,
    ImplBlock,
    Method,
    Param,
    RegistrationProcedure,
    RegistrationStatement,
    WrapperArg,
)

logger = logging.getLogger(__name__)

GENERATED_HEADER = "# Generated method registration. Do not edit."

INDENT = "    "


class PythonWriter:
    """Writes rewritten classes and registration functions as Python.

    Usage:
        writer = PythonWriter(config.codegen, config.markers)
        text = writer.render_module(module.tree, [(cls, result.implementation)], procedures)
    """

    def __init__(
        self,
        codegen: CodegenConfig | None = None,
        markers: MarkerConfig | None = None,
    ) -> None:
        """Initialize the writer.

        Args:
            codegen: Generated code settings
            markers: Marker names, used to drop the class marker
        """
        self.codegen = codegen or CodegenConfig()
        self.markers = markers or MarkerConfig()

    def rebuild_class(self, node: ast.ClassDef, block: ImplBlock) -> ast.ClassDef:
        """Rebuild a class definition from a rewritten block.

        Args:
            node: Original class definition (not modified)
            block: Rewritten implementation block

        Returns:
            New class definition
        """
        new = copy.deepcopy(node)
        new.decorator_list = [
            new.decorator_list[a.index]
            for a in block.attributes
            if not a.is_marker(self.markers.class_marker)
        ]

        body: list[ast.stmt] = []
        for item in block.items:
            original = node.body[item.origin]
            if isinstance(item, Method):
                body.append(self.rebuild_method(original, item))
            else:
                body.append(copy.deepcopy(original))
        new.body = body or [ast.Pass()]
        return new

    def rebuild_method(self, node: ast.stmt, method: Method) -> ast.stmt:
        """Rebuild a method definition from a rewritten method.

        Args:
            node: Original function definition (not modified)
            method: Rewritten method

        Returns:
            New function definition
        """
        new = copy.deepcopy(node)
        new.decorator_list = [new.decorator_list[a.index] for a in method.attributes]

        if not method.generics and hasattr(new, "type_params"):
            new.type_params = []

        for (arg, _), param in zip(iter_arguments(new.args), method.params):
            self._rewrite_arg(arg, param)
        return new

    def _rewrite_arg(self, arg: ast.arg, param: Param) -> None:
        if param.name is not None:
            arg.arg = param.name

        annotated = split_annotated(arg.annotation)
        if annotated is None:
            return
        base, metadata = annotated
        kept = [metadata[a.index] for a in param.attributes]
        if kept:
            arg.annotation.slice = ast.Tuple(elts=[base] + kept, ctx=ast.Load())
        else:
            arg.annotation = base

    def render_registration(self, procedure: RegistrationProcedure) -> str:
        """Render a registration procedure as a Python function.

        Args:
            procedure: Procedure to render

        Returns:
            Function source text
        """
        rt = self.codegen.runtime_module
        cls = procedure.class_name
        builder = procedure.builder_name

        lines = [
            f"@{rt}.{self.codegen.capability_hook}({cls})",
            f"def {self.function_name(cls)}({builder}):",
        ]

        for item in procedure.items:
            if isinstance(item, ErrorMarker):
                for diag in item.diagnostics:
                    lines.append(f"{INDENT}# {diag}")
            else:
                lines.extend(INDENT + line for line in self._render_statement(item, builder))

        if not procedure.statements:
            lines.append(f"{INDENT}pass")

        return "\n".join(lines) + "\n"

    def _render_statement(self, stmt: RegistrationStatement, builder: str) -> list[str]:
        rt = self.codegen.runtime_module
        name = repr(stmt.method_name)
        return [
            f"method = {rt}.{self.codegen.wrapper_factory}(",
            f"{INDENT}{stmt.class_name},",
            f"{INDENT}{name},",
            f"{INDENT}owner={_render_arg(stmt.owner)},",
            f"{INDENT}required=[{', '.join(_render_arg(a) for a in stmt.required)}],",
            f"{INDENT}optional=[{', '.join(_render_arg(a) for a in stmt.optional)}],",
            f"{INDENT}returns={stmt.returns!r},",
            ")",
            f"{builder}.build_method({name}, method)"
            f".with_rpc_mode({rt}.RpcMode.{stmt.rpc_mode.name})"
            ".done_stateless()",
        ]

    def function_name(self, class_name: str) -> str:
        """Name of the generated registration function for a class."""
        return f"{self.codegen.function_prefix}{class_name}_methods"

    def render_module(
        self,
        tree: ast.Module,
        classes: list[tuple[SourceClass, ImplBlock]],
        procedures: list[RegistrationProcedure],
    ) -> str:
        """Render a whole module with rewritten classes and registrations.

        Args:
            tree: Original module tree (not modified)
            classes: Marked classes paired with their rewritten blocks
            procedures: Registration procedures, one per class

        Returns:
            Module source text
        """
        new = copy.deepcopy(tree)
        for source_class, block in classes:
            new.body[source_class.position] = self.rebuild_class(source_class.node, block)

        text = ast.unparse(new)
        if not procedures:
            return text + "\n"

        parts = [text, "", "", GENERATED_HEADER, f"import {self.codegen.runtime_module}"]
        for procedure in procedures:
            parts.extend(["", "", self.render_registration(procedure).rstrip("\n")])

        logger.debug(f"Rendered module with {len(procedures)} registration functions")
        return "\n".join(parts) + "\n"


def _render_arg(arg: WrapperArg) -> str:
    return repr((arg.name, arg.annotation))
