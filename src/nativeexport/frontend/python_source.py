"""
Python source front-end.

Reads Python modules with the standard ``ast`` module and converts every
top-level class carrying the class marker into an ``ImplBlock``:

    @methods
    class Player:
        @export(rpc="remote")
        def jump(self, owner: Node, height: float, boost: Annotated[bool, opt]):
            ...

Decorators become method attributes, ``Annotated`` metadata becomes
parameter attributes, and names made only of underscores are discard
parameters. The original ``ast`` nodes are kept so that the writer can
rebuild the module.
"""

import ast
import logging
from dataclasses import dataclass, field

from nativeexport.config.models import MarkerConfig
from nativeexport.models import (
    Attribute,
    GenericKind,
    GenericParam,
    ImplBlock,
    ListMeta,
    LitMeta,
    LitType,
    Method,
    NameValueMeta,
    Param,
    ParamKind,
    PathMeta,
    RawMeta,
    Span,
    VerbatimItem,
)

logger = logging.getLogger(__name__)


class FrontendError(Exception):
    """Raised when an input cannot be read at all."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        line: int | None = None,
    ) -> None:
        """Initialize frontend error.

        Args:
            message: Error message
            path: Input file name
            line: Line number if known
        """
        super().__init__(message)
        self.path = path
        self.line = line

    def __str__(self) -> str:
        msg = super().__str__()
        if self.path:
            location = f"{self.path}:{self.line}" if self.line else self.path
            msg = f"{location}: {msg}"
        return msg


@dataclass
class SourceClass:
    """A marked class found in a module.

    Attributes:
        node: The original class definition
        position: Index of the class in the module body
        block: The class converted to an implementation block
    """

    node: ast.ClassDef
    position: int
    block: ImplBlock


@dataclass
class SourceModule:
    """A parsed module and its marked classes."""

    filename: str
    tree: ast.Module
    classes: list[SourceClass] = field(default_factory=list)


def dotted_name(node: ast.expr) -> list[str] | None:
    """Resolve ``a.b.c`` into its segments.

    Args:
        node: Expression node

    Returns:
        List of segments, or None if the node is not a dotted name
    """
    if isinstance(node, ast.Name):
        return [node.id]
    if isinstance(node, ast.Attribute):
        base = dotted_name(node.value)
        if base is not None:
            return base + [node.attr]
    return None


def iter_arguments(args: ast.arguments) -> list[tuple[ast.arg, ParamKind]]:
    """List the parameters of a function in declaration order."""
    params = [(a, ParamKind.POSITIONAL) for a in args.posonlyargs + args.args]
    if args.vararg is not None:
        params.append((args.vararg, ParamKind.VAR_POSITIONAL))
    params.extend((a, ParamKind.KEYWORD_ONLY) for a in args.kwonlyargs)
    if args.kwarg is not None:
        params.append((args.kwarg, ParamKind.VAR_KEYWORD))
    return params


def split_annotated(annotation: ast.expr | None) -> tuple[ast.expr, list[ast.expr]] | None:
    """Split ``Annotated[base, *metadata]`` into base and metadata.

    Returns:
        Tuple of (base, metadata), or None if not an Annotated form
    """
    if not isinstance(annotation, ast.Subscript):
        return None
    name = dotted_name(annotation.value)
    if not name or name[-1] != "Annotated":
        return None
    if not isinstance(annotation.slice, ast.Tuple) or len(annotation.slice.elts) < 2:
        return None
    return annotation.slice.elts[0], list(annotation.slice.elts[1:])


class PythonSourceReader:
    """Converts marked Python classes into implementation blocks.

    Usage:
        reader = PythonSourceReader()
        module = reader.read(source, "player.py")
        for cls in module.classes:
            result = derive_methods(cls.block)
    """

    def __init__(self, markers: MarkerConfig | None = None) -> None:
        """Initialize the reader.

        Args:
            markers: Marker names, defaults if None
        """
        self.markers = markers or MarkerConfig()
        self._filename = "<input>"

    def read(self, source: str, filename: str = "<input>") -> SourceModule:
        """Parse a module and convert its marked classes.

        Args:
            source: Module source text
            filename: Name used in spans

        Returns:
            SourceModule with its marked classes

        Raises:
            FrontendError: If the source has a syntax error
        """
        try:
            tree = ast.parse(source, filename=filename)
        except SyntaxError as e:
            raise FrontendError(f"Syntax error: {e.msg}", path=filename, line=e.lineno)

        self._filename = filename
        module = SourceModule(filename=filename, tree=tree)

        for position, node in enumerate(tree.body):
            if not isinstance(node, ast.ClassDef):
                continue
            decorators = [self._attribute(d, i) for i, d in enumerate(node.decorator_list)]
            if not any(d.is_marker(self.markers.class_marker) for d in decorators):
                continue
            block = self.class_block(node, decorators)
            module.classes.append(SourceClass(node=node, position=position, block=block))

        if not module.classes:
            logger.warning(f"No classes marked with @{self.markers.class_marker} in {filename}")
        else:
            logger.debug(f"Found {len(module.classes)} marked classes in {filename}")
        return module

    def class_block(self, node: ast.ClassDef, decorators: list[Attribute]) -> ImplBlock:
        """Convert a class definition into an implementation block."""
        items = []
        for origin, stmt in enumerate(node.body):
            if isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef)):
                items.append(self._method(stmt, origin))
            else:
                items.append(
                    VerbatimItem(text=ast.unparse(stmt), origin=origin, span=self._span(stmt))
                )
        return ImplBlock(
            type_name=node.name,
            items=items,
            attributes=decorators,
            span=self._span(node),
        )

    def _method(self, node: ast.FunctionDef | ast.AsyncFunctionDef, origin: int) -> Method:
        attributes = [self._attribute(d, i) for i, d in enumerate(node.decorator_list)]
        params = self._params(node.args)
        generics = [
            GenericParam(name=tp.name, kind=GenericKind.TYPE, span=self._span(tp))
            for tp in getattr(node, "type_params", [])
        ]
        return Method(
            name=node.name,
            params=params,
            returns=ast.unparse(node.returns) if node.returns is not None else None,
            generics=generics,
            unsafe=any(a.is_marker(self.markers.unsafe) for a in attributes),
            is_async=isinstance(node, ast.AsyncFunctionDef),
            attributes=attributes,
            origin=origin,
            span=self._span(node),
        )

    def _params(self, args: ast.arguments) -> list[Param]:
        positional = args.posonlyargs + args.args
        defaults: dict[int, ast.expr] = {}
        offset = len(positional) - len(args.defaults)
        for i, default in enumerate(args.defaults):
            defaults[id(positional[offset + i])] = default
        for arg, default in zip(args.kwonlyargs, args.kw_defaults):
            if default is not None:
                defaults[id(arg)] = default

        params = []
        for arg, kind in iter_arguments(args):
            default = defaults.get(id(arg))
            params.append(self._param(arg, kind, default))
        return params

    def _param(self, arg: ast.arg, kind: ParamKind, default: ast.expr | None) -> Param:
        attributes: list[Attribute] = []
        annotation = arg.annotation

        annotated = split_annotated(annotation)
        if annotated is not None:
            base, metadata = annotated
            attributes = [self._attribute(m, i) for i, m in enumerate(metadata)]
            annotation = base

        return Param(
            name=None if set(arg.arg) == {"_"} else arg.arg,
            mutable=any(a.is_marker(self.markers.mutable) for a in attributes),
            annotation=ast.unparse(annotation) if annotation is not None else None,
            default=ast.unparse(default) if default is not None else None,
            kind=kind,
            attributes=attributes,
            span=self._span(arg),
        )

    def _attribute(self, node: ast.expr, index: int) -> Attribute:
        """Convert a decorator or metadata expression into an attribute."""
        span = self._span(node)

        path = dotted_name(node)
        if path is not None:
            return Attribute(path=path, index=index, span=span)

        if isinstance(node, ast.Call):
            path = dotted_name(node.func)
            if path is not None:
                items = [self._meta(a) for a in node.args]
                for kw in node.keywords:
                    if kw.arg is None:
                        raw = f"**{ast.unparse(kw.value)}"
                        items.append(RawMeta(text=raw, span=self._span(kw)))
                    else:
                        items.append(
                            NameValueMeta(
                                path=[kw.arg],
                                value=self._meta(kw.value),
                                span=self._span(kw),
                            )
                        )
                payload = ListMeta(items=items, span=span)
                return Attribute(path=path, args=payload, index=index, span=span)

        if isinstance(node, ast.Subscript):
            path = dotted_name(node.value)
            if path is not None:
                payload = RawMeta(text=ast.unparse(node.slice), span=self._span(node.slice))
                return Attribute(path=path, args=payload, index=index, span=span)

        return Attribute(path=[], args=self._meta(node), index=index, span=span)

    def _meta(self, node: ast.expr):
        """Convert a payload expression into a meta node."""
        span = self._span(node)

        if isinstance(node, ast.Constant):
            value = node.value
            if isinstance(value, bool):
                return LitMeta(value=value, lit_type=LitType.BOOL, span=span)
            if isinstance(value, str):
                return LitMeta(value=value, lit_type=LitType.STR, span=span)
            if isinstance(value, int):
                return LitMeta(value=value, lit_type=LitType.INT, span=span)
            if isinstance(value, float):
                return LitMeta(value=value, lit_type=LitType.FLOAT, span=span)
            if value is None:
                return LitMeta(value=None, lit_type=LitType.NONE, span=span)
            return LitMeta(value=repr(value), lit_type=LitType.OTHER, span=span)

        path = dotted_name(node)
        if path is not None:
            return PathMeta(path=path, span=span)

        if isinstance(node, (ast.Tuple, ast.List)):
            return ListMeta(items=[self._meta(e) for e in node.elts], span=span)

        return RawMeta(text=ast.unparse(node), span=span)

    def _span(self, node: ast.AST) -> Span:
        return Span(
            file=self._filename,
            line=max(getattr(node, "lineno", 1) or 1, 1),
            column=getattr(node, "col_offset", 0) or 0,
            end_line=getattr(node, "end_lineno", None),
            end_column=getattr(node, "end_col_offset", None),
        )
