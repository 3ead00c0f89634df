"""
Syntax tree models for class implementation blocks.

These models are the language-neutral input of the export compiler. The
Python source front-end builds them from ``ast`` nodes; the tree front-end
validates them straight from JSON or YAML documents.

Attribute payloads are kept free-form (``MetaNode``) so that malformed
directives survive until the directive parser can report them.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from nativeexport.models.base import GenericKind, LitType, ParamKind


class Span(BaseModel):
    """Source location of a syntax element.

    Attributes:
        file: Source file name
        line: 1-based line number
        column: 0-based column offset
        end_line: Line where the element ends
        end_column: Column where the element ends
    """

    model_config = ConfigDict(frozen=True)

    file: str = Field(default="<input>", description="Source file name")
    line: int = Field(default=1, ge=1, description="1-based line number")
    column: int = Field(default=0, ge=0, description="0-based column offset")
    end_line: int | None = Field(default=None, ge=1)
    end_column: int | None = Field(default=None, ge=0)

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}"


class PathMeta(BaseModel):
    """A bare dotted path, e.g. ``export`` or ``gd.export``."""

    kind: Literal["path"] = "path"
    path: list[str] = Field(default_factory=list)
    span: Span | None = None

    def render(self) -> str:
        return ".".join(self.path)


class LitMeta(BaseModel):
    """A literal value."""

    kind: Literal["lit"] = "lit"
    value: str | int | float | bool | None = None
    lit_type: LitType = LitType.STR
    span: Span | None = None

    def render(self) -> str:
        return repr(self.value)


class RawMeta(BaseModel):
    """Payload the front-end could not classify, kept as source text."""

    kind: Literal["raw"] = "raw"
    text: str = ""
    span: Span | None = None

    def render(self) -> str:
        return self.text


class NameValueMeta(BaseModel):
    """A ``key = value`` pair."""

    kind: Literal["name_value"] = "name_value"
    path: list[str] = Field(default_factory=list)
    value: "MetaNode"
    span: Span | None = None

    @property
    def key(self) -> str | None:
        """Last segment of the key path, None if the path is empty."""
        return self.path[-1] if self.path else None

    def render(self) -> str:
        return f"{'.'.join(self.path)} = {self.value.render()}"


class ListMeta(BaseModel):
    """A parenthesized list of nested payload elements."""

    kind: Literal["list"] = "list"
    items: list["MetaNode"] = Field(default_factory=list)
    span: Span | None = None

    def render(self) -> str:
        return "(" + ", ".join(item.render() for item in self.items) + ")"


MetaNode = Annotated[
    Union[PathMeta, LitMeta, RawMeta, NameValueMeta, ListMeta],
    Field(discriminator="kind"),
]

NameValueMeta.model_rebuild()
ListMeta.model_rebuild()


class Attribute(BaseModel):
    """An annotation attached to a method or a parameter.

    For Python input this is one decorator, or one element of the
    ``Annotated`` metadata of a parameter annotation.

    Attributes:
        path: Dotted path naming the attribute (may be empty for non-path
            metadata such as string literals)
        args: Payload, None for a bare marker
        index: Position in the host list (decorators or metadata)
        span: Source location
    """

    path: list[str] = Field(default_factory=list)
    args: MetaNode | None = None
    index: int = Field(default=0, ge=0)
    span: Span | None = None

    @property
    def name(self) -> str | None:
        """Last path segment, used for marker matching."""
        return self.path[-1] if self.path else None

    def is_marker(self, marker: str) -> bool:
        """Check whether this attribute is the given marker."""
        return self.name == marker

    def render(self) -> str:
        text = ".".join(self.path)
        if self.args is None:
            return text
        if isinstance(self.args, ListMeta):
            return text + self.args.render()
        return f"{text}[{self.args.render()}]"


class Param(BaseModel):
    """A method parameter.

    Attributes:
        name: Bound name, None for a discard pattern
        mutable: Whether the binding carries a mutability qualifier
        annotation: Type annotation text without markers
        default: Default value text
        kind: Binding kind
        attributes: Parameter-level annotations (optional marker etc.)
        span: Source location
    """

    name: str | None = None
    mutable: bool = False
    annotation: str | None = None
    default: str | None = None
    kind: ParamKind = ParamKind.POSITIONAL
    attributes: list[Attribute] = Field(default_factory=list)
    span: Span | None = None

    @property
    def is_discard(self) -> bool:
        return self.name is None

    def has_marker(self, marker: str) -> bool:
        return any(attr.is_marker(marker) for attr in self.attributes)


class GenericParam(BaseModel):
    """A generic parameter declared on a method."""

    name: str
    kind: GenericKind = GenericKind.TYPE
    span: Span | None = None


class Method(BaseModel):
    """A method declaration inside an implementation block.

    Attributes:
        kind: Member discriminator
        name: Method name
        params: Parameters including receiver and owner
        returns: Return annotation text, None when absent
        generics: Generic parameters
        unsafe: Whether the method carries an unsafety qualifier
        is_async: Whether the method is a coroutine
        attributes: Method-level annotations (decorators)
        origin: Index of the member in the source class body
        span: Location of the method name
    """

    kind: Literal["method"] = "method"
    name: str = Field(..., min_length=1)
    params: list[Param] = Field(default_factory=list)
    returns: str | None = None
    generics: list[GenericParam] = Field(default_factory=list)
    unsafe: bool = False
    is_async: bool = False
    attributes: list[Attribute] = Field(default_factory=list)
    origin: int | None = None
    span: Span | None = None

    def generics_of(self, kind: GenericKind) -> list[GenericParam]:
        """Get generic parameters of one kind."""
        return [g for g in self.generics if g.kind == kind]


class VerbatimItem(BaseModel):
    """A non-method member passed through untouched."""

    kind: Literal["verbatim"] = "verbatim"
    text: str = ""
    origin: int | None = None
    span: Span | None = None


ImplItem = Annotated[Union[Method, VerbatimItem], Field(discriminator="kind")]


class ImplBlock(BaseModel):
    """A class implementation block.

    Attributes:
        type_name: Name of the implementing class
        items: Ordered members
        attributes: Class-level annotations
        span: Location of the class name
    """

    type_name: str = Field(..., min_length=1)
    items: list[ImplItem] = Field(default_factory=list)
    attributes: list[Attribute] = Field(default_factory=list)
    span: Span | None = None

    @property
    def methods(self) -> list[Method]:
        """Methods of the block in declaration order."""
        return [item for item in self.items if isinstance(item, Method)]
