"""
NativeExport Test Configuration and Fixtures

This module provides pytest fixtures for testing the export compiler.
All fixtures build syntax trees in memory or read files under
tests/fixtures, so no runtime module is ever imported.

Fixture Categories:
- Paths: fixture directories and sample inputs
- Configuration: default compiler configuration
- Syntax Builders: factories for parameters, markers, methods and blocks
"""

from pathlib import Path

import pytest

from nativeexport.config import NativeExportConfig
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
    Span,
    VerbatimItem,
)

# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the fixtures directory path."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_module_path(fixtures_dir: Path) -> Path:
    """Return the sample Python module with a marked class."""
    return fixtures_dir / "sample_classes" / "player.py"


@pytest.fixture
def sample_tree_path(fixtures_dir: Path) -> Path:
    """Return the sample JSON syntax tree."""
    return fixtures_dir / "sample_classes" / "enemy.json"


@pytest.fixture
def sample_source(sample_module_path: Path) -> str:
    """Return the text of the sample Python module."""
    return sample_module_path.read_text(encoding="utf-8")


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def default_config() -> NativeExportConfig:
    """Return the built-in default configuration."""
    return NativeExportConfig()


# =============================================================================
# Syntax Builders
# =============================================================================


def _span(line: int = 1, column: int = 0) -> Span:
    return Span(file="test.py", line=line, column=column)


def _param(
    name: str | None,
    *markers: str,
    annotation: str | None = None,
    kind: ParamKind = ParamKind.POSITIONAL,
) -> Param:
    return Param(
        name=name,
        annotation=annotation,
        kind=kind,
        mutable="mut" in markers,
        attributes=[Attribute(path=[m], index=i) for i, m in enumerate(markers)],
        span=_span(),
    )


def _rpc_pair(value, key: str = "rpc", lit_type: LitType = LitType.STR) -> NameValueMeta:
    return NameValueMeta(
        path=[key] if key else [],
        value=LitMeta(value=value, lit_type=lit_type),
    )


def _export(*items, index: int = 0, path: list[str] | None = None) -> Attribute:
    """Build an export marker; with items, a parenthesized payload."""
    args = ListMeta(items=list(items)) if items else None
    return Attribute(path=path or ["export"], args=args, index=index, span=_span())


def _method(
    name: str,
    *params: Param | str | None,
    attributes: list[Attribute] | None = None,
    generics: list[tuple[str, GenericKind]] | None = None,
    unsafe: bool = False,
    returns: str | None = None,
) -> Method:
    built = [p if isinstance(p, Param) else _param(p) for p in params]
    return Method(
        name=name,
        params=built,
        returns=returns,
        generics=[GenericParam(name=n, kind=k) for n, k in generics or []],
        unsafe=unsafe,
        attributes=attributes if attributes is not None else [_export()],
        span=_span(),
    )


def _block(type_name: str, *items: Method | str) -> ImplBlock:
    built = [VerbatimItem(text=i) if isinstance(i, str) else i for i in items]
    return ImplBlock(type_name=type_name, items=built, span=_span())


@pytest.fixture
def make_param():
    """Factory for parameters: make_param(name, *markers, annotation=, kind=)."""
    return _param


@pytest.fixture
def make_export():
    """Factory for export markers: make_export(*payload_items, index=)."""
    return _export


@pytest.fixture
def rpc_pair():
    """Factory for ``rpc = value`` payload pairs."""
    return _rpc_pair


@pytest.fixture
def make_method():
    """Factory for methods; exported with a bare marker unless attributes given."""
    return _method


@pytest.fixture
def make_block():
    """Factory for implementation blocks; strings become verbatim members."""
    return _block
