"""
Syntax tree front-end.

Loads implementation blocks serialized as JSON or YAML. A document may
hold a single block, a list of blocks, or a mapping with a ``blocks`` key.
"""

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import TypeAdapter, ValidationError

from nativeexport.frontend.python_source import FrontendError
from nativeexport.models import ImplBlock

logger = logging.getLogger(__name__)

TREE_SUFFIXES = {".json", ".yaml", ".yml"}

_BLOCKS = TypeAdapter(list[ImplBlock])


def parse_tree(data: Any, source: str = "<input>") -> list[ImplBlock]:
    """Validate already-decoded tree data.

    Args:
        data: Decoded JSON/YAML document
        source: Name used in error messages

    Returns:
        Implementation blocks in document order

    Raises:
        FrontendError: If the document does not describe implementation blocks
    """
    if isinstance(data, dict) and "blocks" in data:
        data = data["blocks"]
    elif isinstance(data, dict):
        data = [data]

    try:
        blocks = _BLOCKS.validate_python(data)
    except ValidationError as e:
        first = e.errors()[0]
        loc = ".".join(str(x) for x in first.get("loc", []))
        raise FrontendError(
            f"Invalid syntax tree ({e.error_count()} errors): {loc}: {first.get('msg')}",
            path=source,
        )

    logger.debug(f"Loaded {len(blocks)} implementation blocks from {source}")
    return blocks


def load_tree(path: Path) -> list[ImplBlock]:
    """Load implementation blocks from a JSON or YAML file.

    Args:
        path: Path to the tree document

    Returns:
        Implementation blocks in document order

    Raises:
        FrontendError: If the file cannot be read, decoded or validated
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise FrontendError(f"Cannot read tree: {e}", path=str(path))

    try:
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise FrontendError(f"Cannot decode tree: {e}", path=str(path))

    return parse_tree(data, str(path))


def is_tree_file(path: Path) -> bool:
    """Check whether a path names a serialized tree."""
    return path.suffix.lower() in TREE_SUFFIXES
