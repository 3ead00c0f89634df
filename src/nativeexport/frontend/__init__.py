"""
Input front-ends producing implementation blocks.

- python_source: marked classes in Python modules, via ``ast``
- tree_loader: serialized syntax trees in JSON or YAML
"""

from nativeexport.frontend.python_source import (
    FrontendError,
    PythonSourceReader,
    SourceClass,
    SourceModule,
    dotted_name,
    iter_arguments,
    split_annotated,
)
from nativeexport.frontend.tree_loader import is_tree_file, load_tree, parse_tree

__all__ = [
    "FrontendError",
    "PythonSourceReader",
    "SourceClass",
    "SourceModule",
    "dotted_name",
    "iter_arguments",
    "split_annotated",
    "is_tree_file",
    "load_tree",
    "parse_tree",
]
