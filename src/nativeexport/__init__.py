"""
NativeExport: Method Registration Compiler for Native Class Bindings.

Turns classes marked with ``@methods`` into registration code for a native
scripting runtime. Each method decorated with ``@export`` is validated,
normalized and lowered into a registration statement carrying its owner,
required and optional arguments and its RPC mode.

Example:
    from nativeexport import compile_source

    result = compile_source(source_text, "player.py")
    for diagnostic in result.diagnostics:
        print(diagnostic)
    print(result.output)
"""

from nativeexport.compiler import DeriveResult, derive_methods
from nativeexport.config import NativeExportConfig
from nativeexport.driver import CompileResult, compile_path, compile_source, compile_tree
from nativeexport.version import __version__

__all__ = [
    "__version__",
    "CompileResult",
    "DeriveResult",
    "NativeExportConfig",
    "compile_path",
    "compile_source",
    "compile_tree",
    "derive_methods",
]
