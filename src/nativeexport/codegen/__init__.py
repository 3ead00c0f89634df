"""Code generation for compiler output."""

from nativeexport.codegen.python_writer import GENERATED_HEADER, PythonWriter

__all__ = [
    "GENERATED_HEADER",
    "PythonWriter",
]
