"""
Export compiler stages.

- directive: export marker payload -> ExportArgs
- extractor: implementation block -> exported methods
- validator: signature rules and normalization
- emitter: accepted methods -> registration procedure
- pipeline: all stages for one block

Usage:
    from nativeexport.compiler import derive_methods

    result = derive_methods(block)
    for diag in result.diagnostics:
        print(diag)
"""

from nativeexport.compiler.directive import DirectiveResult, parse_directive
from nativeexport.compiler.emitter import RegistrationEmitter
from nativeexport.compiler.extractor import ExtractionResult, MethodExtractor
from nativeexport.compiler.pipeline import DeriveResult, derive_methods
from nativeexport.compiler.validator import (
    UNUSED_ARG_TEMPLATE,
    SignatureValidator,
    check_optional_bound,
)

__all__ = [
    "DirectiveResult",
    "parse_directive",
    "ExtractionResult",
    "MethodExtractor",
    "SignatureValidator",
    "check_optional_bound",
    "UNUSED_ARG_TEMPLATE",
    "RegistrationEmitter",
    "DeriveResult",
    "derive_methods",
]
