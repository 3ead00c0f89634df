"""
Configuration Data Models.

Defines all configuration schemas using Pydantic for validation
and type safety.
"""

import logging
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class LogLevel(str, Enum):
    """Logging verbosity."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"

    def to_logging(self) -> int:
        """Get the matching ``logging`` level number."""
        return logging.getLevelName(self.value)


def _check_identifier(value: str) -> str:
    if not value.isidentifier():
        raise ValueError(f"'{value}' is not a valid identifier")
    return value


class MarkerConfig(BaseModel):
    """Names of the annotations recognized in Python source.

    Markers are matched against the last segment of a dotted name, so
    ``@export`` and ``@gd.export`` both match ``export``.

    Attributes:
        class_marker: Class decorator selecting implementation blocks
        export: Method decorator marking a method for export
        optional: ``Annotated`` metadata marking a parameter optional
        mutable: ``Annotated`` metadata marking a mutable binding
        unsafe: Method decorator marking an unsafe method
    """

    class_marker: str = Field(default="methods", description="Class decorator")
    export: str = Field(default="export", description="Export method decorator")
    optional: str = Field(default="opt", description="Optional parameter marker")
    mutable: str = Field(default="mut", description="Mutable binding marker")
    unsafe: str = Field(default="unsafe", description="Unsafe method decorator")

    @field_validator("class_marker", "export", "optional", "mutable", "unsafe")
    @classmethod
    def validate_marker(cls, v: str) -> str:
        """Validate that marker names are identifiers."""
        return _check_identifier(v)


class CodegenConfig(BaseModel):
    """Configuration of the generated registration code.

    Attributes:
        runtime_module: Module providing the wrapper factory, hook and RpcMode
        capability_hook: Decorator attaching a registration function to a class
        wrapper_factory: Callable building the dispatch wrapper
        builder_name: Name of the builder parameter
        function_prefix: Prefix of generated registration function names
    """

    runtime_module: str = Field(default="gdnative", description="Runtime module")
    capability_hook: str = Field(
        default="native_class_methods",
        description="Capability hook decorator",
    )
    wrapper_factory: str = Field(default="wrap_method", description="Wrapper factory")
    builder_name: str = Field(default="builder", description="Builder parameter name")
    function_prefix: str = Field(default="_register_", description="Function name prefix")

    @field_validator("runtime_module")
    @classmethod
    def validate_module(cls, v: str) -> str:
        """Validate a dotted module path."""
        for part in v.split("."):
            _check_identifier(part)
        return v

    @field_validator("capability_hook", "wrapper_factory", "builder_name", "function_prefix")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate generated names."""
        return _check_identifier(v)


class OutputConfig(BaseModel):
    """Configuration for output paths.

    Attributes:
        suffix: Suffix appended to the input stem when no output path is given
        create_dirs: Create directories if they don't exist
    """

    suffix: str = Field(default="_exported", description="Output file stem suffix")
    create_dirs: bool = Field(default=True, description="Create output directories")


class LoggingConfig(BaseModel):
    """Logging configuration.

    Attributes:
        level: Log level
        format: Record format passed to logging.basicConfig
    """

    level: LogLevel = Field(default=LogLevel.WARNING, description="Log level")
    format: str = Field(default="%(message)s", description="Log record format")


class NativeExportConfig(BaseModel):
    """Root configuration for the export compiler.

    Attributes:
        markers: Recognized annotation names
        codegen: Generated code settings
        output: Output paths configuration
        logging: Logging configuration
        debug: Enable debug mode
    """

    markers: MarkerConfig = Field(default_factory=MarkerConfig, description="Markers")
    codegen: CodegenConfig = Field(default_factory=CodegenConfig, description="Codegen")
    output: OutputConfig = Field(default_factory=OutputConfig, description="Output")
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging")
    debug: bool = Field(default=False, description="Enable debug mode")

    def to_yaml_dict(self) -> dict[str, Any]:
        """Convert to YAML-friendly dictionary.

        Returns:
            Dict suitable for YAML serialization
        """
        return self.model_dump(mode="json", exclude_none=True)
