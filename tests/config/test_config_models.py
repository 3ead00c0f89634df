"""Tests for configuration models."""

import logging

import pytest
from pydantic import ValidationError

from nativeexport.config.models import (
    CodegenConfig,
    LoggingConfig,
    LogLevel,
    MarkerConfig,
    NativeExportConfig,
    OutputConfig,
)


@pytest.mark.config
class TestMarkerConfig:
    """Tests for MarkerConfig model."""

    def test_defaults(self):
        """Test default marker names."""
        config = MarkerConfig()

        assert config.class_marker == "methods"
        assert config.export == "export"
        assert config.optional == "opt"
        assert config.mutable == "mut"
        assert config.unsafe == "unsafe"

    @pytest.mark.parametrize("name", ["", "two words", "gd.export", "1st"])
    def test_non_identifier_rejected(self, name):
        """Test marker names must be plain identifiers."""
        with pytest.raises(ValidationError):
            MarkerConfig(export=name)


@pytest.mark.config
class TestCodegenConfig:
    """Tests for CodegenConfig model."""

    def test_defaults(self):
        config = CodegenConfig()

        assert config.runtime_module == "gdnative"
        assert config.capability_hook == "native_class_methods"
        assert config.wrapper_factory == "wrap_method"
        assert config.builder_name == "builder"
        assert config.function_prefix == "_register_"

    def test_dotted_runtime_module(self):
        """Test the runtime module may be a dotted path."""
        assert CodegenConfig(runtime_module="engine.api").runtime_module == "engine.api"

    @pytest.mark.parametrize("module", ["engine..api", "engine.", "my-engine"])
    def test_invalid_runtime_module(self, module):
        with pytest.raises(ValidationError):
            CodegenConfig(runtime_module=module)

    def test_invalid_builder_name(self):
        with pytest.raises(ValidationError):
            CodegenConfig(builder_name="not valid")


@pytest.mark.config
class TestLoggingConfig:
    """Tests for LoggingConfig and LogLevel."""

    def test_default_level(self):
        assert LoggingConfig().level == LogLevel.WARNING

    @pytest.mark.parametrize(
        "level,expected",
        [
            (LogLevel.DEBUG, logging.DEBUG),
            (LogLevel.INFO, logging.INFO),
            (LogLevel.WARNING, logging.WARNING),
            (LogLevel.ERROR, logging.ERROR),
        ],
    )
    def test_to_logging(self, level, expected):
        assert level.to_logging() == expected

    def test_invalid_level(self):
        with pytest.raises(ValidationError):
            LoggingConfig(level="LOUD")


@pytest.mark.config
class TestNativeExportConfig:
    """Tests for the root configuration."""

    def test_defaults(self):
        config = NativeExportConfig()

        assert config.markers == MarkerConfig()
        assert config.output == OutputConfig()
        assert config.debug is False

    def test_nested_dicts(self):
        """Test sections can be given as plain dictionaries."""
        config = NativeExportConfig(
            markers={"export": "expose"},
            output={"suffix": "_gen", "create_dirs": False},
        )

        assert config.markers.export == "expose"
        assert config.output.suffix == "_gen"
        assert config.output.create_dirs is False

    def test_to_yaml_dict(self):
        """Test the YAML form uses plain values."""
        data = NativeExportConfig().to_yaml_dict()

        assert data["logging"]["level"] == "WARNING"
        assert data["codegen"]["runtime_module"] == "gdnative"
        assert set(data) == {"markers", "codegen", "output", "logging", "debug"}
