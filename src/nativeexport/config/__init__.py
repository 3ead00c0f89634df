"""
Compiler settings.

NativeExportConfig holds marker names, code generation and output options.
It is read from YAML by ConfigLoader, with ``.env`` and ``NATIVEEXPORT_*``
environment overrides applied on top.
"""

from nativeexport.config.environment import (
    ensure_dotenv_loaded,
    reset_environment,
)
from nativeexport.config.loader import (
    CONFIG_ENV_VAR,
    DEFAULT_CONFIG_PATHS,
    ENV_VAR_OVERRIDES,
    ConfigLoader,
    ConfigurationError,
    get_config,
    load_config,
    load_config_from_env,
    reset_config,
)
from nativeexport.config.models import (
    CodegenConfig,
    LoggingConfig,
    LogLevel,
    MarkerConfig,
    NativeExportConfig,
    OutputConfig,
)

__all__ = [
    # Models
    "CodegenConfig",
    "LoggingConfig",
    "LogLevel",
    "MarkerConfig",
    "NativeExportConfig",
    "OutputConfig",
    # Loader
    "ConfigLoader",
    "ConfigurationError",
    "load_config",
    "load_config_from_env",
    "get_config",
    "reset_config",
    "CONFIG_ENV_VAR",
    "DEFAULT_CONFIG_PATHS",
    "ENV_VAR_OVERRIDES",
    # dotenv
    "ensure_dotenv_loaded",
    "reset_environment",
]
