"""
Compiler configuration loading.

Settings are resolved in layers, later layers winning:

    built-in defaults
    -> YAML file (explicit path, NATIVEEXPORT_CONFIG, or a default name)
    -> ${VAR} / ${VAR:-fallback} references inside the file
    -> NATIVEEXPORT_* variables (see ENV_VAR_OVERRIDES)

The result is validated as a NativeExportConfig.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from nativeexport.config.environment import ensure_dotenv_loaded
from nativeexport.config.models import NativeExportConfig

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "NATIVEEXPORT_CONFIG"

# Looked up in the working directory, first hit wins
DEFAULT_CONFIG_PATHS = [
    "nativeexport.yaml",
    "nativeexport.yml",
    ".nativeexport.yaml",
    ".nativeexport.yml",
]

# Variable name -> dotted setting path
ENV_VAR_OVERRIDES = {
    "NATIVEEXPORT_CLASS_MARKER": "markers.class_marker",
    "NATIVEEXPORT_EXPORT_MARKER": "markers.export",
    "NATIVEEXPORT_OPTIONAL_MARKER": "markers.optional",
    "NATIVEEXPORT_RUNTIME_MODULE": "codegen.runtime_module",
    "NATIVEEXPORT_BUILDER_NAME": "codegen.builder_name",
    "NATIVEEXPORT_OUTPUT_SUFFIX": "output.suffix",
    "NATIVEEXPORT_LOG_LEVEL": "logging.level",
    "NATIVEEXPORT_DEBUG": "debug",
}

# Names and suffixes are taken literally, even "2" or "on"
_LITERAL_SETTINGS = frozenset(
    {
        "markers.class_marker",
        "markers.export",
        "markers.optional",
        "codegen.runtime_module",
        "codegen.builder_name",
        "output.suffix",
        "logging.level",
    }
)

_REFERENCE = re.compile(r"\$\{(\w+)(?::-?([^}]*))?\}")

_TRUTHY = {"true", "yes", "on"}
_FALSY = {"false", "no", "off"}

_MAX_LISTED_ERRORS = 5


class ConfigurationError(Exception):
    """A configuration file could not be parsed or failed validation.

    Attributes:
        errors: Pydantic error dicts, empty for parse failures
        path: File the bad configuration came from, if any
    """

    def __init__(
        self,
        message: str,
        errors: list[dict] | None = None,
        path: Path | None = None,
    ) -> None:
        super().__init__(message)
        self.errors = errors or []
        self.path = path

    def __str__(self) -> str:
        head = super().__str__()
        if self.path:
            head += f" (file: {self.path})"

        shown = self.errors[:_MAX_LISTED_ERRORS]
        lines = [head] + [f"  - {_error_location(e)}: {e.get('msg', '?')}" for e in shown]
        hidden = len(self.errors) - len(shown)
        if hidden > 0:
            lines.append(f"  ... and {hidden} more errors")
        return "\n".join(lines)


def _error_location(error: dict) -> str:
    return ".".join(str(part) for part in error.get("loc", ()))


def coerce_value(text: str) -> Any:
    """Turn an environment string into a bool, int, float or None where it looks like one."""
    if not text:
        return None

    folded = text.lower()
    if folded in _TRUTHY:
        return True
    if folded in _FALSY:
        return False

    number = float if ("." in text or "e" in folded) else int
    try:
        return number(text)
    except ValueError:
        return text


def expand_references(value: Any) -> Any:
    """Resolve ``${VAR}`` references in every string of a parsed YAML tree.

    A string consisting of a single reference takes the coerced value of
    the variable (or its fallback). References embedded in longer strings
    are spliced in as text. References with neither a value nor a fallback
    are left as written.
    """
    if isinstance(value, dict):
        return {key: expand_references(item) for key, item in value.items()}
    if isinstance(value, list):
        return [expand_references(item) for item in value]
    if not isinstance(value, str):
        return value

    whole = _REFERENCE.fullmatch(value)
    if whole:
        resolved = _resolve(whole)
        return value if resolved is None else coerce_value(resolved)

    def splice(match: re.Match[str]) -> str:
        resolved = _resolve(match)
        return match.group(0) if resolved is None else resolved

    return _REFERENCE.sub(splice, value)


def _resolve(match: re.Match[str]) -> str | None:
    name, fallback = match.groups()
    return os.environ.get(name, fallback)


def _drop_empty_sections(value: Any) -> Any:
    # "markers:" with no body parses as None; let the model default it
    if isinstance(value, dict):
        return {k: _drop_empty_sections(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [_drop_empty_sections(item) for item in value]
    return value


def _place(settings: dict[str, Any], dotted: str, value: Any) -> None:
    *sections, leaf = dotted.split(".")
    target = settings
    for section in sections:
        child = target.get(section)
        if not isinstance(child, dict):
            child = target[section] = {}
        target = child
    target[leaf] = value


class ConfigLoader:
    """Builds a NativeExportConfig from a YAML file and the environment.

    A missing file is only an error when one was asked for explicitly;
    with no file at all the built-in defaults apply.

    Usage:
        config = ConfigLoader("nativeexport.yaml").load()
        config = ConfigLoader().load_from_env()
    """

    def __init__(
        self,
        config_path: str | Path | None = None,
        env_file: str = ".env",
    ) -> None:
        """
        Args:
            config_path: YAML file to read; leave unset to use load_from_env()
            env_file: dotenv file read before any variable lookup
        """
        self._config_path = Path(config_path) if config_path else None
        self._env_file = env_file
        self._config: NativeExportConfig | None = None
        self._loaded_from_path: Path | None = None

    @property
    def config_path(self) -> Path | None:
        return self._config_path

    @property
    def loaded_from_path(self) -> Path | None:
        """File the current config was read from, None for pure defaults."""
        return self._loaded_from_path

    @property
    def config(self) -> NativeExportConfig | None:
        return self._config

    def load(self, path: str | Path | None = None) -> NativeExportConfig:
        """Read, expand, override and validate.

        Args:
            path: Replaces the constructor path when given

        Returns:
            The validated configuration

        Raises:
            FileNotFoundError: The chosen file does not exist
            ConfigurationError: The file is not a YAML mapping or fails validation
        """
        if path is not None:
            self._config_path = Path(path)

        ensure_dotenv_loaded(self._env_file)

        source = self._config_path
        settings = expand_references(self._read_file(source)) if source else {}
        self._apply_env_overrides(settings)
        settings = _drop_empty_sections(settings)

        try:
            config = NativeExportConfig(**settings)
        except ValidationError as e:
            raise ConfigurationError(
                f"Configuration validation failed: {e.error_count()} errors",
                errors=e.errors(),
                path=source,
            )

        self._config = config
        self._loaded_from_path = source
        logger.debug(f"Configuration loaded from {source or 'defaults'}")
        return config

    def load_from_env(self) -> NativeExportConfig:
        """Find a configuration file and load it.

        NATIVEEXPORT_CONFIG is consulted first, then DEFAULT_CONFIG_PATHS in
        the working directory. Without either, only defaults and
        NATIVEEXPORT_* overrides apply.

        Raises:
            FileNotFoundError: NATIVEEXPORT_CONFIG names a file that is missing
            ConfigurationError: The discovered file is invalid
        """
        ensure_dotenv_loaded(self._env_file)
        self._config_path = self._discover()
        return self.load()

    def _discover(self) -> Path | None:
        named = os.environ.get(CONFIG_ENV_VAR)
        if named:
            candidate = Path(named)
            if not candidate.exists():
                raise FileNotFoundError(
                    f"{CONFIG_ENV_VAR} points to a missing config file: {named}"
                )
            return candidate

        return next((Path(p) for p in DEFAULT_CONFIG_PATHS if Path(p).exists()), None)

    def _read_file(self, source: Path) -> dict[str, Any]:
        if not source.exists():
            raise FileNotFoundError(f"Config file not found: {source}")

        try:
            data = yaml.safe_load(source.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML: {e}", path=source)

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError("Configuration root must be a mapping", path=source)
        return data

    def _apply_env_overrides(self, settings: dict[str, Any]) -> None:
        for env_var, dotted in ENV_VAR_OVERRIDES.items():
            raw = os.environ.get(env_var)
            if raw is None:
                continue
            value = raw if dotted in _LITERAL_SETTINGS else coerce_value(raw)
            logger.debug(f"{env_var} overrides {dotted}")
            _place(settings, dotted, value)

    def save(self, path: str | Path | None = None) -> None:
        """Write the loaded configuration as YAML.

        Args:
            path: Destination, defaults to the file it was loaded from

        Raises:
            ValueError: Nothing has been loaded, or there is nowhere to write
        """
        if self._config is None:
            raise ValueError("No configuration loaded")

        target = Path(path) if path else self._config_path
        if target is None:
            raise ValueError("No path specified for saving")

        text = yaml.safe_dump(self._config.to_yaml_dict(), sort_keys=False)
        target.write_text(text, encoding="utf-8")


# Process-wide configuration, set by load_config / load_config_from_env
_global_config: NativeExportConfig | None = None


def _remember(config: NativeExportConfig) -> NativeExportConfig:
    global _global_config
    _global_config = config
    return config


def load_config(
    config_path: str | Path | None = None,
    env_file: str = ".env",
) -> NativeExportConfig:
    """Load ``config_path`` (or defaults) and make it the global configuration."""
    return _remember(ConfigLoader(config_path, env_file).load())


def load_config_from_env(env_file: str = ".env") -> NativeExportConfig:
    """Discover a configuration file and make it the global configuration."""
    return _remember(ConfigLoader(env_file=env_file).load_from_env())


def get_config() -> NativeExportConfig:
    """Return the global configuration.

    Raises:
        RuntimeError: Neither load function has been called
    """
    if _global_config is None:
        raise RuntimeError(
            "Configuration not loaded. Call load_config() or load_config_from_env() first."
        )
    return _global_config


def reset_config() -> None:
    """Forget the global configuration."""
    global _global_config
    _global_config = None
