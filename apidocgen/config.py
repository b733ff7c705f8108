"""Configuration loading for apidocgen (.apidocgen.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".apidocgen.yml"
PROVIDERS = ("anthropic", "openai")
LANGUAGES = ("EN", "KO")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class LLMConfig:
    """Model transport settings."""

    provider: str = "anthropic"
    model: Optional[str] = None
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    request_timeout: Optional[float] = None
    max_concurrency: int = 10


@dataclass
class OutputConfig:
    """Where and under which names generated documents are written."""

    directory: Path = Path(".apidocgen")
    filename: str = "openapi"
    title: str = "Generated API"
    version: str = "1.0.0"


@dataclass
class GeneratorConfig:
    """Represents the settings defined in .apidocgen.yml."""

    root: Path
    llm: LLMConfig = field(default_factory=LLMConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    language: str = "EN"
    validate: bool = True
    max_rounds: int = 15
    retry_attempts: int = 3
    retry_delay: float = 1.0
    failure_pause: float = 1.0
    exclude_paths: List[str] = field(default_factory=list)

    @property
    def output_dir(self) -> Path:
        directory = self.output.directory
        return directory if directory.is_absolute() else self.root / directory


def load_config(config_path: Path) -> GeneratorConfig:
    """Load configuration from disk; a missing file yields the defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return GeneratorConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = GeneratorConfig(root=root)

    llm_data = _as_dict(data.get("llm"))
    if llm_data:
        provider = (_as_str(llm_data.get("provider")) or config.llm.provider).lower()
        if provider not in PROVIDERS:
            raise ConfigError(
                f"Unknown llm.provider '{provider}'; expected one of {', '.join(PROVIDERS)}"
            )
        config.llm = LLMConfig(
            provider=provider,
            model=_as_str(llm_data.get("model")),
            api_key=_as_str(llm_data.get("api_key")),
            base_url=_as_str(llm_data.get("base_url")),
            temperature=_as_float(llm_data.get("temperature")),
            max_tokens=_as_int(llm_data.get("max_tokens")),
            request_timeout=_as_float(llm_data.get("request_timeout")),
            max_concurrency=_as_int(llm_data.get("max_concurrency")) or config.llm.max_concurrency,
        )

    output_data = _as_dict(data.get("output"))
    if output_data:
        directory = _as_str(output_data.get("dir"))
        config.output = OutputConfig(
            directory=Path(directory) if directory else config.output.directory,
            filename=_as_str(output_data.get("filename")) or config.output.filename,
            title=_as_str(output_data.get("title")) or config.output.title,
            version=_as_str(output_data.get("version")) or config.output.version,
        )

    language = _as_str(data.get("language"))
    if language:
        if language.upper() not in LANGUAGES:
            raise ConfigError(f"Unsupported language '{language}'; expected EN or KO")
        config.language = language.upper()

    validate = _as_bool(data.get("validate"))
    if validate is not None:
        config.validate = validate

    max_rounds = _as_int(data.get("max_rounds"))
    if max_rounds is not None:
        if max_rounds < 1:
            raise ConfigError("max_rounds must be at least 1")
        config.max_rounds = max_rounds

    retry_data = _as_dict(data.get("retry"))
    attempts = _as_int(retry_data.get("attempts"))
    if attempts is not None:
        if attempts < 1:
            raise ConfigError("retry.attempts must be at least 1")
        config.retry_attempts = attempts
    delay = _as_float(retry_data.get("delay"))
    if delay is not None:
        config.retry_delay = max(0.0, delay)

    pause = _as_float(data.get("failure_pause"))
    if pause is not None:
        config.failure_pause = max(0.0, pause)

    config.exclude_paths = _as_str_list(data.get("exclude_paths"))
    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = ["CONFIG_FILENAME", "ConfigError", "GeneratorConfig", "LLMConfig", "OutputConfig", "load_config"]
