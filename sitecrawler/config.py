"""Typed crawler configuration with JSON/YAML load/save helpers."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml  # type: ignore

from .constants import (
    DEFAULT_CONCURRENCY,
    DEFAULT_HTTP_HEADERS,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
    DOCUMENT_EXTENSIONS,
    JSON_INDENT,
    MEDIA_EXTENSIONS,
    SUPPORTED_CONFIG_SUFFIXES,
)
from .types import JSONDict


def _as_float(value: Any, key: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid float for '{key}': {value!r}") from exc


def _as_int(value: Any, key: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"Invalid int for '{key}': {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid int for '{key}': {value!r}") from exc


def _as_extensions(values: Any, key: str) -> tuple[str, ...]:
    if isinstance(values, str) or not isinstance(values, (list, tuple)):
        raise ValueError(f"Invalid extension list for '{key}': {values!r}")

    out: list[str] = []
    for value in values:
        ext = str(value).strip().lower()
        if not ext:
            continue
        out.append(ext if ext.startswith(".") else f".{ext}")
    return tuple(out)


@dataclass(slots=True)
class CrawlConfig:
    """Top-level crawler configuration used by the engine, fetcher, and extractor."""

    seed: str | None = None
    concurrency: int = DEFAULT_CONCURRENCY
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    user_agent: str = DEFAULT_USER_AGENT
    default_headers: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_HTTP_HEADERS))

    media_extensions: tuple[str, ...] = MEDIA_EXTENSIONS
    document_extensions: tuple[str, ...] = DOCUMENT_EXTENSIONS

    def __post_init__(self) -> None:
        if self.seed is not None:
            self.seed = self.seed.strip() or None

        if self.concurrency <= 0:
            raise ValueError("concurrency must be > 0")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")
        if not self.user_agent.strip():
            raise ValueError("user_agent cannot be empty")

    @property
    def excluded_extensions(self) -> tuple[str, ...]:
        """Return media and document extensions that are never followed."""

        return tuple(self.media_extensions) + tuple(self.document_extensions)

    def headers(self) -> dict[str, str]:
        """Return request headers with the identifying User-Agent applied."""

        merged: dict[str, str] = dict(self.default_headers)
        merged["User-Agent"] = self.user_agent
        return merged

    def to_dict(self) -> JSONDict:
        """Serialize config for logs and reproducibility."""

        return {
            "seed": self.seed,
            "concurrency": self.concurrency,
            "timeout_seconds": self.timeout_seconds,
            "user_agent": self.user_agent,
            "default_headers": dict(self.default_headers),
            "media_extensions": list(self.media_extensions),
            "document_extensions": list(self.document_extensions),
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "CrawlConfig":
        """Build config from a parsed dictionary."""

        unknown = sorted(set(payload) - {
            "seed",
            "concurrency",
            "timeout_seconds",
            "user_agent",
            "default_headers",
            "media_extensions",
            "document_extensions",
        })
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")

        seed = payload.get("seed")
        return cls(
            seed=None if seed is None else str(seed),
            concurrency=_as_int(payload.get("concurrency", DEFAULT_CONCURRENCY), "concurrency"),
            timeout_seconds=_as_float(
                payload.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS),
                "timeout_seconds",
            ),
            user_agent=str(payload.get("user_agent", DEFAULT_USER_AGENT)),
            default_headers={
                str(k): str(v)
                for k, v in dict(payload.get("default_headers", DEFAULT_HTTP_HEADERS)).items()
            },
            media_extensions=_as_extensions(
                payload.get("media_extensions", MEDIA_EXTENSIONS),
                "media_extensions",
            ),
            document_extensions=_as_extensions(
                payload.get("document_extensions", DOCUMENT_EXTENSIONS),
                "document_extensions",
            ),
        )


def _load_yaml(path: Path) -> dict[str, Any]:
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"YAML config at {path} must be a mapping at top level")
    return data


def load_config(path: str | Path) -> CrawlConfig:
    """Load CrawlConfig from a JSON/YAML path."""

    config_path = Path(path)
    suffix = config_path.suffix.lower()
    if suffix not in SUPPORTED_CONFIG_SUFFIXES:
        raise ValueError(
            f"Unsupported config suffix '{suffix}'. Supported: {SUPPORTED_CONFIG_SUFFIXES}"
        )

    try:
        if suffix == ".json":
            payload = json.loads(config_path.read_text(encoding="utf-8"))
        else:
            payload = _load_yaml(config_path)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ValueError(f"Could not parse config at {config_path}: {exc}") from exc

    if not isinstance(payload, dict):
        raise ValueError(f"Config at {config_path} must be a mapping")

    return CrawlConfig.from_dict(payload)


def save_config(config: CrawlConfig, path: str | Path) -> None:
    """Save CrawlConfig as JSON or YAML based on file extension."""

    out_path = Path(path)
    suffix = out_path.suffix.lower()
    if suffix not in SUPPORTED_CONFIG_SUFFIXES:
        raise ValueError(
            f"Unsupported config suffix '{suffix}'. Supported: {SUPPORTED_CONFIG_SUFFIXES}"
        )

    out_path.parent.mkdir(parents=True, exist_ok=True)
    payload = config.to_dict()

    if suffix == ".json":
        out_path.write_text(
            json.dumps(payload, indent=JSON_INDENT, sort_keys=True) + "\n",
            encoding="utf-8",
        )
        return

    out_path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")


__all__ = [
    "CrawlConfig",
    "load_config",
    "save_config",
]
