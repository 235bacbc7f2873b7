"""Configuration loader — reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_BASKET_TOKENS: tuple[str, ...] = ("A", "B", "C", "D")

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PabConfig:
    base_url: str = "http://localhost:9080"
    timeout: int = 30
    status_delay: float = 1.0


@dataclass(frozen=True)
class StoreConfig:
    basket_tokens: tuple[str, ...] = DEFAULT_BASKET_TOKENS


@dataclass(frozen=True)
class AppConfig:
    pab: PabConfig = field(default_factory=PabConfig)
    store: StoreConfig = field(default_factory=StoreConfig)


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_pab(raw: dict[str, Any]) -> PabConfig:
    return PabConfig(
        base_url=str(raw.get("base_url", PabConfig.base_url)).rstrip("/"),
        timeout=int(raw.get("timeout", 30)),
        status_delay=float(raw.get("status_delay", 1.0)),
    )


def _build_store(raw: dict[str, Any]) -> StoreConfig:
    return StoreConfig(
        basket_tokens=tuple(
            str(t) for t in raw.get("basket_tokens", DEFAULT_BASKET_TOKENS)
        ),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (two levels up from this file).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        pab=_build_pab(raw.get("pab") or {}),
        store=_build_store(raw.get("store") or {}),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    if not cfg.pab.base_url:
        raise ValueError("PAB base_url must be configured")
    if cfg.pab.timeout <= 0:
        raise ValueError(f"PAB timeout must be positive, got {cfg.pab.timeout}")
    if cfg.pab.status_delay < 0:
        raise ValueError(
            f"PAB status_delay must not be negative, got {cfg.pab.status_delay}"
        )
    if not cfg.store.basket_tokens:
        raise ValueError("At least one basket token must be configured")
