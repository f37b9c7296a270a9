"""YAML-backed settings for the loader, service and CLI."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Optional

import yaml

from .paths import get_repo_root, resolve_path
from .sources import DirectorySource, HttpSource, TextSource
from .store.catalog import DATA_RESOURCE, ITEM_RESOURCE

SourceKind = Literal["directory", "http"]


@dataclass(frozen=True)
class DataConfig:
    source: SourceKind = "directory"
    raw_dir: Path = Path("data/raw")
    base_url: Optional[str] = None
    timeout_s: Optional[float] = None
    item_resource: str = ITEM_RESOURCE
    data_resource: str = DATA_RESOURCE


@dataclass(frozen=True)
class OnlineConfig:
    top_n: int = 2
    log_level: str = "INFO"


@dataclass(frozen=True)
class AppConfig:
    data: DataConfig = DataConfig()
    online: OnlineConfig = OnlineConfig()


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")
    obj = yaml.safe_load(path.read_text())
    if obj is None:
        return {}
    if not isinstance(obj, dict):
        raise ValueError(f"Expected YAML mapping at {path}, got {type(obj)}")
    return obj


def _section(cfg: dict[str, Any], name: str) -> dict[str, Any]:
    section = cfg.get(name, {})
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ValueError(f"config.yaml {name!r} must be a mapping, got {type(section)}")
    return section


def config_from_mapping(cfg: dict[str, Any], *, repo_root: Path | None = None) -> AppConfig:
    """Build an `AppConfig` from a parsed YAML mapping, applying defaults."""
    data_cfg = _section(cfg, "data")
    online_cfg = _section(cfg, "online")

    source = str(data_cfg.get("source", "directory"))
    if source not in ("directory", "http"):
        raise ValueError(f"config.yaml data.source must be 'directory' or 'http', got {source!r}")

    base_url = data_cfg.get("base_url")
    if source == "http" and not base_url:
        raise ValueError("config.yaml data.base_url is required when data.source is 'http'")

    timeout_raw = data_cfg.get("timeout_s")
    timeout_s = None if timeout_raw is None else float(timeout_raw)

    raw_dir = Path(str(data_cfg.get("raw_dir", "data/raw")))
    if repo_root is not None:
        raw_dir = resolve_path(repo_root, raw_dir)

    top_n = int(online_cfg.get("top_n", 2))
    if top_n < 1:
        raise ValueError(f"config.yaml online.top_n must be >= 1, got {top_n}")

    return AppConfig(
        data=DataConfig(
            source=source,  # type: ignore[arg-type]
            raw_dir=raw_dir,
            base_url=None if base_url is None else str(base_url),
            timeout_s=timeout_s,
            item_resource=str(data_cfg.get("item_resource", ITEM_RESOURCE)),
            data_resource=str(data_cfg.get("data_resource", DATA_RESOURCE)),
        ),
        online=OnlineConfig(
            top_n=top_n,
            log_level=str(online_cfg.get("log_level", "INFO")),
        ),
    )


def load_config(config_path: Path | str | None = None) -> AppConfig:
    """Load `config.yaml` (repo root by default); relative paths resolve against the repo root."""
    repo_root = get_repo_root()
    path = resolve_path(repo_root, config_path) if config_path is not None else repo_root / "config.yaml"
    return config_from_mapping(_load_yaml(path), repo_root=repo_root)


def build_source(cfg: DataConfig) -> TextSource:
    if cfg.source == "http":
        return HttpSource(str(cfg.base_url), timeout_s=cfg.timeout_s)
    return DirectorySource(cfg.raw_dir)
