"""
Loading and validation of SitemapScout configuration.
Pydantic describes the schema; YAML and JSON files are both accepted.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from datetime import date, datetime
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from sitemap_scout.dates import parse_lower_bound
from sitemap_scout.errors import InvalidLowerBoundError

__all__ = ("HarvestConfig", "load_config")


class HarvestConfig(BaseModel):
    """Settings for one traversal."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    timeout: float = Field(30.0, gt=0, description="Per-request timeout (seconds).")
    user_agent: str = Field("SitemapScout/0.1", min_length=1, description="User-Agent header.")
    max_documents: Optional[int] = Field(
        None, ge=1, description="Stop after fetching this many documents (unlimited if unset)."
    )
    from_date: Optional[Union[datetime, date, int, float, str]] = Field(
        None, description="Default lower bound applied when the caller passes none."
    )

    @field_validator("from_date")
    @classmethod
    def _check_from_date(cls, v: Any) -> Any:
        try:
            parse_lower_bound(v)
        except InvalidLowerBoundError as exc:
            raise ValueError(str(exc)) from exc
        return v


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None] = None) -> HarvestConfig:
    """
    Read YAML or JSON and return a validated HarvestConfig.
    Without a path, ``configs/default.yaml`` is used when present, otherwise defaults.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return HarvestConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    return HarvestConfig(**data)
