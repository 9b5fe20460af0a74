# File: pageripper/config.py
"""
Loading and validation of the PageRipper configuration.
Pydantic describes the schema and checks the data; YAML or JSON files feed it.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Literal, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = ("CounterConfig", "ServerConfig", "RipperConfig", "load_config")


class CounterConfig(BaseModel):
    """Where the global usage counter lives."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    db_path: Optional[Path] = Field(
        None, description="SQLite file for the counter; in-memory counter when omitted."
    )
    key: str = Field("system", min_length=1, description="Counter record key.")


class ServerConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    host: str = Field("0.0.0.0", min_length=1)
    port: int = Field(8080, ge=0, le=65535)


class RipperConfig(BaseModel):
    """Settings for one PageRipper process."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    timeout: float = Field(10.0, gt=0, description="Timeout for fetching one page (seconds).")
    user_agent: str = Field("PageRipper/1.0", min_length=1, description="User-Agent header.")
    chunk_size: int = Field(8192, ge=64, description="Bytes read from the body per tokenizer feed.")
    queue_size: int = Field(256, ge=1, description="Capacity of the fan-in queue.")
    completion: Literal["both", "first"] = Field(
        "both", description="Stop when both producers finished, or when the first one did."
    )
    link_join: Literal["uri", "path"] = Field(
        "uri", description="How relative links are made absolute."
    )
    drop_empty_hosts: bool = Field(
        False, description="Do not tally the empty hostname of relative links."
    )
    counter: CounterConfig = Field(default_factory=CounterConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    @field_validator("user_agent", mode="before")
    def _strip_user_agent(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
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


def load_config(path: Union[str, Path, None] = None) -> RipperConfig:
    """
    Read YAML or JSON and return a validated RipperConfig.
    Without *path*, configs/default.yaml is used when present, built-in defaults otherwise.
    An explicit path that does not exist raises FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return RipperConfig()
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

    return RipperConfig(**data)
