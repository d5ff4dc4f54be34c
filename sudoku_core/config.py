from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .difficulty import Difficulty, DifficultyProfile, default_profiles
from .errors import ConfigError


class DotDict(dict):
    __getattr__ = dict.get
    __setattr__ = dict.__setitem__
    __delattr__ = dict.__delitem__


def load_yaml(path: str | Path) -> DotDict:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping")
    return DotDict(data)


def merge_overrides(cfg: Dict[str, Any], **overrides) -> Dict[str, Any]:
    for k, v in overrides.items():
        if v is None:
            continue
        cfg[k] = v
    return cfg


@dataclass
class GeneratorConfig:
    max_generation_attempts: int = 50
    shuffle_transformations: int = 100
    seed: Optional[int] = None
    profiles: Dict[Difficulty, DifficultyProfile] = field(default_factory=default_profiles)

    def profile(self, difficulty: Difficulty | str) -> DifficultyProfile:
        return self.profiles[Difficulty.parse(difficulty)]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GeneratorConfig":
        data = dict(data)
        overrides = data.pop("difficulties", None) or {}
        unknown = set(data) - {"max_generation_attempts", "shuffle_transformations", "seed"}
        if unknown:
            raise ConfigError(f"unknown config keys: {sorted(unknown)}")
        cfg = cls(**data)
        if cfg.max_generation_attempts < 1:
            raise ConfigError("max_generation_attempts must be >= 1")
        if cfg.shuffle_transformations < 0:
            raise ConfigError("shuffle_transformations must be >= 0")
        for name, fields in overrides.items():
            try:
                difficulty = Difficulty.parse(name)
            except ValueError as exc:
                raise ConfigError(str(exc)) from None
            fields = dict(fields or {})
            for key in ("clue_range", "techniques"):
                if key in fields:
                    fields[key] = tuple(fields[key])
            try:
                cfg.profiles[difficulty] = dataclasses.replace(cfg.profiles[difficulty], **fields)
            except (TypeError, ValueError) as exc:
                raise ConfigError(f"difficulty {difficulty.value}: {exc}") from None
        return cfg


def load_config(path: str | Path | None = None, **overrides) -> GeneratorConfig:
    """Read a YAML generator config; keyword overrides win when not None."""
    data = load_yaml(path) if path is not None else DotDict()
    return GeneratorConfig.from_dict(merge_overrides(data, **overrides))
