"""
Configuration system for the Life simulator.

Provides a hierarchical dataclass-based config with JSON serialization,
validation, and sensible defaults for the universe, rendering and the
host render loop.
"""

from __future__ import annotations

import json
import warnings
from copy import deepcopy
from dataclasses import dataclass, field, fields, asdict, is_dataclass
from pathlib import Path
from typing import Any

from lifegrid.core.patterns import PATTERNS
from lifegrid.core.universe import (
    DEFAULT_ALIVE_GLYPH,
    DEFAULT_DEAD_GLYPH,
    Universe,
)


# Seed modes that are not named patterns.
SEED_MODES = ("modulo", "empty", "random")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


# ---------------------------------------------------------------------------
# Sub-config dataclasses (grouped by domain)
# ---------------------------------------------------------------------------

@dataclass
class UniverseConfig:
    """Grid size and initial population."""
    width: int = 64
    height: int = 32
    pattern: str = "modulo"  # "modulo", "empty", "random" or a pattern name
    seed: int = 42
    density: float = 0.5     # only used by "random"

    def validate(self) -> list[str]:
        errors = []
        for name, value in (("width", self.width), ("height", self.height)):
            if not _is_int(value):
                errors.append(f"universe.{name} must be an int, got {value!r}")
            elif value < 1:
                errors.append(f"universe.{name} must be >= 1, got {value}")
            elif value > 10_000:
                errors.append(f"universe.{name} must be <= 10000, got {value}")
        if not isinstance(self.pattern, str) or (
            self.pattern not in SEED_MODES and self.pattern not in PATTERNS
        ):
            choices = ", ".join(list(SEED_MODES) + sorted(PATTERNS))
            errors.append(f"universe.pattern must be one of {choices}, got {self.pattern!r}")
        if not _is_int(self.seed):
            errors.append(f"universe.seed must be an int, got {self.seed!r}")
        if not _is_number(self.density):
            errors.append(f"universe.density must be a number, got {self.density!r}")
        elif not (0.0 <= self.density <= 1.0):
            errors.append(f"universe.density must be in [0, 1], got {self.density}")
        return errors


@dataclass
class RenderConfig:
    """Glyphs used for the text snapshot."""
    dead_glyph: str = DEFAULT_DEAD_GLYPH
    alive_glyph: str = DEFAULT_ALIVE_GLYPH

    def validate(self) -> list[str]:
        errors = []
        for name, glyph in (("dead_glyph", self.dead_glyph),
                            ("alive_glyph", self.alive_glyph)):
            if not isinstance(glyph, str) or len(glyph) != 1:
                errors.append(f"render.{name} must be a single character, got {glyph!r}")
        if self.dead_glyph == self.alive_glyph:
            errors.append(f"render.dead_glyph and render.alive_glyph must differ, both are {self.dead_glyph!r}")
        return errors


@dataclass
class LoopConfig:
    """Host render loop settings."""
    fps: float = 10.0            # 0 = no throttling
    max_frames: int = 100        # 0 = run until stopped
    stop_when_static: bool = False

    def validate(self) -> list[str]:
        errors = []
        if not _is_number(self.fps):
            errors.append(f"loop.fps must be a number, got {self.fps!r}")
        elif self.fps < 0:
            errors.append(f"loop.fps must be >= 0, got {self.fps}")
        if not _is_int(self.max_frames):
            errors.append(f"loop.max_frames must be an int, got {self.max_frames!r}")
        elif self.max_frames < 0:
            errors.append(f"loop.max_frames must be >= 0, got {self.max_frames}")
        if not isinstance(self.stop_when_static, bool):
            errors.append(f"loop.stop_when_static must be true or false, got {self.stop_when_static!r}")
        return errors


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------

@dataclass
class LifeConfig:
    """
    Top-level simulator configuration.

    Nested dataclasses group related settings.
    Load from JSON with `load_config()`, validate with `validate()`.
    """
    universe: UniverseConfig = field(default_factory=UniverseConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    loop: LoopConfig = field(default_factory=LoopConfig)

    def validate(self) -> list[str]:
        """Validate all config sections. Returns list of error messages (empty = valid)."""
        errors = []
        for f in fields(self):
            sub = getattr(self, f.name)
            if not isinstance(sub, f.default_factory):
                errors.append(
                    f"{f.name} must be a {f.default_factory.__name__} section, got {sub!r}"
                )
                continue
            errors.extend(sub.validate())
        return errors

    def to_dict(self) -> dict[str, Any]:
        """Convert to nested dict for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LifeConfig:
        """
        Create LifeConfig from nested dict, merging with defaults.

        Raises:
            ValueError: If `data` or one of its sections is not a dict.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Config must be a JSON object, got {type(data).__name__}")
        config = cls()
        _merge_into_dataclass(config, data, path="")
        return config

    def copy(self) -> LifeConfig:
        """Deep copy of this config."""
        return deepcopy(self)


# ---------------------------------------------------------------------------
# Field access helpers
# ---------------------------------------------------------------------------

def _field_names(obj: Any) -> set[str]:
    """Dataclass field names of `obj` (empty for non-dataclasses)."""
    if not is_dataclass(obj):
        return set()
    return {f.name for f in fields(obj)}


def _merge_into_dataclass(target: Any, source: dict[str, Any], path: str) -> None:
    """
    Recursively merge a dict into a dataclass instance.

    Unknown keys emit a warning and are skipped. A section given as
    anything but a dict raises ValueError instead of replacing the section.
    """
    known_fields = _field_names(target)
    for key, value in source.items():
        dotted = f"{path}{key}"
        if key not in known_fields:
            warnings.warn(
                f"Unknown config key '{dotted}' in section {type(target).__name__}, ignored.",
                UserWarning,
                stacklevel=4,
            )
            continue

        current = getattr(target, key)
        if is_dataclass(current):
            if not isinstance(value, dict):
                raise ValueError(f"Config section '{dotted}' must be an object, got {value!r}")
            _merge_into_dataclass(current, value, path=f"{dotted}.")
        else:
            setattr(target, key, value)


def load_config(path: str | Path) -> LifeConfig:
    """
    Load config from a JSON file. Missing fields use defaults.

    Args:
        path: Path to JSON config file.

    Returns:
        Validated LifeConfig instance.

    Raises:
        FileNotFoundError: If path doesn't exist.
        json.JSONDecodeError: If JSON is malformed.
        ValueError: If the structure or any config value is invalid.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    config = LifeConfig.from_dict(data)

    errors = config.validate()
    if errors:
        msg = "Invalid configuration:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ValueError(msg)

    return config


def save_config(config: LifeConfig, path: str | Path) -> None:
    """Save config to JSON file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=2, ensure_ascii=False)


def get_default_config() -> LifeConfig:
    """Return a fresh default config (all defaults, validated)."""
    config = LifeConfig()
    errors = config.validate()
    assert not errors, f"Default config is invalid: {errors}"
    return config


def apply_param_override(config: LifeConfig, dotted_key: str, value: Any) -> None:
    """
    Set a single leaf setting using dot notation.

    Only dataclass fields are reachable, and the target must be a setting,
    not a whole section.

    Example:
        apply_param_override(config, "universe.width", 128)
        apply_param_override(config, "loop.fps", 0)

    Args:
        config: LifeConfig to modify in-place.
        dotted_key: Dot-separated path like "universe.pattern".
        value: New value to set (checked later by validate()).

    Raises:
        KeyError: If the path doesn't name a setting.
    """
    parts = dotted_key.split(".")
    obj: Any = config
    for part in parts[:-1]:
        if part not in _field_names(obj):
            raise KeyError(f"Config path '{dotted_key}' invalid: '{part}' is not a section of {type(obj).__name__}")
        obj = getattr(obj, part)

    final_key = parts[-1]
    if final_key not in _field_names(obj):
        raise KeyError(f"Config path '{dotted_key}' invalid: '{final_key}' not found in {type(obj).__name__}")
    if is_dataclass(getattr(obj, final_key)):
        raise KeyError(f"Config path '{dotted_key}' names a whole section; set one of its fields instead")

    setattr(obj, final_key, value)


def create_universe(config: LifeConfig) -> Universe:
    """
    Build the initial Universe described by `config.universe`.

    Raises:
        ValueError: If the universe section is missing or invalid.
    """
    uc = config.universe
    if not isinstance(uc, UniverseConfig):
        raise ValueError(f"universe must be a UniverseConfig section, got {uc!r}")
    errors = uc.validate()
    if errors:
        raise ValueError("Invalid universe configuration:\n" + "\n".join(f"  - {e}" for e in errors))

    if uc.pattern == "modulo":
        return Universe.new(uc.width, uc.height)
    if uc.pattern == "empty":
        return Universe.empty(uc.width, uc.height)
    if uc.pattern == "random":
        return Universe.random(uc.width, uc.height, seed=uc.seed, density=uc.density)
    return Universe.from_pattern(uc.width, uc.height, uc.pattern)
