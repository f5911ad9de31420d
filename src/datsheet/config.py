from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError

DEFAULTS: Dict[str, Any] = {
    "extension": ".dat",       # object description files
    "join_char": ";",          # replaces the path separator in sheet names
    "root_sheet": ";",         # sheet name of the root directory itself
    "separator": "---",        # line written between objects of one file
    "application": "datSheet",
}


@dataclass(frozen=True)
class ConvertConfig:
    """
    Settings of one conversion run. The defaults match the layout the
    workbooks are exchanged in; changing ``join_char`` or ``root_sheet``
    produces workbooks that only a run with the same settings maps back.
    """
    extension: str = DEFAULTS["extension"]
    join_char: str = DEFAULTS["join_char"]
    root_sheet: str = DEFAULTS["root_sheet"]
    separator: str = DEFAULTS["separator"]
    application: str = DEFAULTS["application"]

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, str) or not value:
                raise ConfigError(f"'{f.name}' must be a non-empty string, got {value!r}")
        if self.join_char in ("/", "\\"):
            raise ConfigError("'join_char' must not be a path separator")
        # directory sheet names never have an empty segment
        if all(self.root_sheet.split(self.join_char)):
            raise ConfigError(
                f"'root_sheet' {self.root_sheet!r} could also be the name of a directory; "
                f"it needs an empty segment, e.g. a leading or trailing {self.join_char!r}"
            )
        if not self.separator.startswith("-"):
            raise ConfigError("'separator' must start with '-' to be read back as a separator line")


def config_from_dict(raw: Dict[str, Any] | None) -> ConvertConfig:
    """Merge ``raw`` over DEFAULTS and validate it."""
    raw = raw or {}
    unknown = sorted(set(raw) - set(DEFAULTS))
    if unknown:
        raise ConfigError(f"Unknown config key(s) {unknown}. Available: {sorted(DEFAULTS)}")
    merged = DEFAULTS.copy()
    merged.update(raw)
    if "join_char" in raw and "root_sheet" not in raw:
        merged["root_sheet"] = merged["join_char"]
    return ConvertConfig(**merged)


def load_config(path: Optional[str]) -> ConvertConfig:
    """
    Load a YAML config file. ``None`` yields the defaults.

    The file may hold the keys at top level or below a ``datsheet:`` key.
    """
    if not path:
        return ConvertConfig()
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except OSError as exc:
        raise ConfigError(f"{exc.strerror}: {path}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError(f"{path} must contain a mapping")
    if isinstance(raw.get("datsheet"), dict):
        raw = raw["datsheet"]
    return config_from_dict(raw)
