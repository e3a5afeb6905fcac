"""Persistent JSON config helpers.

Stores the list of scan roots and an optional view-state file location.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_config_dir, user_state_dir

APP_NAME = "md-explorer"
CONFIG_FILENAME = "config.json"
STATE_FILENAME = "state"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
DEFAULT_STATE_PATH = Path(user_state_dir(APP_NAME, appauthor=False)) / STATE_FILENAME
DEFAULT_ROOT_NAMES = ("operations", "development")


@dataclass
class ExplorerConfig:
    """Resolved settings for one explorer session."""

    roots: list[Path] = field(default_factory=list)
    state_path: Path = DEFAULT_STATE_PATH
    persist_state: bool = True


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Any filesystem/serialization error is ignored so an unwritable config
    location never interrupts a session.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception:
        pass


def default_roots() -> list[Path]:
    """Return ``~/operations`` and ``~/development``."""
    home = Path.home()
    return [home / name for name in DEFAULT_ROOT_NAMES]


def load_roots() -> list[Path] | None:
    """Return configured scan roots, or ``None`` when none are configured.

    Non-string items are dropped and ``~`` is expanded.
    """
    value = load_config().get("roots")
    if not isinstance(value, list):
        return None
    roots = [Path(item).expanduser() for item in value if isinstance(item, str) and item]
    return roots or None


def save_roots(roots: list[Path]) -> None:
    """Persist scan roots as strings."""
    config = load_config()
    config["roots"] = [str(root) for root in roots]
    save_config(config)


def load_state_path() -> Path:
    """Return the configured view-state file, falling back to the platform state dir."""
    value = load_config().get("state_file")
    if isinstance(value, str) and value:
        return Path(value).expanduser()
    return DEFAULT_STATE_PATH


def resolve_config(
    roots: list[Path] | None = None,
    state_path: Path | None = None,
    persist_state: bool = True,
) -> ExplorerConfig:
    """Combine explicit overrides with persisted config and defaults."""
    if not roots:
        roots = load_roots() or default_roots()
    if state_path is None:
        state_path = load_state_path()
    return ExplorerConfig(roots=list(roots), state_path=state_path, persist_state=persist_state)
