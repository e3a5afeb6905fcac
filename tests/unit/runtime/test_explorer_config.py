"""Tests for JSON config persistence and session config resolution.

Malformed config data must fall back to defaults instead of failing.
"""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from mdexplorer.runtime import config


class ConfigBehaviorTests(unittest.TestCase):
    def test_roots_round_trip(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "native" / "config.json"
            roots = [Path(tmp) / "notes", Path(tmp) / "work"]
            with mock.patch("mdexplorer.runtime.config.CONFIG_PATH", config_path):
                config.save_roots(roots)
                self.assertEqual(config.load_roots(), roots)
                self.assertEqual(config.load_config().get("roots"), [str(root) for root in roots])

    def test_load_roots_drops_invalid_items_and_expands_home(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("mdexplorer.runtime.config.CONFIG_PATH", config_path):
                config.save_config({"roots": ["~/docs", 42, "", None, "/abs"]})
                self.assertEqual(
                    config.load_roots(),
                    [Path.home() / "docs", Path("/abs")],
                )

                config.save_config({"roots": "not-a-list"})
                self.assertIsNone(config.load_roots())

                config.save_config({"roots": [1, 2]})
                self.assertIsNone(config.load_roots())

    def test_malformed_config_loads_as_empty(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text("{not json", encoding="utf-8")
            with mock.patch("mdexplorer.runtime.config.CONFIG_PATH", config_path):
                self.assertEqual(config.load_config(), {})
            config_path.write_text("[1, 2]", encoding="utf-8")
            with mock.patch("mdexplorer.runtime.config.CONFIG_PATH", config_path):
                self.assertEqual(config.load_config(), {})

    def test_save_config_ignores_unwritable_location(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            blocker = Path(tmp) / "file"
            blocker.write_text("x", encoding="utf-8")
            with mock.patch("mdexplorer.runtime.config.CONFIG_PATH", blocker / "config.json"):
                config.save_config({"roots": []})
                self.assertEqual(config.load_config(), {})

    def test_state_path_prefers_config_value(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            default_state = Path(tmp) / "default-state"
            with mock.patch("mdexplorer.runtime.config.CONFIG_PATH", config_path), mock.patch(
                "mdexplorer.runtime.config.DEFAULT_STATE_PATH", default_state
            ):
                self.assertEqual(config.load_state_path(), default_state)
                config.save_config({"state_file": str(Path(tmp) / "custom")})
                self.assertEqual(config.load_state_path(), Path(tmp) / "custom")

    def test_default_roots_live_under_home(self) -> None:
        self.assertEqual(
            config.default_roots(),
            [Path.home() / "operations", Path.home() / "development"],
        )


class ResolveConfigTests(unittest.TestCase):
    def test_explicit_values_win(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            explicit_root = Path(tmp) / "explicit"
            state_path = Path(tmp) / "state"
            with mock.patch("mdexplorer.runtime.config.CONFIG_PATH", config_path):
                config.save_config({"roots": [str(Path(tmp) / "configured")]})
                resolved = config.resolve_config(
                    roots=[explicit_root],
                    state_path=state_path,
                    persist_state=False,
                )

            self.assertEqual(resolved.roots, [explicit_root])
            self.assertEqual(resolved.state_path, state_path)
            self.assertFalse(resolved.persist_state)

    def test_falls_back_to_configured_then_default_roots(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            configured = Path(tmp) / "configured"
            with mock.patch("mdexplorer.runtime.config.CONFIG_PATH", config_path):
                self.assertEqual(config.resolve_config().roots, config.default_roots())
                config.save_roots([configured])
                self.assertEqual(config.resolve_config(roots=[]).roots, [configured])


if __name__ == "__main__":
    unittest.main()
