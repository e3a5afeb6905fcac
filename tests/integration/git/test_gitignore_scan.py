"""Integration tests for git ignore rules during markdown scans.

Needs a real ``git`` binary; builds throwaway repositories in temp dirs.
"""

from __future__ import annotations

import shutil
import subprocess
import tempfile
import unittest
from pathlib import Path

from mdexplorer.file_tree_model import scan_directories
from mdexplorer.ignore_rules import IgnoreRules, find_enclosing_repository, load_repository_ignores


def _inside_repository(path: Path) -> bool:
    result = subprocess.run(
        ["git", "-C", str(path), "rev-parse", "--show-toplevel"],
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
    )
    return result.returncode == 0


@unittest.skipIf(shutil.which("git") is None, "git is required for gitignore integration tests")
class GitignoreScanTests(unittest.TestCase):
    def _init_repo(self, root: Path) -> None:
        root.mkdir(parents=True, exist_ok=True)
        subprocess.run(["git", "init", "-q"], cwd=root, check=True)
        (root / ".gitignore").write_text("drafts/\nscratch.md\n", encoding="utf-8")
        (root / "keep.md").write_text("# keep\n", encoding="utf-8")
        (root / "scratch.md").write_text("# scratch\n", encoding="utf-8")
        (root / "drafts").mkdir()
        (root / "drafts" / "wip.md").write_text("# wip\n", encoding="utf-8")
        (root / "docs").mkdir()
        (root / "docs" / "guide.md").write_text("# guide\n", encoding="utf-8")

    def test_scan_skips_gitignored_entries(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            self._init_repo(root)

            index = scan_directories([root])

            self.assertEqual(
                set(index.markdown_files),
                {root / "keep.md", root / "docs" / "guide.md"},
            )
            self.assertNotIn(root / "drafts", index.entries)

    def test_scan_can_include_gitignored_entries(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            self._init_repo(root)

            index = scan_directories([root], skip_ignored=False)

            self.assertIn(root / "scratch.md", index.markdown_files)
            self.assertIn(root / "drafts" / "wip.md", index.markdown_files)

    def test_repository_below_scan_root_applies_its_gitignore(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            if _inside_repository(root):
                self.skipTest("temporary directory is inside a git repository")
            project = root / "project"
            self._init_repo(project)
            (root / "notes.md").write_text("# notes\n", encoding="utf-8")

            index = scan_directories([root])

            self.assertEqual(
                set(index.markdown_files),
                {root / "notes.md", project / "keep.md", project / "docs" / "guide.md"},
            )
            self.assertNotIn(project / "drafts", index.entries)
            self.assertNotIn(project / "drafts" / "wip.md", index.markdown_files)

    def test_sibling_repositories_keep_their_own_rules(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            if _inside_repository(root):
                self.skipTest("temporary directory is inside a git repository")
            first = root / "first"
            second = root / "second"
            self._init_repo(first)
            second.mkdir()
            subprocess.run(["git", "init", "-q"], cwd=second, check=True)
            (second / "drafts").mkdir()
            (second / "drafts" / "plan.md").write_text("# plan\n", encoding="utf-8")

            index = scan_directories([root])

            self.assertNotIn(first / "drafts" / "wip.md", index.markdown_files)
            self.assertIn(second / "drafts" / "plan.md", index.markdown_files)

    def test_nested_repository_rules_stack_with_outer_rules(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            outer = Path(tmp).resolve()
            self._init_repo(outer)
            inner = outer / "docs" / "vendor-notes"
            inner.mkdir()
            subprocess.run(["git", "init", "-q"], cwd=inner, check=True)
            (inner / ".gitignore").write_text("private.md\n", encoding="utf-8")
            (inner / "private.md").write_text("# private\n", encoding="utf-8")
            (inner / "public.md").write_text("# public\n", encoding="utf-8")
            (inner / "scratch.md").write_text("# scratch\n", encoding="utf-8")

            index = scan_directories([outer])

            self.assertIn(inner / "public.md", index.markdown_files)
            self.assertNotIn(inner / "private.md", index.markdown_files)
            # The outer repository does not reach into the nested one.
            self.assertIn(inner / "scratch.md", index.markdown_files)

    def test_root_below_repository_top_inherits_its_rules(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            repo = Path(tmp).resolve()
            self._init_repo(repo)
            (repo / "docs" / "old.md").write_text("# old\n", encoding="utf-8")
            (repo / "docs" / ".gitignore").write_text("old.md\n", encoding="utf-8")

            rules = IgnoreRules.for_root(repo / "docs")
            index = scan_directories([repo / "docs"])

            self.assertEqual(len(rules.repositories), 1)
            self.assertTrue(rules.is_ignored(repo / "docs" / "old.md", False))
            self.assertEqual(index.markdown_files, (repo / "docs" / "guide.md",))

    def test_repository_ignores_are_scoped_to_their_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            repo = Path(tmp).resolve()
            self._init_repo(repo)

            ignores = load_repository_ignores(repo / "docs")

            self.assertIsNotNone(ignores)
            self.assertEqual(ignores.ignored, frozenset())
            self.assertTrue(load_repository_ignores(repo).is_ignored(repo / "drafts"))

    def test_directory_outside_repository_has_no_enclosing_repository(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            if _inside_repository(root):
                self.skipTest("temporary directory is inside a git repository")

            self.assertIsNone(find_enclosing_repository(root))
            self.assertEqual(IgnoreRules.for_root(root), IgnoreRules())


if __name__ == "__main__":
    unittest.main()
