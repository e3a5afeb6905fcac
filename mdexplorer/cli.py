"""Command-line front door for md-explorer.

Parses CLI options, resolves scan roots and view state, and prints the
visible tree as an indented plain-text listing.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .runtime import open_session
from .runtime.config import resolve_config, save_roots
from .runtime.session import ExplorerSession

INDENT = "  "


def render_listing(session: ExplorerSession) -> str:
    """Return one line per visible row: indentation, label, ``/`` for directories."""
    out: list[str] = []
    for path, depth in session.visible_rows():
        label = session.display_name(path)
        if session.model.is_dir(path) and path not in session.model.roots:
            label += "/"
        out.append(f"{INDENT * depth}{label}\n")
    return "".join(out)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s: %(message)s",
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="md-explorer",
        description="List markdown files under the configured roots as a filtered tree.",
    )
    parser.add_argument(
        "roots",
        nargs="*",
        type=Path,
        help="Directories to scan. Defaults to configured roots, then ~/operations and ~/development.",
    )
    parser.add_argument("--filter", metavar="QUERY", default="", help="Fuzzy-filter file names.")
    parser.add_argument(
        "--show-empty-dirs",
        action="store_true",
        help="Include directories without markdown files below them.",
    )
    parser.add_argument("--claude-only", action="store_true", help="Show only CLAUDE.md files.")
    parser.add_argument("--state-file", type=Path, default=None, help="View-state file to load.")
    parser.add_argument("--no-state", action="store_true", help="Ignore saved collapse state and flags.")
    parser.add_argument(
        "--save-roots",
        action="store_true",
        help="Remember the given roots as the defaults for later runs.",
    )
    parser.add_argument("--verbose", action="store_true", help="Log scan details to stderr.")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse arguments, scan, and print the listing.

    Saved view state is read but never written: this front door only
    reports. With ``--save-roots`` the roots that exist are stored in the
    config file. Exits with a message when none of the roots exist.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.save_roots and not args.roots:
        parser.error("--save-roots needs at least one root")
    _configure_logging(args.verbose)

    config = resolve_config(
        roots=args.roots,
        state_path=args.state_file,
        persist_state=not args.no_state,
    )
    session = open_session(config)
    if not session.model.roots:
        raise SystemExit("No scan roots found: " + ", ".join(str(root) for root in config.roots))
    if args.save_roots:
        save_roots(list(session.model.roots))

    model = session.model
    if args.show_empty_dirs:
        model.show_empty_dirs = True
    if args.claude_only:
        model.claude_only = True
    model.rebuild_flat_cache()
    session.search_query = args.filter
    session.update_filter()

    sys.stdout.write(render_listing(session))


if __name__ == "__main__":
    main()
