"""Session orchestration: configuration, persisted view state and the explorer session.

``open_session`` is the entry point used by the CLI and by any interactive
front end; it scans the configured roots and restores the saved view.
"""

from __future__ import annotations


def open_session(*args, **kwargs):
    """Lazily import the session factory to keep config-only imports light."""
    from .session import open_session as _open_session

    return _open_session(*args, **kwargs)


__all__ = ["open_session"]
