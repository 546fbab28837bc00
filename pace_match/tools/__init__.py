"""Developer tooling for inspecting matching runs offline."""

from .match_snapshot import main as match_snapshot_main

__all__ = ["match_snapshot_main"]
