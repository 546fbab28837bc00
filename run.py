#!/usr/bin/env python3
"""Convenience runner for the snapshot matching tool.

Usage:
    python run.py pool.json --user alice
"""
from pace_match.tools.match_snapshot import main

if __name__ == "__main__":
    raise SystemExit(main())
