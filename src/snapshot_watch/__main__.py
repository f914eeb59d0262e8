"""
Entry point for running the snapshot watcher as a module.

Usage:
    python -m snapshot_watch [-c watch.yaml]
"""

from .cli import main

if __name__ == "__main__":
    main()
