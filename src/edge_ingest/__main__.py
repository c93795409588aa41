"""
Entry point for running the ingest pipeline as a module.

Usage:
    python -m edge_ingest [-c config.yaml] [--once | --validate]
"""

from .cli import main

if __name__ == "__main__":
    main()
