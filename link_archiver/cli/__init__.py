"""Command-line entry points for link_archiver.

    python -m link_archiver.cli init-db
    python -m link_archiver.cli archive <link-id> [--json]

All CLI modules use argparse and write logs to stderr.
"""
