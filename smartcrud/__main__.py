# File: smartcrud/__main__.py
"""
SmartCRUD - Module entry point.

Allows running the generator directly via::

    python -m smartcrud Invoice --api --web

This module simply delegates to the CLI entry point defined in ``smartcrud.cli``.
"""

from __future__ import annotations


def main() -> None:
    """Delegate to the CLI main function."""
    from smartcrud.cli import cli_main
    cli_main()


if __name__ == "__main__":
    main()
