"""Main entry point for VirtualCore"""

from __future__ import annotations

import logging

from .cli import cli

def main() -> None:
    """Main entry point"""
    # Configure logging
    logging.basicConfig(level=logging.INFO)
    cli()

if __name__ == "__main__":
    main()
