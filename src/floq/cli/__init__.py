"""CLI interface for floq (optional [cli] extra)."""

import sys


def main() -> None:
    """Entry point for the floq CLI."""
    try:
        from floq.cli.app import create_app

        app = create_app()
        app()
    except ImportError as e:
        if "typer" in str(e).lower() or "rich" in str(e).lower():
            print("CLI requires typer and rich. Install with: pip install floq[cli]")
            sys.exit(1)
        raise


if __name__ == "__main__":
    main()
