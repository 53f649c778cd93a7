"""TUI interface for floq (optional [tui] extra).

This package provides an interactive terminal interface with a status tab
bar, a task table and a detail pane. Every change made here can be undone
with ``u`` and redone with ``Ctrl+R`` for as long as the application runs.

Example usage:
    from floq.tui import main
    main()

Or from command line:
    floq-tui
"""

import sys


def main() -> None:
    """Entry point for the floq-tui command."""
    try:
        from textual.app import App  # noqa: F401
    except ImportError:
        print("TUI requires textual. Install with: pip install floq[tui]")
        sys.exit(1)

    from floq.config import load_config
    from floq.logging_config import configure_logging
    from floq.services import AppContext
    from floq.tui.app import FloqTUI

    config = load_config()
    # Log to a file; anything written to stderr would corrupt the screen
    configure_logging(config.log_level, log_file=config.log_file)

    with AppContext.from_config(config) as context:
        FloqTUI(context).run()


__all__ = ["main"]


if __name__ == "__main__":
    main()
