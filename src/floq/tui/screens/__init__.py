"""TUI screens for floq."""
