"""floq - a GTD-style task manager with undoable history.

Tasks move through inbox/next/waiting/someday/done, group under projects
and carry contexts and comments.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
