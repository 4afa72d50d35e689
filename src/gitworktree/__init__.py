"""gitworktree — discard planning and diff argument building for git working trees."""

__version__ = "0.1.0"
