"""CodeLock: mandatory rest breaks for long coding sessions."""

__version__ = "1.0.0"
