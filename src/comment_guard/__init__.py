"""Comment Guard: automated comment moderation service."""

__version__ = "0.1.0"
