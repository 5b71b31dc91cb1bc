"""Core configuration and shared value objects."""
