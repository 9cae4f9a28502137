"""Core configuration and logging for CollabPortal."""
