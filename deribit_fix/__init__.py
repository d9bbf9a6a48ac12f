"""Deribit FIX 4.4 toolkit: configuration, message building, admin messages and connections."""

__version__ = "0.1.1"

__all__ = ["admin", "builder", "config", "connection", "constants", "errors"]