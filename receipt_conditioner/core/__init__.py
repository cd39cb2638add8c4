"""Core pixel operations."""
