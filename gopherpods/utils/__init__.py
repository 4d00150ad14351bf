"""Shared helpers for logging and input handling."""
