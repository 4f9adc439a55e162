"""Shared helpers for subprocess execution and retries."""
