"""Shared exceptions and file helpers."""
