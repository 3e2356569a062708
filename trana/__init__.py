"""Trana notification centre package."""
