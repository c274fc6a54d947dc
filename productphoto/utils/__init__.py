"""Shared helpers: image files, logging setup."""
