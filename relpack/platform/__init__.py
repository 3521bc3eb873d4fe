"""Filesystem helpers."""

from .files import atomic_write_text, sha256_file

__all__ = ["atomic_write_text", "sha256_file"]
