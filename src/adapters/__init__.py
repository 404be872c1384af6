"""Adaptadores de I/O (HTTP y disco)."""
