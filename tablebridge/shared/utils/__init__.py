"""Utilidades compartidas (sin I/O)."""
