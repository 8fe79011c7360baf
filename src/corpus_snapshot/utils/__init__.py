"""Utility helpers for corpus-snapshot."""
