"""Output merging."""

from corpus_snapshot.merging.merger import OutputMerger

__all__ = ["OutputMerger"]
