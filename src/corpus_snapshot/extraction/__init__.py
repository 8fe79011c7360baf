"""Extraction collaborator boundary."""

from corpus_snapshot.extraction.base import Extractor, collect_dated_files
from corpus_snapshot.extraction.config import ExtractionConfig
from corpus_snapshot.extraction.script import ScriptExtractor

__all__ = ["Extractor", "ExtractionConfig", "ScriptExtractor", "collect_dated_files"]
