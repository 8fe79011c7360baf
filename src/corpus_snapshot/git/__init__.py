"""Git integration module for corpus-snapshot."""

from corpus_snapshot.git.client import GitClient
from corpus_snapshot.git.history import HistoricalCheckoutSelector
from corpus_snapshot.git.synchronizer import RepositorySynchronizer

__all__ = ["GitClient", "HistoricalCheckoutSelector", "RepositorySynchronizer"]
