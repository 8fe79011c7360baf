"""Processing pipelines for corpus-snapshot."""

from corpus_snapshot.pipelines.batch import BatchPipeline, BatchRequest, prepare_request

__all__ = ["BatchPipeline", "BatchRequest", "prepare_request"]
