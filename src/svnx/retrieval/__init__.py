"""
Revision history retrieval.

Provides the retrieval pipeline and the components it drives: batch
pagination, record building, content materialization and progress
estimation.
"""

from .builders import ChangeRecordBuilder, RevisionRecordBuilder, filter_revision_properties
from .materializer import ContentMaterializer, is_binary_mime_type
from .paginator import BatchPaginator, BatchResult
from .pipeline import RetrievalPipeline, RevisionStream, retrieve
from .progress import ProgressEstimator, ProgressSnapshot, format_duration

__all__ = [
    "BatchPaginator",
    "BatchResult",
    "ChangeRecordBuilder",
    "ContentMaterializer",
    "ProgressEstimator",
    "ProgressSnapshot",
    "RetrievalPipeline",
    "RevisionRecordBuilder",
    "RevisionStream",
    "filter_revision_properties",
    "format_duration",
    "is_binary_mime_type",
    "retrieve",
]
