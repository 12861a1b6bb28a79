"""
Core Module - Card models, error taxonomy and the remote card catalog.

Components:
- models: Card and SubjectSummary records
- errors: TransportError, DataError, EmptySubjectError, InvalidTransitionError
- catalog_client: async HTTP client for the card API
"""

from letreviewer.core.catalog_client import CardCatalogClient, summarize_subjects
from letreviewer.core.errors import (
    DataError,
    EmptySubjectError,
    InvalidTransitionError,
    LetReviewerError,
    TransportError,
)
from letreviewer.core.models import Card, SubjectSummary

__all__ = [
    # Models
    "Card",
    "SubjectSummary",
    # Errors
    "LetReviewerError",
    "TransportError",
    "DataError",
    "EmptySubjectError",
    "InvalidTransitionError",
    # Catalog
    "CardCatalogClient",
    "summarize_subjects",
]
