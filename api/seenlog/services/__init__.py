from . import (
    media_service,
    collection_service,
    consistency_service,
    progress_service,
    review_service,
    summary_service,
    user_service,
)

__all__ = [
    "collection_service",
    "consistency_service",
    "media_service",
    "progress_service",
    "review_service",
    "summary_service",
    "user_service",
]
"""Service-layer helpers for API operations."""
