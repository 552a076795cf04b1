"""Backend selection from storage configuration."""

from __future__ import annotations

import logging

from story_api.storage.backends.base import StorageBackend
from story_api.storage.backends.local import LocalStorageBackend
from story_api.storage.config import BackendType, StorageConfig

logger = logging.getLogger(__name__)


def create_backend(config: StorageConfig) -> StorageBackend:
    """Create the storage backend named by config.

    The GCS backend is imported only when selected, so local development
    does not need Google credentials.

    Args:
        config: Storage configuration.

    Returns:
        Ready-to-use storage backend.

    Raises:
        ValueError: If the gcs backend is selected without a bucket.
    """
    if config.backend == BackendType.GCS:
        if not config.bucket:
            raise ValueError("A bucket is required for the gcs storage backend")

        from story_api.storage.backends.gcs import GCSStorageBackend

        logger.info(f"Using GCS bucket {config.bucket}")
        return GCSStorageBackend(
            bucket_name=config.bucket,
            extended_content_types=config.extended_content_types,
        )

    logger.info(f"Using local storage at {config.local_root}")
    return LocalStorageBackend(root=config.local_root)
