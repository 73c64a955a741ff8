"""Blob storage for uploaded images."""

from complaint_portal.storage.blob_store import (
    BlobStore,
    LocalBlobStore,
    UploadedFile,
    get_blob_store,
    store_image,
)

__all__ = ["BlobStore", "LocalBlobStore", "UploadedFile", "get_blob_store", "store_image"]
