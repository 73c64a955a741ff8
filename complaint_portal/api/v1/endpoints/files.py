"""
Serves stored uploads back by key.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from complaint_portal.dependencies import get_storage
from complaint_portal.storage import BlobStore

router = APIRouter(prefix="/files", tags=["Files"])


@router.get("/{key:path}")
def get_file(key: str, blob_store: BlobStore = Depends(get_storage)) -> FileResponse:
    return FileResponse(blob_store.open(key))
