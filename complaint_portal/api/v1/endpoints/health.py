from typing import Dict

from fastapi import APIRouter

from complaint_portal.config.settings import settings

router = APIRouter(tags=["Health"])


@router.get("/health")
def health() -> Dict[str, str]:
    return {
        "status": "ok",
        "app": settings.APP_NAME,
        "version": settings.API_VERSION,
        "environment": settings.ENVIRONMENT,
    }
