"""
Room catalog endpoints used by the complaint form dropdowns.
"""

from typing import Dict, List

from fastapi import APIRouter, Query

from complaint_portal.services.room import get_room_catalog

router = APIRouter(prefix="/rooms", tags=["Rooms"])


@router.get("/buildings", response_model=List[str])
def list_buildings() -> List[str]:
    return get_room_catalog().buildings()


@router.get("", response_model=List[Dict[str, str]])
def list_rooms(building: str = Query(..., min_length=1)) -> List[Dict[str, str]]:
    return get_room_catalog().rooms(building)
