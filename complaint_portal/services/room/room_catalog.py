"""
Room catalog loaded from the institution's room store JSON.

Rows describe either an academic building room ("Building Name",
"Lab/Room Name") or a hostel room ("Hostel", "Floor/Block"). The room
number key appears as both "Room No." and "Room No" in real exports.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List

from complaint_portal.config.settings import settings
from complaint_portal.core.exceptions import OperationError
from complaint_portal.core.logging import get_logger

logger = get_logger(__name__)


def _text(row: Dict[str, Any], key: str) -> str:
    value = row.get(key)
    return str(value).strip() if value is not None else ""


def _room_no(row: Dict[str, Any]) -> str:
    for key in ("Room No.", "Room No"):
        value = _text(row, key)
        if value:
            return value
    return ""


class RoomCatalog:
    """Read-only building and room lookup."""

    def __init__(self, rows: List[Dict[str, Any]]):
        self.rows = rows

    @classmethod
    def from_file(cls, path: Path) -> "RoomCatalog":
        try:
            with open(path, encoding="utf-8") as fh:
                rows = json.load(fh)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Could not load room catalog from {path}: {e}")
            raise OperationError("Room catalog is unavailable") from e

        if not isinstance(rows, list):
            raise OperationError("Room catalog must be a JSON array")
        logger.info(f"Loaded {len(rows)} rooms from {path}")
        return cls([row for row in rows if isinstance(row, dict)])

    def buildings(self) -> List[str]:
        """Unique building and hostel names, sorted."""
        names = {
            _text(row, "Building Name") or _text(row, "Hostel")
            for row in self.rows
        }
        return sorted(name for name in names if name)

    def is_hostel(self, building: str) -> bool:
        building = building.strip()
        return any(_text(row, "Hostel") == building for row in self.rows)

    def rooms(self, building: str) -> List[Dict[str, str]]:
        """
        Room options for one building.

        Hostel rooms are labelled with their floor or block, academic rooms
        with the lab or room name.
        """
        building = (building or "").strip()
        if not building:
            return []

        hostel = self.is_hostel(building)
        match_key, suffix_key = ("Hostel", "Floor/Block") if hostel else ("Building Name", "Lab/Room Name")

        options = []
        for row in self.rows:
            if _text(row, match_key) != building:
                continue
            room_no = _room_no(row)
            if not room_no:
                continue
            suffix = _text(row, suffix_key)
            options.append({
                "value": room_no,
                "label": f"{room_no} - {suffix}" if suffix else room_no,
                "type": _text(row, "Room Type"),
            })
        return options


@lru_cache()
def get_room_catalog() -> RoomCatalog:
    return RoomCatalog.from_file(settings.room_catalog_path)
