from complaint_portal.services.room.room_catalog import RoomCatalog, get_room_catalog

__all__ = ["RoomCatalog", "get_room_catalog"]
