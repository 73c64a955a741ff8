from complaint_portal.repositories.base.base_repository import BaseRepository, escape_like

__all__ = ["BaseRepository", "escape_like"]
