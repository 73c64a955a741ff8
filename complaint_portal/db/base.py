"""SQLAlchemy Base with every model registered on its metadata."""
from complaint_portal.models.base.base_model import Base


def import_models():
    """Import all models so their tables are known to Base.metadata."""
    from complaint_portal import models  # noqa: F401


import_models()

__all__ = ["Base", "import_models"]
