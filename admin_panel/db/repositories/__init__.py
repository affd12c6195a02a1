# Repository pattern: abstract data access (SOLID - Dependency Inversion)

from admin_panel.db.repositories.base_repository import BaseRepository
from admin_panel.db.repositories.model_repository import ModelRepository, TableData

__all__ = ["BaseRepository", "ModelRepository", "TableData"]
