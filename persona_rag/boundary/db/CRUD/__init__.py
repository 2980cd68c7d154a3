"""
CRUD operations for database models.
"""

from persona_rag.boundary.db.CRUD.base_crud import BaseCRUD
from persona_rag.boundary.db.CRUD.document_crud import DocumentCRUD, document_crud

__all__ = ["BaseCRUD", "DocumentCRUD", "document_crud"]
