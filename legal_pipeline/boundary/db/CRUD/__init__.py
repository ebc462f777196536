"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from legal_pipeline.boundary.db.CRUD import document_crud, job_crud

    doc = await document_crud.get_by_source_hash(db, source_hash)
"""

from legal_pipeline.boundary.db.CRUD.base_crud import BaseCRUD
from legal_pipeline.boundary.db.CRUD.app_setting_crud import AppSettingCRUD, app_setting_crud
from legal_pipeline.boundary.db.CRUD.chunk_crud import ChunkCRUD, chunk_crud
from legal_pipeline.boundary.db.CRUD.document_crud import DocumentCRUD, document_crud
from legal_pipeline.boundary.db.CRUD.job_crud import JobCRUD, job_crud

__all__ = [
    "BaseCRUD",
    "AppSettingCRUD",
    "ChunkCRUD",
    "DocumentCRUD",
    "JobCRUD",
    "app_setting_crud",
    "chunk_crud",
    "document_crud",
    "job_crud",
]
