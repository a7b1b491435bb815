"""Dependency injection container — wires implementations to interfaces."""
from __future__ import annotations
from functools import lru_cache

from qa_forum.core.config import STORAGE_BACKEND
from qa_forum.application.qa_app_service import QAAppService
from qa_forum.persistence.interfaces.thread_repository import ThreadRepository
from qa_forum.persistence.repositories.memory.memory_thread_repository import MemoryThreadRepository
from qa_forum.persistence.repositories.sqlite.sqlite_thread_repository import SqliteThreadRepository


@lru_cache(maxsize=1)
def get_thread_repo() -> ThreadRepository:
    if STORAGE_BACKEND == "memory":
        return MemoryThreadRepository()
    if STORAGE_BACKEND == "sqlite":
        return SqliteThreadRepository()
    raise ValueError(f"Unknown STORAGE_BACKEND '{STORAGE_BACKEND}'. Use 'sqlite' or 'memory'.")


@lru_cache(maxsize=1)
def get_qa_app_service() -> QAAppService:
    return QAAppService(repo=get_thread_repo())
