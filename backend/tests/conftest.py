import pytest

from qa_forum.application.qa_app_service import QAAppService
from qa_forum.domain.qa.models import Author
from qa_forum.persistence.db import init_db
from qa_forum.persistence.repositories.memory.memory_thread_repository import MemoryThreadRepository
from qa_forum.persistence.repositories.sqlite.sqlite_thread_repository import SqliteThreadRepository


@pytest.fixture
def db_path(tmp_path):
    path = str(tmp_path / "qa.db")
    init_db(path)
    return path


@pytest.fixture(params=["sqlite", "memory"])
def repo(request, tmp_path):
    if request.param == "sqlite":
        path = str(tmp_path / "qa.db")
        init_db(path)
        return SqliteThreadRepository(path)
    return MemoryThreadRepository()


@pytest.fixture
def svc(repo):
    return QAAppService(repo=repo)


@pytest.fixture
def student():
    return Author(user_id="user1", user_name="Alice Johnson", user_type="student")


@pytest.fixture
def other_student():
    return Author(user_id="user3", user_name="Carol Davis", user_type="student")


@pytest.fixture
def instructor():
    return Author(user_id="instructor1", user_name="John Smith", user_type="instructor")
