"""SQLite implementation of ThreadRepository."""
from __future__ import annotations
import logging
import sqlite3
from typing import Dict, List, Optional

from qa_forum.domain.common.errors import InvariantViolationError, NotFoundError, ValidationError
from qa_forum.domain.qa.acceptance import consistency_errors
from qa_forum.domain.qa.models import Answer, Question, Thread
from qa_forum.persistence.db import get_connection, transaction
from qa_forum.persistence.interfaces.thread_repository import ThreadRepository

logger = logging.getLogger(__name__)


def _row_to_question(row) -> Question:
    return Question(
        id=row["id"],
        lesson_id=row["lesson_id"],
        user_id=row["user_id"],
        user_name=row["user_name"],
        user_type=row["user_type"],
        user_avatar=row["user_avatar"],
        title=row["title"],
        content=row["content"],
        upvotes=row["upvotes"],
        is_resolved=bool(row["is_resolved"]),
        accepted_answer_id=row["accepted_answer_id"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _row_to_answer(row) -> Answer:
    return Answer(
        id=row["id"],
        question_id=row["question_id"],
        user_id=row["user_id"],
        user_name=row["user_name"],
        user_type=row["user_type"],
        user_avatar=row["user_avatar"],
        content=row["content"],
        upvotes=row["upvotes"],
        is_accepted=bool(row["is_accepted"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _load_thread(conn: sqlite3.Connection, question_id: str) -> Optional[Thread]:
    row = conn.execute("SELECT * FROM questions WHERE id = ?", (question_id,)).fetchone()
    if not row:
        return None
    answer_rows = conn.execute(
        "SELECT * FROM answers WHERE question_id = ? ORDER BY rowid ASC",
        (question_id,),
    ).fetchall()
    return Thread(question=_row_to_question(row), answers=[_row_to_answer(r) for r in answer_rows])


class SqliteThreadRepository(ThreadRepository):

    def __init__(self, db_path: Optional[str] = None):
        self._db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        return get_connection(self._db_path)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def save_question(self, question: Question) -> None:
        conn = self._connect()
        try:
            with transaction(conn):
                conn.execute(
                    """
                    INSERT INTO questions (
                        id, lesson_id, user_id, user_name, user_type, user_avatar,
                        title, content, upvotes, is_resolved, accepted_answer_id,
                        created_at, updated_at
                    ) VALUES (
                        :id, :lesson_id, :user_id, :user_name, :user_type, :user_avatar,
                        :title, :content, :upvotes, :is_resolved, :accepted_answer_id,
                        :created_at, :updated_at
                    )
                    """,
                    {
                        "id": question.id,
                        "lesson_id": question.lesson_id,
                        "user_id": question.user_id,
                        "user_name": question.user_name,
                        "user_type": question.user_type,
                        "user_avatar": question.user_avatar,
                        "title": question.title,
                        "content": question.content,
                        "upvotes": question.upvotes,
                        "is_resolved": int(question.is_resolved),
                        "accepted_answer_id": question.accepted_answer_id,
                        "created_at": question.created_at,
                        "updated_at": question.updated_at,
                    },
                )
        except sqlite3.IntegrityError as e:
            if "UNIQUE" in str(e):
                raise InvariantViolationError(f"Question '{question.id}' already exists.")
            raise ValidationError(f"Question rejected by storage: {e}")
        finally:
            conn.close()

    def save_answer(self, answer: Answer) -> None:
        conn = self._connect()
        try:
            with transaction(conn):
                conn.execute(
                    """
                    INSERT INTO answers (
                        id, question_id, user_id, user_name, user_type, user_avatar,
                        content, upvotes, is_accepted, created_at, updated_at
                    ) VALUES (
                        :id, :question_id, :user_id, :user_name, :user_type, :user_avatar,
                        :content, :upvotes, :is_accepted, :created_at, :updated_at
                    )
                    """,
                    {
                        "id": answer.id,
                        "question_id": answer.question_id,
                        "user_id": answer.user_id,
                        "user_name": answer.user_name,
                        "user_type": answer.user_type,
                        "user_avatar": answer.user_avatar,
                        "content": answer.content,
                        "upvotes": answer.upvotes,
                        "is_accepted": int(answer.is_accepted),
                        "created_at": answer.created_at,
                        "updated_at": answer.updated_at,
                    },
                )
        except sqlite3.IntegrityError as e:
            if "FOREIGN KEY" in str(e):
                raise NotFoundError(f"Question '{answer.question_id}' not found.")
            if "UNIQUE" in str(e):
                raise InvariantViolationError(f"Answer '{answer.id}' already exists.")
            raise ValidationError(f"Answer rejected by storage: {e}")
        finally:
            conn.close()

    def increment_question_upvotes(self, question_id: str) -> Optional[Question]:
        conn = self._connect()
        try:
            with transaction(conn):
                cur = conn.execute(
                    "UPDATE questions SET upvotes = upvotes + 1 WHERE id = ?", (question_id,)
                )
                if cur.rowcount == 0:
                    return None
                row = conn.execute("SELECT * FROM questions WHERE id = ?", (question_id,)).fetchone()
            return _row_to_question(row)
        finally:
            conn.close()

    def increment_answer_upvotes(self, answer_id: str) -> Optional[Answer]:
        conn = self._connect()
        try:
            with transaction(conn):
                cur = conn.execute(
                    "UPDATE answers SET upvotes = upvotes + 1 WHERE id = ?", (answer_id,)
                )
                if cur.rowcount == 0:
                    return None
                row = conn.execute("SELECT * FROM answers WHERE id = ?", (answer_id,)).fetchone()
            return _row_to_answer(row)
        finally:
            conn.close()

    def accept_answer(self, question_id: str, answer_id: str, now: str) -> Thread:
        conn = self._connect()
        try:
            with transaction(conn):
                exists = conn.execute("SELECT 1 FROM questions WHERE id = ?", (question_id,)).fetchone()
                if not exists:
                    raise NotFoundError(f"Question '{question_id}' not found.")
                owner = conn.execute(
                    "SELECT question_id FROM answers WHERE id = ?", (answer_id,)
                ).fetchone()
                if not owner or owner["question_id"] != question_id:
                    raise NotFoundError(f"Answer '{answer_id}' not found on question '{question_id}'.")

                # Clear before set: the partial unique index checks row by row
                conn.execute(
                    """
                    UPDATE answers SET is_accepted = 0, updated_at = ?
                    WHERE question_id = ? AND is_accepted = 1 AND id != ?
                    """,
                    (now, question_id, answer_id),
                )
                conn.execute(
                    "UPDATE answers SET is_accepted = 1, updated_at = ? WHERE id = ?",
                    (now, answer_id),
                )
                conn.execute(
                    """
                    UPDATE questions
                    SET is_resolved = 1, accepted_answer_id = ?, updated_at = ?
                    WHERE id = ?
                    """,
                    (answer_id, now, question_id),
                )

                thread = _load_thread(conn, question_id)
                errors = consistency_errors(thread)
                if errors:
                    logger.error("Rolling back acceptance on %s: %s", question_id, errors)
                    raise InvariantViolationError("; ".join(errors))
            return thread
        except sqlite3.IntegrityError as e:
            raise InvariantViolationError(f"Acceptance rejected by storage: {e}")
        finally:
            conn.close()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def get_question(self, question_id: str) -> Optional[Question]:
        conn = self._connect()
        try:
            row = conn.execute("SELECT * FROM questions WHERE id = ?", (question_id,)).fetchone()
        finally:
            conn.close()
        return _row_to_question(row) if row else None

    def get_answer(self, answer_id: str) -> Optional[Answer]:
        conn = self._connect()
        try:
            row = conn.execute("SELECT * FROM answers WHERE id = ?", (answer_id,)).fetchone()
        finally:
            conn.close()
        return _row_to_answer(row) if row else None

    def get_thread(self, question_id: str) -> Optional[Thread]:
        conn = self._connect()
        try:
            with transaction(conn, immediate=False):
                return _load_thread(conn, question_id)
        finally:
            conn.close()

    def list_threads(self, lesson_id: str) -> List[Thread]:
        conn = self._connect()
        try:
            with transaction(conn, immediate=False):
                question_rows = conn.execute(
                    "SELECT * FROM questions WHERE lesson_id = ? ORDER BY rowid ASC",
                    (lesson_id,),
                ).fetchall()
                answer_rows = conn.execute(
                    """
                    SELECT a.* FROM answers a
                    JOIN questions q ON q.id = a.question_id
                    WHERE q.lesson_id = ?
                    ORDER BY a.rowid ASC
                    """,
                    (lesson_id,),
                ).fetchall()
        finally:
            conn.close()

        threads: Dict[str, Thread] = {}
        for qr in question_rows:
            question = _row_to_question(qr)
            threads[question.id] = Thread(question=question)
        for ar in answer_rows:
            answer = _row_to_answer(ar)
            threads[answer.question_id].answers.append(answer)
        return list(threads.values())
