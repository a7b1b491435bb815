"""Domain service for pure construction of new questions and answers."""
from __future__ import annotations
import uuid
from datetime import datetime, timezone

from qa_forum.domain.common.result import Result
from qa_forum.domain.qa.models import Answer, Author, Question
from qa_forum.domain.qa.rules import (
    validate_answer_content,
    validate_author,
    validate_question_content,
)


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _new_id() -> str:
    return str(uuid.uuid4())


class QADomainService:
    """
    Pure domain operations — no I/O. All methods return Result[T].
    The application layer calls these and then persists via the repository.
    """

    def create_question(self, lesson_id: str, author: Author, title: str, content: str) -> Result[Question]:
        """New question, unresolved and with no votes."""
        if not (lesson_id or "").strip():
            return Result.fail("Question 'lesson_id' is required.")

        author_check = validate_author(author)
        if not author_check.is_success:
            return Result.fail(author_check.error)

        validation = validate_question_content(title, content)
        if not validation.is_success:
            return Result.fail(validation.error)
        title, content = validation.value

        now = now_iso()
        return Result.ok(Question(
            id=_new_id(),
            lesson_id=lesson_id,
            user_id=author.user_id,
            user_name=author.user_name,
            user_type=author.user_type,
            user_avatar=author.user_avatar,
            title=title,
            content=content,
            upvotes=0,
            is_resolved=False,
            accepted_answer_id=None,
            created_at=now,
            updated_at=now,
        ))

    def create_answer(self, question: Question, author: Author, content: str) -> Result[Answer]:
        author_check = validate_author(author)
        if not author_check.is_success:
            return Result.fail(author_check.error)

        validation = validate_answer_content(content)
        if not validation.is_success:
            return Result.fail(validation.error)

        now = now_iso()
        return Result.ok(Answer(
            id=_new_id(),
            question_id=question.id,
            user_id=author.user_id,
            user_name=author.user_name,
            user_type=author.user_type,
            user_avatar=author.user_avatar,
            content=validation.value,
            upvotes=0,
            is_accepted=False,
            created_at=now,
            updated_at=now,
        ))
