"""Business rules for questions and answers: content and author checks."""
from __future__ import annotations
from typing import Optional, Tuple

from qa_forum.domain.common.result import Result
from qa_forum.domain.qa.models import Author, USER_TYPES


def _clean(text: Optional[str]) -> str:
    return (text or "").strip()


def validate_author(author: Author) -> Result[Author]:
    if not _clean(author.user_id):
        return Result.fail("Author 'user_id' is required.")
    if not _clean(author.user_name):
        return Result.fail("Author 'user_name' is required.")
    if author.user_type not in USER_TYPES:
        return Result.fail(
            f"'{author.user_type}' is not a valid user type. Must be one of {list(USER_TYPES)}."
        )
    return Result.ok(author)


def validate_question_content(title: Optional[str], content: Optional[str]) -> Result[Tuple[str, str]]:
    """Returns the trimmed (title, content) pair, or a failure if either is blank."""
    title = _clean(title)
    content = _clean(content)
    if not title:
        return Result.fail("Question 'title' is required and cannot be empty.")
    if not content:
        return Result.fail("Question 'content' is required and cannot be empty.")
    return Result.ok((title, content))


def validate_answer_content(content: Optional[str]) -> Result[str]:
    content = _clean(content)
    if not content:
        return Result.fail("Answer 'content' is required and cannot be empty.")
    return Result.ok(content)
