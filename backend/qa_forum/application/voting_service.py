"""Upvotes. Each call adds exactly one vote; there is no unvote and no per-voter de-duplication."""
from __future__ import annotations
import logging

from qa_forum.domain.common.errors import NotFoundError
from qa_forum.domain.qa.models import Answer, Question
from qa_forum.persistence.interfaces.thread_repository import ThreadRepository

logger = logging.getLogger(__name__)


class VotingService:
    def __init__(self, repo: ThreadRepository):
        self._repo = repo

    def upvote_question(self, question_id: str) -> Question:
        question = self._repo.increment_question_upvotes(question_id)
        if question is None:
            raise NotFoundError(f"Question '{question_id}' not found.")
        logger.info("Question %s upvoted (now %d)", question_id, question.upvotes)
        return question

    def upvote_answer(self, answer_id: str) -> Answer:
        answer = self._repo.increment_answer_upvotes(answer_id)
        if answer is None:
            raise NotFoundError(f"Answer '{answer_id}' not found.")
        logger.info("Answer %s upvoted (now %d)", answer_id, answer.upvotes)
        return answer
