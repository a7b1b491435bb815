"""Application service — orchestrates validate → domain op → persist for the lesson Q&A."""
from __future__ import annotations
import logging
from typing import Dict, List

from qa_forum.application.voting_service import VotingService
from qa_forum.domain.common.errors import NotFoundError, raise_for
from qa_forum.domain.qa import acceptance, query
from qa_forum.domain.qa.models import Answer, Author, Question, Thread
from qa_forum.domain.qa.query import ThreadSort, ThreadStatus
from qa_forum.domain.qa.service import QADomainService, now_iso
from qa_forum.persistence.interfaces.thread_repository import ThreadRepository

logger = logging.getLogger(__name__)


def _ordered(thread: Thread) -> Thread:
    thread.answers = query.order_answers(thread.answers)
    return thread


class QAAppService:
    def __init__(self, repo: ThreadRepository):
        self._repo = repo
        self._domain = QADomainService()
        self._voting = VotingService(repo)

    # ------------------------------------------------------------------
    # CREATE
    # ------------------------------------------------------------------
    def create_question(self, lesson_id: str, author: Author, title: str, content: str) -> Question:
        result = self._domain.create_question(lesson_id, author, title, content)
        if not result.is_success:
            logger.warning("Question rejected for lesson %s: %s", lesson_id, result.error)
        raise_for(result)
        self._repo.save_question(result.value)
        logger.info("Question %s created on lesson %s by %s", result.value.id, lesson_id, author.user_id)
        return result.value

    def create_answer(self, question_id: str, author: Author, content: str) -> Answer:
        question = self._repo.get_question(question_id)
        if question is None:
            raise NotFoundError(f"Question '{question_id}' not found.")

        result = self._domain.create_answer(question, author, content)
        if not result.is_success:
            logger.warning("Answer rejected for question %s: %s", question_id, result.error)
        raise_for(result)
        self._repo.save_answer(result.value)
        logger.info("Answer %s posted on question %s by %s", result.value.id, question_id, author.user_id)
        return result.value

    # ------------------------------------------------------------------
    # READ
    # ------------------------------------------------------------------
    def get_thread(self, question_id: str) -> Thread:
        thread = self._repo.get_thread(question_id)
        if thread is None:
            raise NotFoundError(f"Question '{question_id}' not found.")
        return _ordered(thread)

    def get_answer(self, answer_id: str) -> Answer:
        answer = self._repo.get_answer(answer_id)
        if answer is None:
            raise NotFoundError(f"Answer '{answer_id}' not found.")
        return answer

    def list_threads(
        self,
        lesson_id: str,
        search: str = "",
        status: ThreadStatus = ThreadStatus.ALL,
        sort: ThreadSort = ThreadSort.RECENT,
    ) -> List[Thread]:
        threads = self._repo.list_threads(lesson_id)
        threads = query.search(threads, search)
        threads = query.filter_by_status(threads, status)
        threads = query.order_threads(threads, sort)
        return [_ordered(t) for t in threads]

    def summarize(self, lesson_id: str, search: str = "") -> Dict[str, int]:
        """Thread counts per status tab, after applying the search box."""
        threads = query.search(self._repo.list_threads(lesson_id), search)
        return query.count_by_status(threads)

    # ------------------------------------------------------------------
    # VOTES
    # ------------------------------------------------------------------
    def upvote_question(self, question_id: str) -> Question:
        return self._voting.upvote_question(question_id)

    def upvote_answer(self, answer_id: str) -> Answer:
        return self._voting.upvote_answer(answer_id)

    # ------------------------------------------------------------------
    # ACCEPTANCE
    # ------------------------------------------------------------------
    def _require_acceptor(self, actor: Author, answer_id: str) -> None:
        permission = acceptance.validate_acceptor(actor)
        if not permission.is_success:
            logger.warning("User %s tried to accept answer %s: %s", actor.user_id, answer_id, permission.error)
        raise_for(permission)

    def accept_answer(self, question_id: str, answer_id: str, actor: Author) -> Thread:
        self._require_acceptor(actor, answer_id)

        thread = self._repo.accept_answer(question_id, answer_id, now_iso())
        logger.info(
            "Answer %s accepted on question %s by %s (question %s)",
            answer_id, question_id, actor.user_id, acceptance.question_state(thread.question),
        )
        return _ordered(thread)

    def accept_answer_by_id(self, answer_id: str, actor: Author) -> Thread:
        """Accept an answer addressed by id alone; the owning question is looked up."""
        self._require_acceptor(actor, answer_id)
        question_id = self.get_answer(answer_id).question_id
        return self.accept_answer(question_id, answer_id, actor)
