"""In-process implementation of ThreadRepository. One lock serializes every write."""
from __future__ import annotations
import copy
import logging
import threading
from typing import Dict, List, Optional

from qa_forum.domain.common.errors import InvariantViolationError, NotFoundError, raise_for
from qa_forum.domain.qa.acceptance import apply_acceptance, consistency_errors, validate_target
from qa_forum.domain.qa.models import Answer, Question, Thread
from qa_forum.persistence.interfaces.thread_repository import ThreadRepository

logger = logging.getLogger(__name__)


class MemoryThreadRepository(ThreadRepository):
    """
    Records live in dicts keyed by id; insertion order of the dicts is the
    storage order. Every value handed out is a deep copy so callers can never
    mutate stored state.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._questions: Dict[str, Question] = {}
        self._answers: Dict[str, Answer] = {}
        self._answer_ids_by_question: Dict[str, List[str]] = {}

    def save_question(self, question: Question) -> None:
        with self._lock:
            if question.id in self._questions:
                raise InvariantViolationError(f"Question '{question.id}' already exists.")
            self._questions[question.id] = copy.deepcopy(question)
            self._answer_ids_by_question[question.id] = []

    def save_answer(self, answer: Answer) -> None:
        with self._lock:
            if answer.question_id not in self._questions:
                raise NotFoundError(f"Question '{answer.question_id}' not found.")
            if answer.id in self._answers:
                raise InvariantViolationError(f"Answer '{answer.id}' already exists.")
            self._answers[answer.id] = copy.deepcopy(answer)
            self._answer_ids_by_question[answer.question_id].append(answer.id)

    def get_question(self, question_id: str) -> Optional[Question]:
        with self._lock:
            question = self._questions.get(question_id)
            return copy.deepcopy(question) if question else None

    def get_answer(self, answer_id: str) -> Optional[Answer]:
        with self._lock:
            answer = self._answers.get(answer_id)
            return copy.deepcopy(answer) if answer else None

    def _thread(self, question_id: str) -> Thread:
        # Live references; callers copy before returning
        return Thread(
            question=self._questions[question_id],
            answers=[self._answers[a] for a in self._answer_ids_by_question[question_id]],
        )

    def get_thread(self, question_id: str) -> Optional[Thread]:
        with self._lock:
            if question_id not in self._questions:
                return None
            return copy.deepcopy(self._thread(question_id))

    def list_threads(self, lesson_id: str) -> List[Thread]:
        with self._lock:
            return [
                copy.deepcopy(self._thread(q.id))
                for q in self._questions.values()
                if q.lesson_id == lesson_id
            ]

    def increment_question_upvotes(self, question_id: str) -> Optional[Question]:
        with self._lock:
            question = self._questions.get(question_id)
            if question is None:
                return None
            question.upvotes += 1
            return copy.deepcopy(question)

    def increment_answer_upvotes(self, answer_id: str) -> Optional[Answer]:
        with self._lock:
            answer = self._answers.get(answer_id)
            if answer is None:
                return None
            answer.upvotes += 1
            return copy.deepcopy(answer)

    def accept_answer(self, question_id: str, answer_id: str, now: str) -> Thread:
        with self._lock:
            if question_id not in self._questions:
                raise NotFoundError(f"Question '{question_id}' not found.")
            # Work on a copy and swap it in only if it is consistent
            candidate = copy.deepcopy(self._thread(question_id))
            raise_for(validate_target(candidate, answer_id))
            apply_acceptance(candidate, answer_id, now)
            errors = consistency_errors(candidate)
            if errors:
                logger.error("Rejecting acceptance on %s: %s", question_id, errors)
                raise InvariantViolationError("; ".join(errors))

            self._questions[question_id] = candidate.question
            for a in candidate.answers:
                self._answers[a.id] = a
            return copy.deepcopy(candidate)
