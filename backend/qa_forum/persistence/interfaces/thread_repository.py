"""Abstract repository interface for the Question/Answer aggregate."""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Optional

from qa_forum.domain.qa.models import Answer, Question, Thread


class ThreadRepository(ABC):

    @abstractmethod
    def save_question(self, question: Question) -> None:
        """Insert a new question row. Questions are never overwritten through this call."""
        ...

    @abstractmethod
    def save_answer(self, answer: Answer) -> None:
        """Insert a new answer row. Raises NotFoundError if its question does not exist."""
        ...

    @abstractmethod
    def get_question(self, question_id: str) -> Optional[Question]:
        ...

    @abstractmethod
    def get_answer(self, answer_id: str) -> Optional[Answer]:
        ...

    @abstractmethod
    def get_thread(self, question_id: str) -> Optional[Thread]:
        """Return the question with its answers in insertion order, or None."""
        ...

    @abstractmethod
    def list_threads(self, lesson_id: str) -> List[Thread]:
        """Return every thread of a lesson in insertion order."""
        ...

    @abstractmethod
    def increment_question_upvotes(self, question_id: str) -> Optional[Question]:
        """Atomically add one vote. Returns the updated question, or None if absent."""
        ...

    @abstractmethod
    def increment_answer_upvotes(self, answer_id: str) -> Optional[Answer]:
        """Atomically add one vote. Returns the updated answer, or None if absent."""
        ...

    @abstractmethod
    def accept_answer(self, question_id: str, answer_id: str, now: str) -> Thread:
        """
        Atomically make `answer_id` the only accepted answer of the question and
        resolve it. Raises NotFoundError if either record is missing or the answer
        belongs to another question, InvariantViolationError if the result would
        be inconsistent (nothing is written in either case).
        """
        ...
