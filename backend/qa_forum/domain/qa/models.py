"""Q&A domain models — pure Python, no DB or HTTP dependencies."""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional

STUDENT = "student"
INSTRUCTOR = "instructor"
USER_TYPES = (STUDENT, INSTRUCTOR)


@dataclass(frozen=True)
class Author:
    """The already-authenticated caller, as handed over by the identity layer."""
    user_id: str
    user_name: str
    user_type: str  # student | instructor
    user_avatar: Optional[str] = None


@dataclass
class Question:
    id: str
    lesson_id: str
    user_id: str
    user_name: str
    user_type: str
    title: str
    content: str
    upvotes: int = 0
    is_resolved: bool = False
    accepted_answer_id: Optional[str] = None
    user_avatar: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""


@dataclass
class Answer:
    id: str
    question_id: str
    user_id: str
    user_name: str
    user_type: str
    content: str
    upvotes: int = 0
    is_accepted: bool = False
    user_avatar: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""


@dataclass
class Thread:
    question: Question
    answers: List[Answer] = field(default_factory=list)

    @property
    def total_answers(self) -> int:
        # Derived on every access so it can never drift from the answer list
        return len(self.answers)

    def find_answer(self, answer_id: str) -> Optional[Answer]:
        for answer in self.answers:
            if answer.id == answer_id:
                return answer
        return None
