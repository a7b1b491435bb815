"""
Acceptance state machine for a question.

    UNRESOLVED --accept(a)--> RESOLVED(a) --accept(b)--> RESOLVED(b)

Only instructors may fire the transition. There is no edge back to
UNRESOLVED.
"""
from __future__ import annotations
from typing import List

from qa_forum.domain.common.result import Result
from qa_forum.domain.qa.models import Answer, Author, Question, Thread, INSTRUCTOR

UNRESOLVED = "UNRESOLVED"
RESOLVED = "RESOLVED"

# Which user types may accept an answer
ACCEPT_ROLES = {INSTRUCTOR}


def question_state(question: Question) -> str:
    return RESOLVED if question.is_resolved else UNRESOLVED


def validate_acceptor(actor: Author) -> Result[Author]:
    if actor.user_type not in ACCEPT_ROLES:
        return Result.fail(
            f"User type '{actor.user_type}' cannot accept answers. "
            f"Required: {sorted(ACCEPT_ROLES)}.",
            kind="PermissionError",
        )
    return Result.ok(actor)


def validate_target(thread: Thread, answer_id: str) -> Result[Answer]:
    answer = thread.find_answer(answer_id)
    if answer is None:
        return Result.fail(
            f"Answer '{answer_id}' not found on question '{thread.question.id}'.",
            kind="NotFoundError",
        )
    return Result.ok(answer)


def apply_acceptance(thread: Thread, answer_id: str, now: str) -> Thread:
    """
    Mutate the thread's records in place: clear every other accepted flag,
    accept the target, resolve the question. Caller must hold whatever lock
    makes this atomic and must have validated the target first.
    """
    for answer in thread.answers:
        if answer.id == answer_id:
            answer.is_accepted = True
            answer.updated_at = now
        elif answer.is_accepted:
            answer.is_accepted = False
            answer.updated_at = now

    thread.question.is_resolved = True
    thread.question.accepted_answer_id = answer_id
    thread.question.updated_at = now
    return thread


def consistency_errors(thread: Thread) -> List[str]:
    """Every way the thread breaks the accepted-answer invariants. Empty means consistent."""
    errors: List[str] = []
    question = thread.question

    foreign = [a.id for a in thread.answers if a.question_id != question.id]
    if foreign:
        errors.append(f"answers {foreign} do not belong to question '{question.id}'")

    accepted = [a for a in thread.answers if a.is_accepted]
    if len(accepted) > 1:
        errors.append(f"{len(accepted)} accepted answers on question '{question.id}'")

    if question.is_resolved != (question.accepted_answer_id is not None):
        errors.append("is_resolved disagrees with accepted_answer_id")

    if question.accepted_answer_id is not None:
        if len(accepted) != 1 or accepted[0].id != question.accepted_answer_id:
            errors.append(
                f"accepted_answer_id '{question.accepted_answer_id}' does not match the accepted answer"
            )
    elif accepted:
        errors.append("an answer is accepted but the question is unresolved")

    return errors
