"""Lesson Q&A endpoints: questions, answers, votes and acceptance."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from qa_forum.api.auth import get_current_user
from qa_forum.application.qa_app_service import QAAppService
from qa_forum.container import get_qa_app_service
from qa_forum.domain.qa.models import Answer, Author, Question, Thread
from qa_forum.domain.qa.query import ThreadSort, ThreadStatus

router = APIRouter(tags=["qa"])


# ------------------------------------------------------------------
# Pydantic schemas
# ------------------------------------------------------------------
class QuestionBody(BaseModel):
    title: str
    content: str


class AnswerBody(BaseModel):
    content: str


# ------------------------------------------------------------------
# Serializers (field names match the front-end's Question/Answer types)
# ------------------------------------------------------------------
def _serialize_question(q: Question) -> dict:
    return {
        "id": q.id,
        "lessonId": q.lesson_id,
        "userId": q.user_id,
        "userType": q.user_type,
        "userName": q.user_name,
        "userAvatar": q.user_avatar,
        "title": q.title,
        "content": q.content,
        "upvotes": q.upvotes,
        "isResolved": q.is_resolved,
        "acceptedAnswerId": q.accepted_answer_id,
        "createdAt": q.created_at,
        "updatedAt": q.updated_at,
    }


def _serialize_answer(a: Answer) -> dict:
    return {
        "id": a.id,
        "questionId": a.question_id,
        "userId": a.user_id,
        "userType": a.user_type,
        "userName": a.user_name,
        "userAvatar": a.user_avatar,
        "content": a.content,
        "upvotes": a.upvotes,
        "isAccepted": a.is_accepted,
        "createdAt": a.created_at,
        "updatedAt": a.updated_at,
    }


def _serialize_thread(t: Thread) -> dict:
    return {
        "question": _serialize_question(t.question),
        "answers": [_serialize_answer(a) for a in t.answers],
        "totalAnswers": t.total_answers,
    }


# ------------------------------------------------------------------
# Health check
# ------------------------------------------------------------------
@router.get("/health")
def health():
    return {"status": "ok"}


# ------------------------------------------------------------------
# Questions
# ------------------------------------------------------------------
@router.post("/lessons/{lesson_id}/questions", status_code=status.HTTP_201_CREATED)
def create_question(
    lesson_id: str,
    body: QuestionBody,
    svc: QAAppService = Depends(get_qa_app_service),
    current_user: Author = Depends(get_current_user),
):
    question = svc.create_question(lesson_id, current_user, body.title, body.content)
    return _serialize_question(question)


@router.get("/lessons/{lesson_id}/questions")
def list_questions(
    lesson_id: str,
    q: str = "",
    status_filter: ThreadStatus = Query(ThreadStatus.ALL, alias="status"),
    sort: ThreadSort = ThreadSort.RECENT,
    svc: QAAppService = Depends(get_qa_app_service),
):
    threads = svc.list_threads(lesson_id, search=q, status=status_filter, sort=sort)
    return [_serialize_thread(t) for t in threads]


@router.get("/lessons/{lesson_id}/questions/summary")
def summarize_questions(
    lesson_id: str,
    q: str = "",
    svc: QAAppService = Depends(get_qa_app_service),
):
    return svc.summarize(lesson_id, search=q)


@router.get("/questions/{question_id}")
def get_thread(
    question_id: str,
    svc: QAAppService = Depends(get_qa_app_service),
):
    return _serialize_thread(svc.get_thread(question_id))


@router.post("/questions/{question_id}/upvote")
def upvote_question(
    question_id: str,
    svc: QAAppService = Depends(get_qa_app_service),
):
    return _serialize_question(svc.upvote_question(question_id))


# ------------------------------------------------------------------
# Answers
# ------------------------------------------------------------------
@router.post("/questions/{question_id}/answers", status_code=status.HTTP_201_CREATED)
def create_answer(
    question_id: str,
    body: AnswerBody,
    svc: QAAppService = Depends(get_qa_app_service),
    current_user: Author = Depends(get_current_user),
):
    answer = svc.create_answer(question_id, current_user, body.content)
    return _serialize_answer(answer)


@router.post("/answers/{answer_id}/upvote")
def upvote_answer(
    answer_id: str,
    svc: QAAppService = Depends(get_qa_app_service),
):
    return _serialize_answer(svc.upvote_answer(answer_id))


@router.post("/answers/{answer_id}/accept")
def accept_answer(
    answer_id: str,
    svc: QAAppService = Depends(get_qa_app_service),
    current_user: Author = Depends(get_current_user),
):
    return _serialize_thread(svc.accept_answer_by_id(answer_id, current_user))
