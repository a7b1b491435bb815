"""Read-only views over threads: search, status filter, counters and ordering. Never mutates its input."""
from __future__ import annotations
from enum import Enum
from typing import Dict, Iterable, List, Sequence

from qa_forum.domain.qa.models import Answer, Thread


class ThreadStatus(str, Enum):
    ALL = "all"
    UNRESOLVED = "unresolved"
    RESOLVED = "resolved"


class ThreadSort(str, Enum):
    RECENT = "recent"
    MOST_ANSWERED = "mostAnswered"


def search(threads: Sequence[Thread], query: str) -> List[Thread]:
    """Case-insensitive substring match on title or content. Empty query keeps everything, in order."""
    if not query:
        return list(threads)
    needle = query.lower()
    return [
        t for t in threads
        if needle in t.question.title.lower() or needle in t.question.content.lower()
    ]


def filter_by_status(threads: Sequence[Thread], status: ThreadStatus = ThreadStatus.ALL) -> List[Thread]:
    status = ThreadStatus(status)
    if status is ThreadStatus.ALL:
        return list(threads)
    want_resolved = status is ThreadStatus.RESOLVED
    return [t for t in threads if t.question.is_resolved == want_resolved]


def count_by_status(threads: Iterable[Thread]) -> Dict[str, int]:
    counts = {s.value: 0 for s in ThreadStatus}
    for t in threads:
        counts[ThreadStatus.ALL.value] += 1
        key = ThreadStatus.RESOLVED if t.question.is_resolved else ThreadStatus.UNRESOLVED
        counts[key.value] += 1
    return counts


def order_answers(answers: Iterable[Answer]) -> List[Answer]:
    # sorted() is stable, so equal-vote answers keep insertion order
    return sorted(answers, key=lambda a: (not a.is_accepted, -a.upvotes))


def order_threads(threads: Sequence[Thread], sort: ThreadSort = ThreadSort.RECENT) -> List[Thread]:
    sort = ThreadSort(sort)
    if sort is ThreadSort.MOST_ANSWERED:
        return sorted(threads, key=lambda t: t.total_answers, reverse=True)
    # Reversed first so threads created in the same instant list newest-inserted first
    return sorted(list(threads)[::-1], key=lambda t: t.question.created_at, reverse=True)
