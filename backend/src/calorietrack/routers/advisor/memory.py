from __future__ import annotations

from itertools import accumulate, takewhile
from typing import List, Sequence, TypeVar

from .config import HISTORY_CHAR_BUDGET
from .schemas import ConversationTurn

T = TypeVar("T", bound=ConversationTurn)


def _turn_length(turn: ConversationTurn) -> int:
    return len(turn.content or "")


def truncate_conversation(turns: Sequence[T], budget: float = HISTORY_CHAR_BUDGET) -> List[T]:
    """Longest suffix of ``turns`` whose total content length fits ``budget``.

    Walks newest to oldest and stops at the first turn that would overflow;
    that turn and everything older are dropped. Turns are never split or
    reordered. Missing content counts as zero characters.
    """
    running_totals = accumulate(_turn_length(turn) for turn in reversed(turns))
    kept = sum(1 for _ in takewhile(lambda total: total <= budget, running_totals))
    return list(turns[len(turns) - kept:])
