"""Karma rewards and reputation levels."""

import bisect
import logging
from dataclasses import dataclass
from enum import IntEnum, StrEnum

from sqlalchemy import case, update
from sqlalchemy.ext.asyncio import AsyncSession

from qa_forum.models.user import User
from qa_forum.schemas.common import VoteDirection
from qa_forum.services.base import NotFoundError

logger = logging.getLogger(__name__)


class KarmaReward(IntEnum):
    """Points credited to the author of the content involved."""

    ASK_QUESTION = 5
    POST_ANSWER = 10
    QUESTION_UPVOTED = 5
    QUESTION_DOWNVOTED = -2
    ANSWER_UPVOTED = 10
    ANSWER_DOWNVOTED = -2
    ANSWER_ACCEPTED = 15


# (karma floor, title) per level, ascending
LEVELS: tuple[tuple[int, str | None], ...] = (
    (0, None),
    (50, "Apprentice"),
    (150, "Contributor"),
    (400, "Scholar"),
    (1000, "Sage"),
    (2500, "Professor"),
)

_FLOORS = [floor for floor, _ in LEVELS]


@dataclass(frozen=True)
class KarmaLevel:
    """Display tier derived from a karma total."""

    level: int
    title: str | None
    next_level_karma: int | None


def level_for_karma(karma: int) -> KarmaLevel:
    """Return the level for a karma total.

    Levels are numbered from 1. Totals below the first floor count as
    level 1, and ``next_level_karma`` is None at the top level.
    """
    index = max(bisect.bisect_right(_FLOORS, karma) - 1, 0)
    _, title = LEVELS[index]
    next_floor = _FLOORS[index + 1] if index + 1 < len(_FLOORS) else None
    return KarmaLevel(level=index + 1, title=title, next_level_karma=next_floor)


class VoteTarget(StrEnum):
    """Kind of content a vote is cast on."""

    QUESTION = "question"
    ANSWER = "answer"


_VOTE_REWARDS: dict[tuple[VoteTarget, VoteDirection], KarmaReward] = {
    (VoteTarget.QUESTION, VoteDirection.UP): KarmaReward.QUESTION_UPVOTED,
    (VoteTarget.QUESTION, VoteDirection.DOWN): KarmaReward.QUESTION_DOWNVOTED,
    (VoteTarget.ANSWER, VoteDirection.UP): KarmaReward.ANSWER_UPVOTED,
    (VoteTarget.ANSWER, VoteDirection.DOWN): KarmaReward.ANSWER_DOWNVOTED,
}


def vote_reward(target: VoteTarget | str, direction: VoteDirection | str) -> KarmaReward:
    """Return the reward for a vote on a question or answer.

    Raises:
        ValueError: If the target or direction is not a known value
    """
    return _VOTE_REWARDS[VoteTarget(target), VoteDirection(direction)]


async def add_karma(db: AsyncSession, user_id: int, delta: int) -> int:
    """Apply a karma delta in place, clamping the total at zero.

    The read of the current total and the clamp happen inside one UPDATE, so
    concurrent deltas for the same user cannot lose each other.

    Returns:
        The user's new karma total

    Raises:
        NotFoundError: If the user does not exist
    """
    delta = int(delta)
    new_total = User.karma + delta
    stmt = (
        update(User)
        .where(User.id == user_id)
        .values(karma=case((new_total < 0, 0), else_=new_total))
        .returning(User.karma)
        .execution_options(synchronize_session=False)
    )
    karma = (await db.execute(stmt)).scalar_one_or_none()
    if karma is None:
        raise NotFoundError("User not found")

    logger.debug("Karma %+d for user %s, now %s", delta, user_id, karma)
    return karma
