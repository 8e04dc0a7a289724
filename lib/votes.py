# =============================================================================
# lib/votes.py - Vote Ledger
# =============================================================================
# Pure toggle-with-mutual-exclusion voting for feedback items.
#
# Rules (symmetric for up and down):
# - voting the same direction again removes the vote (score moves back by 1)
# - voting the other direction replaces the old vote (score moves by 2)
# - a first vote moves the score by 1
#
# Persistence is the caller's job; see FeedbackService.vote.
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from core.models.feedback import FeedbackItem


class VoteDirection(str, Enum):
    UP = "up"
    DOWN = "down"

    @property
    def delta(self) -> int:
        return 1 if self is VoteDirection.UP else -1


class InvalidVoteError(ValueError):
    """Raised when a vote has no voter."""


@dataclass(frozen=True)
class VoteOutcome:
    """New vote state for an item, plus whether a vote now exists."""

    votes: int
    upvoted_by: frozenset[str]
    downvoted_by: frozenset[str]
    applied: bool

    def to_fields(self) -> dict:
        """Record Store fields to write back."""
        return {
            "votes": self.votes,
            "upvotedBy": sorted(self.upvoted_by),
            "downvotedBy": sorted(self.downvoted_by),
        }


def apply_vote(item: FeedbackItem, voter: str, direction: VoteDirection) -> VoteOutcome:
    """
    Apply one vote by `voter` to `item` without mutating it.

    Returns applied=False when the call removed the voter's existing vote in
    that direction, True when a vote in `direction` now exists.

    Example:
        outcome = apply_vote(item, "user-1", VoteDirection.UP)
        store.update("resumeFeedback", item.id, outcome.to_fields())
    """
    if not voter:
        raise InvalidVoteError("A vote requires a voter id")

    direction = VoteDirection(direction)
    if direction is VoteDirection.UP:
        same, opposite = set(item.upvoted_by), set(item.downvoted_by)
    else:
        same, opposite = set(item.downvoted_by), set(item.upvoted_by)

    votes = item.votes
    if voter in same:
        # Toggle off
        same.discard(voter)
        votes -= direction.delta
        applied = False
    else:
        same.add(voter)
        votes += direction.delta
        if voter in opposite:
            opposite.discard(voter)
            votes += direction.delta
        applied = True

    if direction is VoteDirection.UP:
        upvoted_by, downvoted_by = same, opposite
    else:
        upvoted_by, downvoted_by = opposite, same

    return VoteOutcome(
        votes=votes,
        upvoted_by=frozenset(upvoted_by),
        downvoted_by=frozenset(downvoted_by),
        applied=applied,
    )
