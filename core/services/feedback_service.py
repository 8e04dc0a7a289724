# =============================================================================
# core/services/feedback_service.py - Resume Feedback Business Logic
# =============================================================================
# Threaded feedback on resumes, stored flat in "resumeFeedback":
# - add_feedback / list_thread: write one item, read back the reply tree
# - vote: Vote Ledger + compare-and-swap write on updatedAt
# - delete_feedback: author/owner check, then cascade or orphan delete
#
# Cascade discovery walks parentId links breadth-first with a visited set,
# so a corrupted parentId cycle can't loop forever. All found ids are then
# removed in one batch delete.
# =============================================================================

import logging
from collections import deque
from typing import Any

from app.config import settings
from app.exceptions import (
    FeedbackDeleteForbiddenError,
    FeedbackNotFoundError,
    ResumeNotFoundError,
    UserNotFoundError,
    ValidationFailedError,
    VoteConflictError,
)
from core.models.feedback import FeedbackItem
from core.services.listing import fetch_ordered
from lib.feedback_tree import build_tree
from lib.record_store import Filter, OrderBy, RecordStore
from lib.utils import utc_now
from lib.votes import InvalidVoteError, VoteDirection, apply_vote

logger = logging.getLogger(__name__)

FEEDBACK_COLLECTION = "resumeFeedback"
USERS_COLLECTION = "users"

_VOTE_MESSAGES = {
    (VoteDirection.UP, True): "Feedback upvoted",
    (VoteDirection.UP, False): "Upvote removed",
    (VoteDirection.DOWN, True): "Feedback downvoted",
    (VoteDirection.DOWN, False): "Downvote removed",
}


class FeedbackService:
    """
    Service for resume feedback threads.

    Example:
        service = FeedbackService(store)
        item = service.add_feedback(owner_id, reviewer_id, "Nice layout")
        tree = service.list_thread(owner_id, viewer_id=reviewer_id)
    """

    def __init__(self, store: RecordStore):
        self.store = store

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_item(self, feedback_id: str) -> FeedbackItem:
        """
        Get one feedback item.

        Raises:
            FeedbackNotFoundError: If it doesn't exist
        """
        record = self.store.get(FEEDBACK_COLLECTION, feedback_id)
        if record is None:
            raise FeedbackNotFoundError(feedback_id)
        return FeedbackItem.from_record(record)

    def list_thread(
        self,
        resume_owner_id: str,
        viewer_id: str | None = None,
    ) -> list[dict[str, Any]]:
        """
        Get the feedback tree for a resume.

        Returns:
            Top-level items newest first, each with nested "replies" and the
            viewer's "upvoted"/"downvoted" flags at every level
        """
        records = fetch_ordered(
            self.store,
            FEEDBACK_COLLECTION,
            [Filter("resumeOwnerId", "==", resume_owner_id)],
            order_by=OrderBy("createdAt", descending=True),
        )
        tree = build_tree(FeedbackItem.from_record(r) for r in records)
        return [node.to_dict(viewer_id) for node in tree]

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def add_feedback(
        self,
        resume_owner_id: str,
        reviewer_id: str,
        content: str,
        parent_id: str | None = None,
    ) -> FeedbackItem:
        """
        Add a comment (or a reply when parent_id is set) to a resume.

        Raises:
            ValidationFailedError: If content is blank
            UserNotFoundError: If the owner or the reviewer has no profile
            ResumeNotFoundError: If the owner has no resume
        """
        if not content or not content.strip():
            raise ValidationFailedError("Feedback content is required", field="content")

        owner = self.store.get(USERS_COLLECTION, resume_owner_id)
        if owner is None:
            raise UserNotFoundError(resume_owner_id)
        if not owner.get("resumeURL"):
            raise ResumeNotFoundError(resume_owner_id)

        reviewer = self.store.get(USERS_COLLECTION, reviewer_id)
        if reviewer is None:
            raise UserNotFoundError(reviewer_id)

        now = utc_now()
        fields = {
            "resumeOwnerId": resume_owner_id,
            "reviewerId": reviewer_id,
            "reviewerName": reviewer.get("fullName"),
            "reviewerPhotoURL": reviewer.get("photoURL"),
            "content": content,
            "parentId": parent_id or None,
            "votes": 0,
            "upvotedBy": [],
            "downvotedBy": [],
            "createdAt": now,
            "updatedAt": now,
        }
        feedback_id = self.store.create(FEEDBACK_COLLECTION, fields)
        logger.info(
            f"Feedback {feedback_id} added to resume of {resume_owner_id} by {reviewer_id}"
        )
        return FeedbackItem.from_record({"id": feedback_id, **fields})

    def vote(
        self,
        feedback_id: str,
        voter_id: str,
        direction: VoteDirection,
    ) -> dict[str, Any]:
        """
        Toggle the voter's vote on a feedback item.

        Each attempt reads the item, applies the ledger and writes only if
        updatedAt is unchanged since the read.

        Returns:
            {"message", "votes", "upvoted"} for up or
            {"message", "votes", "downvoted"} for down

        Raises:
            ValidationFailedError: If voter_id is empty
            FeedbackNotFoundError: If the item doesn't exist
            VoteConflictError: If every attempt lost a race
        """
        direction = VoteDirection(direction)
        attempts = settings.VOTE_MAX_RETRIES

        for attempt in range(1, attempts + 1):
            record = self.store.get(FEEDBACK_COLLECTION, feedback_id)
            if record is None:
                raise FeedbackNotFoundError(feedback_id)

            try:
                outcome = apply_vote(FeedbackItem.from_record(record), voter_id, direction)
            except InvalidVoteError as e:
                raise ValidationFailedError(str(e), field="voter")

            fields = outcome.to_fields()
            fields["updatedAt"] = utc_now()
            swapped = self.store.compare_and_update(
                FEEDBACK_COLLECTION,
                feedback_id,
                fields,
                expected={"updatedAt": record.get("updatedAt")},
            )
            if swapped:
                logger.info(
                    f"Vote {direction.value} on {feedback_id} by {voter_id} "
                    f"(applied={outcome.applied}, votes={outcome.votes})"
                )
                key = "upvoted" if direction is VoteDirection.UP else "downvoted"
                return {
                    "message": _VOTE_MESSAGES[(direction, outcome.applied)],
                    "votes": outcome.votes,
                    key: outcome.applied,
                }

            logger.warning(
                f"Concurrent update on feedback {feedback_id}, retrying vote "
                f"({attempt}/{attempts})"
            )

        raise VoteConflictError(feedback_id, attempts)

    # -------------------------------------------------------------------------
    # Deletion
    # -------------------------------------------------------------------------

    def delete_feedback(
        self,
        feedback_id: str,
        actor_id: str,
        cascade: bool = True,
    ) -> set[str]:
        """
        Delete a feedback item as `actor_id`.

        Only the item's author or the owner of the reviewed resume may
        delete it.

        Args:
            cascade: Remove every descendant too; otherwise direct replies
                are detached and become top-level

        Returns:
            Ids of the deleted items

        Raises:
            FeedbackNotFoundError: If the item doesn't exist
            FeedbackDeleteForbiddenError: If actor is neither author nor owner
        """
        item = self.get_item(feedback_id)
        if actor_id not in (item.reviewer_id, item.resume_owner_id):
            raise FeedbackDeleteForbiddenError(feedback_id)

        if cascade:
            return self.delete_subtree(feedback_id)
        self.orphan(feedback_id)
        return {feedback_id}

    def delete_subtree(self, feedback_id: str) -> set[str]:
        """
        Delete an item and every transitive reply in one batch.

        Raises:
            FeedbackNotFoundError: If the item doesn't exist (nothing deleted)
        """
        if self.store.get(FEEDBACK_COLLECTION, feedback_id) is None:
            raise FeedbackNotFoundError(feedback_id)

        visited = {feedback_id}
        queue = deque([feedback_id])
        while queue:
            parent_id = queue.popleft()
            replies = self.store.query(
                FEEDBACK_COLLECTION, [Filter("parentId", "==", parent_id)]
            )
            for reply in replies:
                if reply["id"] not in visited:
                    visited.add(reply["id"])
                    queue.append(reply["id"])

        deleted = self.store.delete_many(FEEDBACK_COLLECTION, sorted(visited))
        logger.info(
            f"Deleted feedback {feedback_id} with {len(visited) - 1} replies "
            f"({deleted} records removed)"
        )
        return visited

    def orphan(self, feedback_id: str) -> set[str]:
        """
        Delete only the item; its direct replies become top-level.

        Deeper replies keep pointing at their (surviving) parents.

        Returns:
            Ids of the detached direct replies

        Raises:
            FeedbackNotFoundError: If the item doesn't exist (nothing changed)
        """
        if self.store.get(FEEDBACK_COLLECTION, feedback_id) is None:
            raise FeedbackNotFoundError(feedback_id)

        replies = self.store.query(
            FEEDBACK_COLLECTION, [Filter("parentId", "==", feedback_id)]
        )
        reply_ids = [r["id"] for r in replies if r["id"] != feedback_id]
        if reply_ids:
            self.store.update_many(
                FEEDBACK_COLLECTION,
                reply_ids,
                {"parentId": None, "updatedAt": utc_now()},
            )

        self.store.delete(FEEDBACK_COLLECTION, feedback_id)
        logger.info(f"Deleted feedback {feedback_id}, detached {len(reply_ids)} replies")
        return set(reply_ids)
