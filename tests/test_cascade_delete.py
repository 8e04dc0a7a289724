# =============================================================================
# tests/test_cascade_delete.py - Feedback Deletion Tests
# =============================================================================
# Run with: pytest tests/test_cascade_delete.py -v
# =============================================================================

import pytest

from app.exceptions import FeedbackDeleteForbiddenError, FeedbackNotFoundError
from core.services.feedback_service import FEEDBACK_COLLECTION, FeedbackService


def seed_feedback(store, feedback_id, parent_id=None, reviewer_id="reviewer-1"):
    store.seed(
        FEEDBACK_COLLECTION, feedback_id,
        resumeOwnerId="owner-1", reviewerId=reviewer_id,
        content=f"comment {feedback_id}", parentId=parent_id,
        votes=0, upvotedBy=[], downvotedBy=[],
        createdAt="2024-03-01T10:00:00+00:00",
        updatedAt="2024-03-01T10:00:00+00:00",
    )


@pytest.fixture
def thread(store):
    """root -> a -> a1 -> a1x, root -> b, plus an unrelated item."""
    seed_feedback(store, "root")
    seed_feedback(store, "a", "root")
    seed_feedback(store, "a1", "a")
    seed_feedback(store, "a1x", "a1")
    seed_feedback(store, "b", "root")
    seed_feedback(store, "other")
    return store


class TestCascade:
    """delete_subtree removes the whole reply subtree."""

    def test_removes_all_descendants(self, thread):
        deleted = FeedbackService(thread).delete_subtree("root")

        assert deleted == {"root", "a", "a1", "a1x", "b"}
        assert set(thread.all(FEEDBACK_COLLECTION)) == {"other"}

    def test_single_batch_delete(self, thread):
        FeedbackService(thread).delete_subtree("root")

        assert len(thread.batch_deletes) == 1
        assert sorted(thread.batch_deletes[0]) == ["a", "a1", "a1x", "b", "root"]

    def test_subtree_of_reply_leaves_siblings(self, thread):
        deleted = FeedbackService(thread).delete_subtree("a")

        assert deleted == {"a", "a1", "a1x"}
        assert set(thread.all(FEEDBACK_COLLECTION)) == {"root", "b", "other"}

    def test_leaf_deletes_only_itself(self, thread):
        assert FeedbackService(thread).delete_subtree("a1x") == {"a1x"}

    def test_cycle_terminates(self, store):
        seed_feedback(store, "x", "z")
        seed_feedback(store, "y", "x")
        seed_feedback(store, "z", "y")

        deleted = FeedbackService(store).delete_subtree("x")

        assert deleted == {"x", "y", "z"}
        assert store.all(FEEDBACK_COLLECTION) == {}

    def test_self_parent_terminates(self, store):
        seed_feedback(store, "loop", "loop")
        assert FeedbackService(store).delete_subtree("loop") == {"loop"}

    def test_missing_target_changes_nothing(self, thread):
        with pytest.raises(FeedbackNotFoundError):
            FeedbackService(thread).delete_subtree("nope")

        assert len(thread.all(FEEDBACK_COLLECTION)) == 6
        assert thread.batch_deletes == []


class TestOrphan:
    """orphan deletes one item and detaches only its direct replies."""

    def test_direct_replies_become_top_level(self, thread):
        detached = FeedbackService(thread).orphan("root")

        records = thread.all(FEEDBACK_COLLECTION)
        assert detached == {"a", "b"}
        assert "root" not in records
        assert records["a"]["parentId"] is None
        assert records["b"]["parentId"] is None

    def test_deeper_replies_keep_parents(self, thread):
        FeedbackService(thread).orphan("root")

        records = thread.all(FEEDBACK_COLLECTION)
        assert records["a1"]["parentId"] == "a"
        assert records["a1x"]["parentId"] == "a1"

    def test_leaf_detaches_nothing(self, thread):
        assert FeedbackService(thread).orphan("a1x") == set()
        assert "a1x" not in thread.all(FEEDBACK_COLLECTION)

    def test_missing_target_changes_nothing(self, thread):
        with pytest.raises(FeedbackNotFoundError):
            FeedbackService(thread).orphan("nope")
        assert len(thread.all(FEEDBACK_COLLECTION)) == 6


class TestAuthorization:
    """Only the author or the resume owner may delete."""

    def test_author_may_delete(self, thread):
        deleted = FeedbackService(thread).delete_feedback("a", "reviewer-1")
        assert deleted == {"a", "a1", "a1x"}

    def test_resume_owner_may_delete(self, thread):
        deleted = FeedbackService(thread).delete_feedback("b", "owner-1")
        assert deleted == {"b"}

    def test_stranger_forbidden(self, thread):
        with pytest.raises(FeedbackDeleteForbiddenError):
            FeedbackService(thread).delete_feedback("root", "user-3")
        assert len(thread.all(FEEDBACK_COLLECTION)) == 6

    def test_non_cascade_uses_orphan(self, thread):
        deleted = FeedbackService(thread).delete_feedback("a", "owner-1", cascade=False)

        assert deleted == {"a"}
        assert thread.all(FEEDBACK_COLLECTION)["a1"]["parentId"] is None
