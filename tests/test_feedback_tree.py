# =============================================================================
# tests/test_feedback_tree.py - Feedback Tree Builder Tests
# =============================================================================
# Run with: pytest tests/test_feedback_tree.py -v
# =============================================================================

from datetime import datetime, timedelta, timezone

from core.models.feedback import FeedbackItem
from lib.feedback_tree import build_tree

BASE = datetime(2024, 3, 1, tzinfo=timezone.utc)


def item(item_id, parent_id=None, minutes=0, dated=True):
    return FeedbackItem(
        id=item_id,
        resume_owner_id="owner-1",
        reviewer_id="reviewer-1",
        content=f"comment {item_id}",
        parent_id=parent_id,
        created_at=BASE + timedelta(minutes=minutes) if dated else None,
    )


def ids(nodes):
    return [n.item.id for n in nodes]


def all_ids(nodes):
    found = []
    stack = list(nodes)
    while stack:
        node = stack.pop()
        found.append(node.item.id)
        stack.extend(node.replies)
    return found


class TestOrdering:
    """Top level newest first, replies oldest first."""

    def test_top_level_newest_first(self):
        tree = build_tree([item("a", minutes=1), item("b", minutes=3), item("c", minutes=2)])
        assert ids(tree) == ["b", "c", "a"]

    def test_replies_oldest_first_at_every_depth(self):
        tree = build_tree([
            item("root", minutes=0),
            item("r2", "root", minutes=5),
            item("r1", "root", minutes=2),
            item("r1b", "r1", minutes=9),
            item("r1a", "r1", minutes=7),
        ])

        assert ids(tree) == ["root"]
        assert ids(tree[0].replies) == ["r1", "r2"]
        assert ids(tree[0].replies[0].replies) == ["r1a", "r1b"]
        assert tree[0].replies[1].replies == []

    def test_undated_items_sort_last(self):
        tree = build_tree([item("x", dated=False), item("a", minutes=1), item("b", minutes=2)])
        assert ids(tree) == ["b", "a", "x"]

    def test_input_order_irrelevant(self):
        items = [item("root"), item("child", "root", minutes=1), item("grand", "child", minutes=2)]
        forward = build_tree(items)
        backward = build_tree(list(reversed(items)))

        assert ids(forward) == ids(backward) == ["root"]
        assert ids(backward[0].replies) == ["child"]
        assert ids(backward[0].replies[0].replies) == ["grand"]


class TestOrphans:
    """Items whose parent is missing become top-level."""

    def test_missing_parent_promoted(self):
        tree = build_tree([item("a", minutes=1), item("lost", "deleted", minutes=2)])
        assert ids(tree) == ["lost", "a"]

    def test_self_parent_is_top_level(self):
        tree = build_tree([item("selfish", "selfish")])

        assert ids(tree) == ["selfish"]
        assert tree[0].replies == []

    def test_empty_input(self):
        assert build_tree([]) == []


class TestCycles:
    """parentId cycles still yield every item exactly once."""

    def test_two_cycle_promotes_earliest(self):
        tree = build_tree([item("x", "y", minutes=5), item("y", "x", minutes=1)])

        assert ids(tree) == ["y"]
        assert ids(tree[0].replies) == ["x"]

    def test_cycle_alongside_normal_thread(self):
        tree = build_tree([
            item("root", minutes=0),
            item("reply", "root", minutes=1),
            item("c1", "c3", minutes=2),
            item("c2", "c1", minutes=3),
            item("c3", "c2", minutes=4),
        ])

        assert ids(tree) == ["c1", "root"]
        assert sorted(all_ids(tree)) == ["c1", "c2", "c3", "reply", "root"]
        assert len(all_ids(tree)) == 5

    def test_promoted_cycle_sorted_with_other_roots(self):
        tree = build_tree([
            item("old", minutes=0),
            item("x", "y", minutes=60),
            item("y", "x", minutes=90),
            item("new", minutes=120),
        ])

        assert ids(tree) == ["new", "x", "old"]
        assert ids(tree[1].replies) == ["y"]


class TestSerialization:
    """FeedbackNode.to_dict flags the viewer's votes everywhere."""

    def test_viewer_flags_nested(self):
        root = item("root")
        reply = item("reply", "root", minutes=1).model_copy(update={"downvoted_by": {"viewer"}})
        root = root.model_copy(update={"upvoted_by": {"viewer"}, "votes": 1})

        data = build_tree([root, reply])[0].to_dict("viewer")

        assert data["upvoted"] is True
        assert data["downvoted"] is False
        assert data["upvotedBy"] == ["viewer"]
        assert data["replies"][0]["id"] == "reply"
        assert data["replies"][0]["downvoted"] is True
        assert data["replies"][0]["replies"] == []

    def test_anonymous_viewer(self):
        data = build_tree([item("root")])[0].to_dict(None)
        assert data["upvoted"] is False and data["downvoted"] is False

    def test_deep_thread_does_not_recurse(self):
        items = [item("n0")] + [item(f"n{i}", f"n{i - 1}", minutes=i) for i in range(1, 3000)]
        data = build_tree(items)[0].to_dict()

        depth = 0
        while data["replies"]:
            data = data["replies"][0]
            depth += 1
        assert depth == 2999
