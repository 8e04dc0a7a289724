# =============================================================================
# lib/feedback_tree.py - Feedback Tree Builder
# =============================================================================
# Rebuilds the reply tree of a resume's feedback from the flat record set.
#
# Algorithm (two passes over an id-indexed arena, no recursion):
# 1. Index items by id and group child ids under their parent id.
#    An item is top-level if it has no parent, its parent is missing
#    (deleted), or it names itself as parent.
# 2. Walk breadth-first from the roots, attaching children in order.
#
# Ordering: top level newest first; replies at every depth oldest first.
# Items without a timestamp sort after their timestamped siblings.
#
# Items caught in a parentId cycle are unreachable from any root; the
# earliest of them is promoted to top level so every item appears once.
# =============================================================================

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Iterable

from core.models.feedback import FeedbackItem
from lib.utils import as_utc


@dataclass
class FeedbackNode:
    """A feedback item with its (ordered) replies."""

    item: FeedbackItem
    replies: list[FeedbackNode] = field(default_factory=list)

    def to_dict(self, viewer_id: str | None = None) -> dict[str, Any]:
        """
        Serialize this subtree, flagging the viewer's votes on every node.

        Iterative so deep threads don't hit the recursion limit.
        """
        root = self.item.to_response(viewer_id)
        root["replies"] = []
        stack = [(self, root)]
        while stack:
            node, data = stack.pop()
            for reply in node.replies:
                reply_data = reply.item.to_response(viewer_id)
                reply_data["replies"] = []
                data["replies"].append(reply_data)
                stack.append((reply, reply_data))
        return root


def _ordered(items: list[FeedbackItem], newest_first: bool) -> list[FeedbackItem]:
    """Sort by created_at, undated items last, ties in input order."""
    dated = [i for i in items if i.created_at is not None]
    undated = [i for i in items if i.created_at is None]
    dated.sort(key=lambda i: as_utc(i.created_at), reverse=newest_first)
    return dated + undated


def build_tree(items: Iterable[FeedbackItem]) -> list[FeedbackNode]:
    """
    Convert flat feedback into top-level nodes with nested replies.

    Args:
        items: Every feedback item for one resume, in any order

    Returns:
        Top-level nodes, newest first; each node's replies oldest first

    Example:
        tree = build_tree(FeedbackItem.from_record(r) for r in records)
        payload = [node.to_dict(viewer_id) for node in tree]
    """
    # Pass 1: arena + child index
    arena: dict[str, FeedbackNode] = {}
    order: list[FeedbackItem] = []
    for item in items:
        if item.id in arena:
            continue
        arena[item.id] = FeedbackNode(item)
        order.append(item)

    roots: list[FeedbackItem] = []
    children: dict[str, list[FeedbackItem]] = {}
    for item in order:
        parent_id = item.parent_id
        if parent_id and parent_id != item.id and parent_id in arena:
            children.setdefault(parent_id, []).append(item)
        else:
            roots.append(item)

    # Pass 2: breadth-first attach from each root
    visited: set[str] = set()

    def attach_from(root_id: str) -> None:
        visited.add(root_id)
        queue = deque([root_id])
        while queue:
            parent_id = queue.popleft()
            parent = arena[parent_id]
            for child in _ordered(children.get(parent_id, []), newest_first=False):
                if child.id in visited:
                    continue
                visited.add(child.id)
                parent.replies.append(arena[child.id])
                queue.append(child.id)

    for root in _ordered(roots, newest_first=True):
        attach_from(root.id)

    # Promote cycle members that no root reached
    for item in _ordered([i for i in order if i.id not in visited], newest_first=False):
        if item.id in visited:
            continue
        roots.append(item)
        attach_from(item.id)

    return [arena[item.id] for item in _ordered(roots, newest_first=True)]
