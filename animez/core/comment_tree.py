"""Assemble a post's flat comment list into root comments with replies.

Threads are exactly two levels deep: a root comment and its direct replies.
A reply whose parent is not a root in the same snapshot (the parent was
deleted, or the parent is itself a reply) is left out of the result.
"""
import logging
from typing import Dict, List, Sequence, Any

from animez.core.schemas import CommentRead, CommentReply, CommentThread

logger = logging.getLogger(__name__)


class MalformedCommentError(ValueError):
    """Raised when a comment record has no id."""


def _comment_fields(comment: Any) -> dict:
    if getattr(comment, "id", None) in (None, ""):
        raise MalformedCommentError(f"Comment record has no id: {comment!r}")
    return CommentRead.model_validate(comment).model_dump()


def build_comment_tree(comments: Sequence[Any]) -> List[CommentThread]:
    """Group ``comments`` into threads, preserving input order.

    ``comments`` may be ORM rows or ``CommentRead`` instances. Root order
    and per-root reply order both follow the order of the input sequence.
    """
    threads: Dict[str, CommentThread] = {}
    roots: List[CommentThread] = []

    for comment in comments:
        fields = _comment_fields(comment)
        if fields["parent_comment_id"] is None:
            thread = CommentThread(**fields, replies=[])
            threads[thread.id] = thread
            roots.append(thread)

    dropped = 0
    for comment in comments:
        parent_id = getattr(comment, "parent_comment_id", None)
        if parent_id is None:
            continue
        parent = threads.get(parent_id)
        if parent is None:
            dropped += 1
            continue
        parent.replies.append(CommentReply(**_comment_fields(comment)))

    if dropped:
        logger.debug("Dropped %d replies without a root parent", dropped)
    return roots
