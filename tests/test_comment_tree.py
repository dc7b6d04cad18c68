"""
Comment threading: flat newest-first comment lists grouped into
root comments with their direct replies.
"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from animez.core.comment_tree import build_comment_tree, MalformedCommentError
from animez.core.models import Comment
from animez.core.schemas import CommentRead, CommentReply, CommentThread

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def make_comment(comment_id, parent=None, minutes_ago=0, **payload):
    return CommentRead(
        id=comment_id,
        post_id="post-1",
        user_id=payload.get("user_id", "user-1"),
        username=payload.get("username", "alice"),
        user_avatar=payload.get("user_avatar"),
        content=payload.get("content", f"comment {comment_id}"),
        like_count=payload.get("like_count", 0),
        parent_comment_id=parent,
        created_at=BASE_TIME - timedelta(minutes=minutes_ago),
    )


def ids(nodes):
    return [n.id for n in nodes]


def test_empty_input_gives_no_threads():
    assert build_comment_tree([]) == []


def test_reference_scenario_keeps_two_levels():
    comments = [
        make_comment("1"),
        make_comment("2", parent="1"),
        make_comment("3"),
        make_comment("4", parent="2"),
    ]

    roots = build_comment_tree(comments)

    assert ids(roots) == ["1", "3"]
    assert ids(roots[0].replies) == ["2"]
    assert roots[1].replies == []
    # "4" answers a reply, which would be a third level
    all_ids = ids(roots) + [r.id for root in roots for r in root.replies]
    assert "4" not in all_ids


def test_orphaned_reply_is_dropped():
    comments = [make_comment("a"), make_comment("b", parent="deleted-parent")]

    roots = build_comment_tree(comments)

    assert ids(roots) == ["a"]
    assert roots[0].replies == []


def test_replies_keep_input_order_not_timestamp_order():
    comments = [
        make_comment("root", minutes_ago=10),
        make_comment("older-reply", parent="root", minutes_ago=5),
        make_comment("newer-reply", parent="root", minutes_ago=1),
    ]

    roots = build_comment_tree(comments)

    assert ids(roots[0].replies) == ["older-reply", "newer-reply"]


def test_reply_listed_before_its_root_is_still_attached():
    comments = [make_comment("r1", parent="root"), make_comment("root")]

    roots = build_comment_tree(comments)

    assert ids(roots) == ["root"]
    assert ids(roots[0].replies) == ["r1"]


def test_root_order_follows_input():
    comments = [make_comment(str(i), minutes_ago=i) for i in range(5)]

    assert ids(build_comment_tree(comments)) == ["0", "1", "2", "3", "4"]
    assert ids(build_comment_tree(list(reversed(comments)))) == ["4", "3", "2", "1", "0"]


def test_structural_properties_on_mixed_input():
    comments = [
        make_comment("c1"),
        make_comment("c2", parent="c1"),
        make_comment("c3", parent="c9"),
        make_comment("c4"),
        make_comment("c5", parent="c4"),
        make_comment("c6", parent="c1"),
        make_comment("c7", parent="c5"),
    ]
    source = {c.id: c for c in comments}

    roots = build_comment_tree(comments)

    node_count = len(roots) + sum(len(r.replies) for r in roots)
    assert node_count <= len(comments)
    assert node_count == 5  # c3 orphaned, c7 too deep
    for root in roots:
        assert source[root.id].parent_comment_id is None
        for reply in root.replies:
            assert source[reply.id].parent_comment_id == root.id
    assert ids(roots) == [c.id for c in comments if c.parent_comment_id is None]
    assert ids(roots[0].replies) == ["c2", "c6"]


def test_build_is_deterministic_and_leaves_input_untouched():
    comments = [make_comment("1"), make_comment("2", parent="1"), make_comment("3")]
    snapshot = [c.model_copy() for c in comments]

    assert build_comment_tree(comments) == build_comment_tree(comments)
    assert comments == snapshot


def test_payload_fields_pass_through():
    comments = [
        make_comment("1", username="bob", user_avatar="/uploads/avatars/b.png", like_count=3),
        make_comment("2", parent="1", content="hello there"),
    ]

    roots = build_comment_tree(comments)

    assert isinstance(roots[0], CommentThread)
    assert roots[0].username == "bob"
    assert roots[0].user_avatar == "/uploads/avatars/b.png"
    assert roots[0].like_count == 3
    reply = roots[0].replies[0]
    assert isinstance(reply, CommentReply)
    assert reply.content == "hello there"
    assert not hasattr(reply, "replies")


def test_accepts_orm_rows():
    created = BASE_TIME
    rows = [
        Comment(id="1", post_id="p", user_id="u", username="alice", content="root",
                like_count=0, created_at=created),
        Comment(id="2", post_id="p", user_id="u", username="alice", content="reply",
                like_count=0, parent_comment_id="1", created_at=created),
    ]

    roots = build_comment_tree(rows)

    assert ids(roots) == ["1"]
    assert ids(roots[0].replies) == ["2"]


def test_missing_id_fails_fast():
    unsaved = Comment(post_id="p", user_id="u", username="alice", content="no id yet",
                      like_count=0, created_at=BASE_TIME)

    with pytest.raises(MalformedCommentError):
        build_comment_tree([make_comment("1"), unsaved])


def test_empty_id_fails_fast():
    record = SimpleNamespace(id="", parent_comment_id=None)

    with pytest.raises(ValueError):
        build_comment_tree([record])
