"""Tests for the keyset-paginated feed."""

from datetime import UTC, datetime, timedelta

import pytest

from threadline.core.errors import ValidationError
from threadline.db.time import to_epoch_ms
from threadline.repositories import PostRepository
from threadline.services.feed import Cursor, clamp_limit, list_posts
from threadline.services.vote_ledger import cast_vote

BASE_TIME = datetime(2024, 1, 1, tzinfo=UTC)


def _ids(page) -> list[int]:
    return [post.id for post in page.posts]


def test_three_post_scenario(db_session, test_user, make_post) -> None:
    """limit=2 gives [t3, t2] with more; the t2 cursor gives [t1] and no more."""
    p1 = make_post(test_user, created_at=BASE_TIME + timedelta(seconds=1))
    p2 = make_post(test_user, created_at=BASE_TIME + timedelta(seconds=2))
    p3 = make_post(test_user, created_at=BASE_TIME + timedelta(seconds=3))
    repo = PostRepository(db_session)

    first = list_posts(repo, limit=2)
    assert _ids(first) == [p3.id, p2.id]
    assert first.has_more is True

    second = list_posts(repo, limit=2, cursor=str(to_epoch_ms(p2.created_at)))
    assert _ids(second) == [p1.id]
    assert second.has_more is False

    # The compound cursor returned with the first page lands in the same place.
    assert _ids(list_posts(repo, limit=2, cursor=first.next_cursor)) == [p1.id]


def test_has_more_exact_limit(db_session, test_user, make_post) -> None:
    for _ in range(5):
        make_post(test_user)
    repo = PostRepository(db_session)

    page = list_posts(repo, limit=5)
    assert len(page.posts) == 5
    assert page.has_more is False

    make_post(test_user)
    page = list_posts(repo, limit=5)
    assert len(page.posts) == 5
    assert page.has_more is True


def test_empty_feed(db_session) -> None:
    page = list_posts(PostRepository(db_session), limit=10)
    assert page.posts == []
    assert page.has_more is False
    assert page.next_cursor is None


def test_pages_stable_under_inserts(db_session, test_user, make_post) -> None:
    """Walking with the cursor yields every post once, newest first, despite new posts."""
    originals = [make_post(test_user) for _ in range(25)]
    repo = PostRepository(db_session)

    seen: list[int] = []
    cursor = None
    pages = 0
    while True:
        page = list_posts(repo, limit=10, cursor=cursor)
        seen.extend(_ids(page))
        pages += 1
        # A newer post arrives between page fetches.
        make_post(test_user, created_at=BASE_TIME + timedelta(days=1, seconds=pages))
        if not page.has_more:
            break
        cursor = page.next_cursor

    expected = [post.id for post in sorted(originals, key=lambda p: p.created_at, reverse=True)]
    assert seen == expected
    assert pages == 3


def test_same_millisecond_posts_not_skipped(db_session, test_user, make_post) -> None:
    instant = BASE_TIME + timedelta(hours=1)
    same = [make_post(test_user, created_at=instant) for _ in range(3)]
    older = make_post(test_user, created_at=instant - timedelta(seconds=1))
    repo = PostRepository(db_session)

    first = list_posts(repo, limit=2)
    second = list_posts(repo, limit=2, cursor=first.next_cursor)

    assert _ids(first) + _ids(second) == [same[2].id, same[1].id, same[0].id, older.id]
    assert second.has_more is False


def test_limit_is_clamped(db_session, test_user, make_post) -> None:
    for _ in range(4):
        make_post(test_user)
    page = list_posts(PostRepository(db_session), limit=1000, max_limit=3)
    assert len(page.posts) == 3
    assert page.has_more is True


@pytest.mark.parametrize(("requested", "expected"), [(1000, 50), (50, 50), (7, 7), (0, 1), (-3, 1)])
def test_clamp_limit_default_ceiling(requested, expected) -> None:
    assert clamp_limit(requested) == expected


@pytest.mark.parametrize(
    "token",
    ["abc", "-5", "12:x", "1.5", "12:", ":12", "   ", "9" * 15, "1700000000000;1"],
)
def test_malformed_cursor_rejected(db_session, token) -> None:
    with pytest.raises(ValidationError) as exc_info:
        list_posts(PostRepository(db_session), limit=10, cursor=token)
    assert exc_info.value.errors[0].field == "cursor"


def test_cursor_round_trip_forms() -> None:
    assert Cursor.parse("1700000000123") == Cursor(1700000000123, None)
    assert Cursor.parse("1700000000123:42").encode() == "1700000000123:42"


def test_vote_status_only_for_viewer(db_session, test_user, other_user, make_post) -> None:
    post = make_post(test_user)
    cast_vote(db_session, post_id=post.id, user_id=other_user.id, value=1)
    repo = PostRepository(db_session)

    assert list_posts(repo, limit=10, viewer_id=other_user.id).posts[0].vote_status == 1
    assert list_posts(repo, limit=10, viewer_id=test_user.id).posts[0].vote_status is None
    assert list_posts(repo, limit=10).posts[0].vote_status is None


def test_creator_email_visible_only_to_creator(db_session, test_user, other_user, make_post) -> None:
    make_post(test_user)
    make_post(other_user)
    repo = PostRepository(db_session)

    for post in list_posts(repo, limit=10, viewer_id=test_user.id).posts:
        if post.creator.id == test_user.id:
            assert post.creator.email == test_user.email
        else:
            assert post.creator.email == ""

    assert all(post.creator.email == "" for post in list_posts(repo, limit=10).posts)
