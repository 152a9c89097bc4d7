# mypy: ignore-errors
"""Tests for the toggle vote ledger."""

from __future__ import annotations

import uuid
from datetime import timedelta

import pytest

from reveal.db.time import utcnow
from reveal.models import Target, Vote, VoteKind
from reveal.services.errors import (
    InvalidArgumentError,
    NotFoundError,
    RateLimitedError,
    VoteNotFoundError,
)
from reveal.services.throttle import ThrottleAction, ThrottleGate, ThrottleRule
from reveal.services.votes import VoteLedger, VoteTransition, parse_vote_kind


def _rows(db_session, target, identity):
    return (
        db_session.query(Vote)
        .filter(Vote.ip_hash == identity)
        .filter((Vote.post_id == target.id) | (Vote.comment_id == target.id))
        .all()
    )


def test_first_cast_creates_vote(db_session, ledger, test_post, identity_a) -> None:
    result = ledger.cast_vote(db_session, Target.post(test_post.id), identity_a, "upvote")

    assert result.transition is VoteTransition.CREATED
    assert result.tally.upvotes == 1
    assert result.tally.downvotes == 0
    assert result.tally.user_vote is VoteKind.UPVOTE


def test_comment_switch_then_toggle_off(db_session, ledger, test_comment, identity_a) -> None:
    """upvote, downvote, downvote on a comment ends with no vote at all."""
    target = Target.comment(test_comment.id)

    first = ledger.cast_vote(db_session, target, identity_a, "upvote")
    assert (first.tally.upvotes, first.tally.downvotes, first.tally.score) == (1, 0, 1)

    second = ledger.cast_vote(db_session, target, identity_a, "downvote")
    assert second.transition is VoteTransition.SWITCHED
    assert (second.tally.upvotes, second.tally.downvotes, second.tally.score) == (0, 1, -1)
    assert second.tally.user_vote is VoteKind.DOWNVOTE

    third = ledger.cast_vote(db_session, target, identity_a, "downvote")
    assert third.transition is VoteTransition.REMOVED
    assert (third.tally.upvotes, third.tally.downvotes, third.tally.score) == (0, 0, 0)
    assert third.tally.user_vote is None
    assert _rows(db_session, target, identity_a) == []


def test_casting_same_kind_twice_is_a_no_op(db_session, ledger, test_post, identity_a) -> None:
    """Two identical casts restore the starting tally."""
    target = Target.post(test_post.id)
    before = ledger.get_tallies(db_session, target, identity_a)

    ledger.cast_vote(db_session, target, identity_a, "downvote")
    after = ledger.cast_vote(db_session, target, identity_a, "downvote").tally

    assert after == before


def test_at_most_one_row_per_identity(db_session, ledger, test_post, identity_a) -> None:
    target = Target.post(test_post.id)
    for kind in ("upvote", "downvote", "upvote"):
        ledger.cast_vote(db_session, target, identity_a, kind)

    rows = _rows(db_session, target, identity_a)
    assert len(rows) == 1
    assert rows[0].vote_type == "upvote"


def test_switch_refreshes_timestamp(db_session, test_post, identity_a) -> None:
    """Switching polarity overwrites the row's timestamp."""
    start = utcnow()
    ticks = iter([start, start + timedelta(seconds=30)])
    ledger = VoteLedger(clock=lambda: next(ticks))
    target = Target.post(test_post.id)

    ledger.cast_vote(db_session, target, identity_a, "upvote")
    first_stamp = _rows(db_session, target, identity_a)[0].created_at
    ledger.cast_vote(db_session, target, identity_a, "downvote")
    [row] = _rows(db_session, target, identity_a)

    assert row.vote_type == "downvote"
    assert row.created_at != first_stamp


def test_tallies_count_all_identities(db_session, ledger, test_post, identity_a, identity_b) -> None:
    target = Target.post(test_post.id)
    ledger.cast_vote(db_session, target, identity_a, "upvote")
    ledger.cast_vote(db_session, target, identity_b, "upvote")
    ledger.cast_vote(db_session, target, "third", "downvote")

    tally = ledger.get_tallies(db_session, target, identity_b)
    assert (tally.upvotes, tally.downvotes, tally.score) == (2, 1, 1)
    assert tally.user_vote is VoteKind.UPVOTE

    anonymous = ledger.get_tallies(db_session, target, None)
    assert anonymous.user_vote is None


def test_post_and_comment_votes_are_independent(
    db_session, ledger, test_post, test_comment, identity_a
) -> None:
    ledger.cast_vote(db_session, Target.post(test_post.id), identity_a, "upvote")
    ledger.cast_vote(db_session, Target.comment(test_comment.id), identity_a, "downvote")

    post_tally = ledger.get_tallies(db_session, Target.post(test_post.id), identity_a)
    comment_tally = ledger.get_tallies(db_session, Target.comment(test_comment.id), identity_a)
    assert post_tally.user_vote is VoteKind.UPVOTE
    assert comment_tally.user_vote is VoteKind.DOWNVOTE


def test_invalid_kind(db_session, ledger, test_post, identity_a) -> None:
    with pytest.raises(InvalidArgumentError):
        ledger.cast_vote(db_session, Target.post(test_post.id), identity_a, "sideways")
    assert db_session.query(Vote).count() == 0


def test_parse_vote_kind() -> None:
    assert parse_vote_kind("upvote") is VoteKind.UPVOTE
    assert parse_vote_kind(VoteKind.DOWNVOTE) is VoteKind.DOWNVOTE
    with pytest.raises(InvalidArgumentError):
        parse_vote_kind("UPVOTE")


def test_missing_targets(db_session, ledger, identity_a) -> None:
    with pytest.raises(NotFoundError):
        ledger.cast_vote(db_session, Target.post(uuid.uuid4()), identity_a, "upvote")
    with pytest.raises(NotFoundError):
        ledger.cast_vote(db_session, Target.comment(uuid.uuid4()), identity_a, "upvote")


def test_votes_on_hidden_content_are_accepted(db_session, ledger, make_post, identity_a) -> None:
    hidden = make_post(hidden=True)
    result = ledger.cast_vote(db_session, Target.post(hidden.id), identity_a, "upvote")
    assert result.tally.upvotes == 1


def test_vote_throttle(db_session, make_post, identity_a) -> None:
    """The vote-cast window counts every row the identity holds."""
    gate = ThrottleGate({ThrottleAction.VOTE_CAST: ThrottleRule(2, timedelta(minutes=2))})
    ledger = VoteLedger(throttle=gate)
    posts = [make_post() for _ in range(3)]

    ledger.cast_vote(db_session, Target.post(posts[0].id), identity_a, "upvote")
    ledger.cast_vote(db_session, Target.post(posts[1].id), identity_a, "upvote")
    with pytest.raises(RateLimitedError):
        ledger.cast_vote(db_session, Target.post(posts[2].id), identity_a, "upvote")


def test_remove_vote(db_session, ledger, test_post, identity_a) -> None:
    target = Target.post(test_post.id)
    ledger.cast_vote(db_session, target, identity_a, "upvote")

    ledger.remove_vote(db_session, target, identity_a)

    assert _rows(db_session, target, identity_a) == []
    with pytest.raises(VoteNotFoundError):
        ledger.remove_vote(db_session, target, identity_a)


def test_concurrent_insert_falls_back_to_existing_row(
    db_session, ledger, test_post, identity_a, monkeypatch
) -> None:
    """A lost insert race is resolved against the row that won."""
    target = Target.post(test_post.id)
    ledger.cast_vote(db_session, target, identity_a, "upvote")

    real_find_vote = VoteLedger.find_vote
    calls = {"n": 0}

    def stale_first_lookup(self, db, tgt, identity):
        calls["n"] += 1
        if calls["n"] == 1:
            return None
        return real_find_vote(self, db, tgt, identity)

    monkeypatch.setattr(VoteLedger, "find_vote", stale_first_lookup)

    result = ledger.cast_vote(db_session, target, identity_a, "downvote")

    assert calls["n"] == 2
    assert result.transition is VoteTransition.SWITCHED
    rows = _rows(db_session, target, identity_a)
    assert len(rows) == 1
    assert rows[0].vote_type == "downvote"
