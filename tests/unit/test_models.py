"""Unit tests for the feedback, article and user models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from factcheck_feedback.models.feedback import (
    FEEDBACK_ID_SEPARATOR,
    FeedbackKey,
    FeedbackStatus,
    FeedbackVote,
)
from tests.conftest import make_article, make_article_reply, make_feedback


# ─── FeedbackKey ──────────────────────────────────────────────────

def test_feedback_key_serializes_in_fixed_order():
    key = FeedbackKey(article_id="A1", reply_id="R1", user_id="U1", app_id="WEBSITE")
    assert key.to_id() == "A1__R1__U1__WEBSITE"


def test_feedback_key_parses_its_own_id():
    key = FeedbackKey(article_id="A1", reply_id="R1", user_id="U1", app_id="LINE")
    assert FeedbackKey.from_id(key.to_id()) == key


def test_distinct_keys_produce_distinct_ids():
    a = FeedbackKey(article_id="A1", reply_id="R1", user_id="U1", app_id="WEBSITE")
    b = FeedbackKey(article_id="A1", reply_id="R1", user_id="U2", app_id="WEBSITE")
    c = FeedbackKey(article_id="A1", reply_id="R1", user_id="U1", app_id="LINE")
    assert len({a.to_id(), b.to_id(), c.to_id()}) == 3


@pytest.mark.parametrize("field", ["article_id", "reply_id", "user_id", "app_id"])
def test_feedback_key_rejects_separator_in_components(field):
    values = {"article_id": "A1", "reply_id": "R1", "user_id": "U1", "app_id": "WEBSITE"}
    values[field] = f"bad{FEEDBACK_ID_SEPARATOR}value"
    with pytest.raises(ValidationError):
        FeedbackKey(**values)


def test_feedback_key_rejects_empty_component():
    with pytest.raises(ValidationError):
        FeedbackKey(article_id="", reply_id="R1", user_id="U1", app_id="WEBSITE")


def test_from_id_rejects_malformed_id():
    with pytest.raises(ValueError, match="Malformed feedback id"):
        FeedbackKey.from_id("A1__R1__U1")


def test_feedback_key_is_frozen():
    key = FeedbackKey(article_id="A1", reply_id="R1", user_id="U1", app_id="WEBSITE")
    with pytest.raises(ValidationError):
        key.user_id = "U2"


# ─── ArticleReplyFeedback ─────────────────────────────────────────

def test_feedback_key_property_matches_stored_id():
    feedback = make_feedback(1, user_id="U7")
    assert feedback.key.to_id() == feedback.id


def test_feedback_score_out_of_range_rejected():
    with pytest.raises(ValidationError):
        make_feedback(2)


def test_feedback_defaults():
    feedback = make_feedback(0)
    assert feedback.status == FeedbackStatus.NORMAL
    assert feedback.comment is None
    assert feedback.reply_user_id is None
    assert feedback.article_reply_user_id is None


def test_feedback_vote_values():
    assert [v.value for v in FeedbackVote] == [1, 0, -1]
    with pytest.raises(ValueError):
        FeedbackVote(3)


# ─── Article ──────────────────────────────────────────────────────

def test_find_article_reply_returns_matching_entry():
    article = make_article("A1", make_article_reply("R1"), make_article_reply("R2"))
    entry = article.find_article_reply("R2")
    assert entry is not None
    assert entry.reply_id == "R2"


def test_find_article_reply_returns_none_when_absent():
    article = make_article("A1", make_article_reply("R1"))
    assert article.find_article_reply("R9") is None


def test_article_reply_counts_default_to_zero():
    entry = make_article_reply("R1")
    assert entry.positive_feedback_count == 0
    assert entry.negative_feedback_count == 0
