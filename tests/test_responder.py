"""Tests for the keyword reply heuristics."""

import pytest

from memchat.chat.responder import (
    AUTO_SAVED_SUFFIX,
    GREETING_REPLY,
    NOTHING_STORED_REPLY,
    SAVED_REPLY,
    TEST_REPLY,
    decide_response,
    format_recall,
    is_auto_memorable,
)

# -- save --------------------------------------------------------------------


@pytest.mark.parametrize("message", ["remember I like tea", "Please SAVE this", "REMEMBER me"])
def test_save_keywords_store_message_verbatim(message: str) -> None:
    decision = decide_response(message, [])
    assert decision.reply == SAVED_REPLY
    assert decision.memory_content == message
    assert decision.should_save


def test_save_wins_over_recall() -> None:
    decision = decide_response("remember what you recall", ["old memory"])
    assert decision.reply == SAVED_REPLY
    assert decision.should_save


# -- recall ------------------------------------------------------------------


def test_recall_lists_memories_numbered() -> None:
    decision = decide_response("What do you know about me?", ["likes tea", "has a cat"])
    assert decision.reply == "🧠 Here's what I remember:\n\n1. likes tea\n\n2. has a cat"
    assert not decision.should_save


def test_recall_without_memories() -> None:
    decision = decide_response("recall everything please right now ok", [])
    assert decision.reply == NOTHING_STORED_REPLY
    assert decision.memory_content is None


def test_format_recall_single() -> None:
    assert format_recall(["only"]).endswith("\n\n1. only")


# -- context -----------------------------------------------------------------


def test_context_reply_uses_first_memory_truncated() -> None:
    long_memory = "x" * 150
    decision = decide_response("coffee", [long_memory, "second"])
    assert f"about you: {'x' * 100}...\n\n" in decision.reply
    assert 'Regarding "coffee"' in decision.reply
    assert "second" not in decision.reply
    assert not decision.should_save


def test_context_beats_greeting() -> None:
    decision = decide_response("hello", ["likes tea"])
    assert decision.reply != GREETING_REPLY
    assert "likes tea" in decision.reply


# -- canned replies ----------------------------------------------------------


def test_greeting() -> None:
    assert decide_response("Hello there", []).reply == GREETING_REPLY


def test_greeting_matches_substring() -> None:
    # "this" contains "hi"
    assert decide_response("this", []).reply == GREETING_REPLY


def test_test_acknowledgement() -> None:
    decision = decide_response("Testing", [])
    assert decision.reply == TEST_REPLY
    assert not decision.should_save


# -- default -----------------------------------------------------------------


def test_default_echoes_short_message() -> None:
    decision = decide_response("coffee", [])
    assert decision.reply.startswith('💬 I see you said: "coffee".')
    assert not decision.should_save


def test_default_auto_saves_long_statement() -> None:
    message = "I went to the store today and bought bread"
    decision = decide_response(message, [])
    assert decision.memory_content == "User mentioned: " + message
    assert decision.reply.endswith(AUTO_SAVED_SUFFIX)


def test_default_question_is_not_saved() -> None:
    decision = decide_response("Did you go to the store today?", [])
    assert not decision.should_save
    assert AUTO_SAVED_SUFFIX not in decision.reply


@pytest.mark.parametrize(
    ("message", "expected"),
    [
        ("one two three four five", False),
        ("one two three four five six", True),
        ("one two three four five six?", False),
        ("  one   two three four five  ", False),
    ],
)
def test_is_auto_memorable(message: str, expected: bool) -> None:
    assert is_auto_memorable(message) is expected
