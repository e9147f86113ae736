"""Unit tests for Draft and ComposeSession."""

from __future__ import annotations

import pytest

from outpost.core.draft import ComposeSession, Draft
from outpost.models.context import ComposeContext
from outpost.models.message import Attachment


class TestDraft:
    def test_headers_keep_one_value_per_name(self):
        draft = Draft([("Subject", "a"), ("subject", "b")])
        assert draft.headers == [("subject", "b")]

    def test_remove_precedes_reinsertion(self):
        draft = Draft([("Organization", "Old"), ("Subject", "s")])
        draft.set_header("Organization", "New")
        assert draft.headers == [("Subject", "s"), ("Organization", "New")]

    def test_remove_reports_presence(self):
        draft = Draft([("X-A", "1")])
        assert draft.remove("x-a") is True
        assert draft.remove("x-a") is False

    def test_contains_and_get_are_case_insensitive(self):
        draft = Draft([("Reply-To", "r@example.org")])
        assert "reply-to" in draft
        assert draft.get("REPLY-TO") == "r@example.org"

    def test_rendered_body_adds_signature_separator(self):
        draft = Draft(body="text", signature="Sig")
        assert draft.rendered_body() == "text\n\n-- \nSig\n"

    def test_copy_is_independent(self):
        draft = Draft([("A", "1")], "body", attachments=[Attachment(filename="f")])
        clone = draft.copy()
        clone.set_header("A", "2")
        clone.body = "other"
        assert draft.get("A") == "1"
        assert draft.body == "body"
        assert clone.attachments == draft.attachments

    def test_to_message(self):
        message = Draft([("Subject", "s")], "b\n").to_message()
        assert message.header("subject") == "s"
        assert message.body == "b\n"


class TestComposeSession:
    def test_actions_run_in_order(self):
        session = ComposeSession(Draft(), ComposeContext())
        session.add_action("one", lambda d: d.set_header("X-Order", "1"))
        session.add_action("two", lambda d: d.set_header("X-Order", "2"))
        assert session.finalize().get("X-Order") == "2"
        assert session.finalized

    def test_failed_action_leaves_draft_untouched(self):
        draft = Draft([("Subject", "s")])
        session = ComposeSession(draft, ComposeContext())
        session.add_action("ok", lambda d: d.set_header("Organization", "Org"))

        def _fail(d: Draft) -> None:
            raise RuntimeError("nope")

        session.add_action("bad", _fail)
        with pytest.raises(RuntimeError):
            session.finalize()
        assert session.draft.get("Organization") is None
        assert not session.finalized

    def test_no_actions_after_finalize(self):
        session = ComposeSession(Draft(), ComposeContext())
        session.finalize()
        with pytest.raises(RuntimeError):
            session.add_action("late", lambda d: None)

    def test_finalize_is_idempotent(self):
        session = ComposeSession(Draft(body="x"), ComposeContext())
        session.add_action("body", lambda d: d.prepend_body(">"))
        session.finalize()
        assert session.finalize().body == ">x"
