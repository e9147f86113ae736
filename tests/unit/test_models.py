"""Unit tests for the Pydantic models — shorthands, validation, immutability."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from outpost.models.archive import (
    ArchiveFailure,
    ArchiveSpec,
    ArchiveSuccess,
    AttachmentPolicy,
    ExternalizeMode,
)
from outpost.models.context import ComposeContext
from outpost.models.groups import GroupParameters
from outpost.models.message import FinalizedMessage
from outpost.models.profile import Profile, load_profile
from outpost.models.rules import (
    Attribute,
    CallableValue,
    GroupMatcher,
    LiteralMatcher,
    LiteralValue,
    Rule,
)
from outpost.models.transport import PostMethodSetting, PostMode, TransportMethod


def _always(group: str) -> list[str]:
    return [f"archive.{group}"]


class TestTransportMethod:
    def test_parse_kind_and_address(self):
        method = TransportMethod.parse("spool+archive")
        assert method.kind == "spool"
        assert method.address == "archive"
        assert method.can_post is False
        assert method.can_post_via_mail is True

    def test_label(self):
        assert TransportMethod(kind="nntp", address="news.example.org").label == "news.example.org (nntp)"
        assert TransportMethod(kind="nntp").label == "nntp"

    def test_explicit_flags_win_over_kind_defaults(self):
        method = TransportMethod.model_validate({"kind": "memory", "can_post": False})
        assert method.can_post is False
        assert method.can_post_via_mail is True

    def test_unknown_kind_has_no_capabilities(self):
        assert TransportMethod(kind="mystery").can_send is False

    def test_frozen(self):
        method = TransportMethod(kind="memory")
        with pytest.raises(ValidationError):
            method.kind = "other"  # type: ignore[misc]

    def test_str_round_trips(self):
        assert TransportMethod.parse(str(TransportMethod.parse("memory+x"))).key == ("memory", "x")

    def test_explicit_method_only_in_explicit_mode(self):
        method = TransportMethod(kind="memory")
        assert PostMethodSetting(mode=PostMode.EXPLICIT, methods=[method]).explicit_method == method
        assert PostMethodSetting(mode=PostMode.ASK, methods=[method]).explicit_method is None

    def test_several_explicit_methods_are_ambiguous(self):
        methods = [TransportMethod.parse("memory+a"), TransportMethod.parse("memory+b")]
        setting = PostMethodSetting(mode=PostMode.EXPLICIT, methods=methods)
        assert setting.explicit_method is None
        assert setting.ambiguous
        assert not PostMethodSetting(mode=PostMode.EXPLICIT, methods=methods[:1]).ambiguous
        assert not PostMethodSetting(mode=PostMode.ASK, methods=methods).ambiguous


class TestRuleModels:
    def test_pair_shorthand(self):
        rule = Rule.model_validate(("^lists", [("organization", "Lists Inc")]))
        assert isinstance(rule.matcher, GroupMatcher)
        assert rule.attributes[0].key == "organization"
        assert rule.attributes[0].source == LiteralValue(value="Lists Inc")

    def test_boolean_matcher_shorthand(self):
        assert Rule.model_validate((True, [])).matcher == LiteralMatcher(value=True)

    def test_key_is_lowercased(self):
        assert Attribute.model_validate(("X-Face", "data")).key == "x-face"

    def test_empty_key_rejected(self):
        with pytest.raises(ValidationError):
            Attribute.model_validate((" ", "v"))

    def test_invalid_regex_rejected(self):
        with pytest.raises(ValidationError):
            Rule.model_validate(("(unclosed", []))

    def test_true_literal_value_rejected(self):
        with pytest.raises(ValidationError):
            Attribute(key="signature", source=LiteralValue(value=True))  # type: ignore[arg-type]

    def test_callable_import_string(self):
        attribute = Attribute.model_validate(
            {"key": "x-path", "source": {"kind": "callable", "function": "os.path.basename"}}
        )
        assert isinstance(attribute.source, CallableValue)
        assert attribute.source.function("/a/b") == "b"

    def test_unknown_matcher_kind_rejected(self):
        with pytest.raises(ValidationError):
            Rule.model_validate({"matcher": {"kind": "regexp", "pattern": "x"}, "attributes": []})


class TestArchiveModels:
    def test_spec_from_string(self):
        assert ArchiveSpec.model_validate("archive.sent").names == ["archive.sent"]

    def test_spec_from_list_of_names(self):
        assert ArchiveSpec.model_validate(["a", "b"]).names == ["a", "b"]

    def test_spec_from_rules(self):
        spec = ArchiveSpec.model_validate([["^lists", ["archive.lists"]], [True, "archive.misc"]])
        assert len(spec.rules) == 2
        assert spec.rules[1].destinations == ["archive.misc"]

    def test_spec_from_callable(self):
        assert ArchiveSpec.model_validate(_always).function is _always

    def test_policy_from_setting(self):
        assert AttachmentPolicy.from_setting("always").mode == ExternalizeMode.ALWAYS
        assert AttachmentPolicy.from_setting("never").mode == ExternalizeMode.NEVER
        assert AttachmentPolicy.from_setting("").mode == ExternalizeMode.NEVER
        policy = AttachmentPolicy.from_setting(r"^big\.")
        assert policy.externalize("big.files")
        assert not policy.externalize("small.files")

    def test_result_ok_flags(self):
        assert ArchiveSuccess(destination="a", sequence_id=1).ok
        assert not ArchiveFailure(destination="a", reason="x").ok


class TestMessageAndContext:
    def test_without_header(self):
        message = FinalizedMessage(headers=[("Gcc", "a"), ("Subject", "s"), ("GCC", "b")])
        assert message.without_header("gcc").headers == [("Subject", "s")]
        assert message.header("gcc") == "a"

    def test_context_article_header(self):
        context = ComposeContext(article_headers={"Message-ID": "<1@x>"})
        assert context.article_header("message-id") == "<1@x>"
        assert context.article_header("missing") is None


class TestProfile:
    def test_defaults(self):
        profile = Profile()
        assert profile.select_method.kind == "memory"
        assert profile.post_method.mode == PostMode.NATIVE
        assert profile.archive is None

    def test_group_parameters(self):
        params = GroupParameters.model_validate(
            {"archive": [True, "archive.x"], "posting_style": [["signature", "S"]]}
        )
        assert params.archive == [True, "archive.x"]
        assert params.posting_style[0].key == "signature"

    def test_load_profile(self, tmp_path):
        path = tmp_path / "profile.json"
        path.write_text(
            """
            {
              "select_method": "memory+news",
              "post_method": {"mode": "current"},
              "servers": {"work": "spool+work"},
              "posting_styles": [
                ["^lists\\\\.", [["organization", "Lists Inc"]]],
                [true, [["signature", "Bye"]]]
              ],
              "groups": {"lists.foo": {"archive": true}},
              "archive": "archive.sent"
            }
            """,
            encoding="utf-8",
        )
        profile = load_profile(path)
        assert profile.select_method.address == "news"
        assert profile.servers["work"].kind == "spool"
        assert len(profile.posting_styles) == 2
        assert profile.groups["lists.foo"].archive is True
        assert profile.archive.names == ["archive.sent"]
