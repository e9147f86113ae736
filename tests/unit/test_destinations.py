"""Unit tests for the archival directive codec and destination resolution."""

from __future__ import annotations

import pytest

from outpost.core.destinations import (
    format_directive,
    parse_directive,
    resolve_destination_names,
)
from outpost.core.errors import MalformedRule
from outpost.core.group_metadata import GroupMetadata
from outpost.models.profile import Profile


def by_group(group: str) -> list[str]:
    return [f"archive.{group}", "archive.all"]


def exploding(group: str) -> list[str]:
    raise ValueError("no archive today")


def _metadata(**profile_fields) -> GroupMetadata:
    return GroupMetadata(Profile.model_validate(profile_fields))


class TestDirective:
    def test_format_joins_with_commas(self):
        assert format_directive(["archive.a", "archive.b"]) == "archive.a, archive.b"

    def test_format_quotes_names_with_spaces(self):
        assert format_directive(["sent mail", "x"]) == '"sent mail", x'

    def test_parse_splits_and_strips(self):
        assert parse_directive(" archive.a ,archive.b") == ["archive.a", "archive.b"]

    def test_parse_keeps_quoted_commas(self):
        assert parse_directive('"a, b", c') == ["a, b", "c"]

    def test_parse_drops_empty_items(self):
        assert parse_directive("a,, ,b,") == ["a", "b"]

    def test_format_quotes_commas_and_escapes_quotes(self):
        assert format_directive(["a,b", 'say "hi"']) == '"a,b", "say \\"hi\\""'

    @pytest.mark.parametrize("name", ["a,b", 'say "hi"', 'x\\"y', "back\\slash dir"])
    def test_awkward_names_survive_format_and_parse(self, name):
        assert parse_directive(format_directive([name, "archive.sent"])) == [name, "archive.sent"]

    def test_format_then_parse_preserves_order_and_duplicates(self):
        names = ["x", "spool+local:sent mail", "x"]
        assert parse_directive(format_directive(names)) == names


class TestGroupOverride:
    def test_true_means_the_group_itself(self, make_context):
        metadata = _metadata(groups={"lists.foo": {"archive": True}}, archive="archive.sent")
        assert resolve_destination_names(make_context(), metadata) == ["lists.foo"]

    def test_string_names_one_destination(self, make_context):
        metadata = _metadata(groups={"lists.foo": {"archive": "archive.foo"}})
        assert resolve_destination_names(make_context(), metadata) == ["archive.foo"]

    def test_list_combines_forms(self, make_context):
        metadata = _metadata(groups={"lists.foo": {"archive": [True, "archive.foo"]}})
        assert resolve_destination_names(make_context(), metadata) == [
            "lists.foo",
            "archive.foo",
        ]

    def test_false_disables_archiving(self, make_context):
        metadata = _metadata(groups={"lists.foo": {"archive": False}}, archive="archive.sent")
        assert resolve_destination_names(make_context(), metadata) == []


class TestGlobalSpec:
    def test_no_spec_no_destinations(self, make_context):
        assert resolve_destination_names(make_context(), _metadata()) == []

    def test_fixed_names(self, make_context):
        metadata = _metadata(archive=["archive-a", "archive-b", "archive-a"])
        assert resolve_destination_names(make_context(), metadata) == [
            "archive-a",
            "archive-b",
            "archive-a",
        ]

    def test_function_receives_group_name(self, make_context):
        metadata = _metadata(archive={"function": by_group})
        assert resolve_destination_names(make_context(), metadata) == [
            "archive.lists.foo",
            "archive.all",
        ]

    def test_function_failure_is_malformed_rule(self, make_context):
        metadata = _metadata(archive={"function": exploding})
        with pytest.raises(MalformedRule):
            resolve_destination_names(make_context(), metadata)

    def test_first_matching_rule_wins(self, make_context):
        metadata = _metadata(
            archive=[["^lists\\.", ["archive.lists"]], ["foo", "archive.foo"], [True, "archive.misc"]]
        )
        assert resolve_destination_names(make_context(), metadata) == ["archive.lists"]
        assert resolve_destination_names(make_context(group="comp.lang"), metadata) == [
            "archive.misc"
        ]

    def test_header_rule(self, make_context):
        metadata = _metadata(
            archive={
                "rules": [
                    {
                        "matcher": {"kind": "header", "header": "From", "pattern": "boss@"},
                        "destinations": ["archive.work"],
                    }
                ]
            }
        )
        context = make_context(article_headers={"From": "boss@example.org"})
        assert resolve_destination_names(context, metadata) == ["archive.work"]
        assert resolve_destination_names(make_context(), metadata) == []
