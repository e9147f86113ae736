"""Outpost data models — all Pydantic v2, all frozen (immutable)."""

from outpost.models.archive import (
    ArchiveDestination,
    ArchiveFailure,
    ArchiveResult,
    ArchiveRule,
    ArchiveSpec,
    ArchiveSuccess,
    AttachmentPolicy,
    ExternalizeMode,
)
from outpost.models.context import ComposeContext, ComposeMode
from outpost.models.groups import GroupParameters
from outpost.models.message import Attachment, FinalizedMessage
from outpost.models.profile import Profile, load_profile
from outpost.models.rules import (
    Attribute,
    AttributeSet,
    CallableValue,
    FileValue,
    GroupMatcher,
    HeaderMatcher,
    LiteralMatcher,
    LiteralValue,
    Matcher,
    PredicateMatcher,
    ResolvedAttribute,
    Rule,
    ValueSource,
    VariableMatcher,
    VariableValue,
)
from outpost.models.transport import (
    OverrideFlag,
    PostMethodSetting,
    PostMode,
    TransportMethod,
)

__all__ = [
    # context
    "ComposeContext",
    "ComposeMode",
    # rules
    "Attribute",
    "AttributeSet",
    "CallableValue",
    "FileValue",
    "GroupMatcher",
    "HeaderMatcher",
    "LiteralMatcher",
    "LiteralValue",
    "Matcher",
    "PredicateMatcher",
    "ResolvedAttribute",
    "Rule",
    "ValueSource",
    "VariableMatcher",
    "VariableValue",
    # transport
    "OverrideFlag",
    "PostMethodSetting",
    "PostMode",
    "TransportMethod",
    # groups
    "GroupParameters",
    # messages
    "Attachment",
    "FinalizedMessage",
    # archive
    "ArchiveDestination",
    "ArchiveFailure",
    "ArchiveResult",
    "ArchiveRule",
    "ArchiveSpec",
    "ArchiveSuccess",
    "AttachmentPolicy",
    "ExternalizeMode",
    # profile
    "Profile",
    "load_profile",
]
