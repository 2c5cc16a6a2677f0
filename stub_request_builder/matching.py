"""Matcher value types describing how a stub server compares request fields."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ParamMatchingStrategy(str, Enum):
    """Matching strategies for headers, query params, cookies and bodies.

    The value of each member is the literal wire key.
    """

    EQUAL_TO = "equalTo"
    MATCHES = "matches"
    CONTAINS = "contains"
    EQUAL_TO_XML = "equalToXml"
    EQUAL_TO_JSON = "equalToJson"
    MATCHES_XPATH = "matchesXPath"
    MATCHES_JSON_PATH = "matchesJsonPath"
    ABSENT = "absent"
    DOES_NOT_MATCH = "doesNotMatch"
    HAS_EXACTLY = "hasExactly"
    INCLUDES = "includes"


MULTI_VALUE_STRATEGIES = frozenset({ParamMatchingStrategy.HAS_EXACTLY, ParamMatchingStrategy.INCLUDES})


class URLMatchingStrategy(str, Enum):
    """Matching strategies for the request target."""

    URL_EQUAL_TO = "url"
    URL_PATH_EQUAL_TO = "urlPath"
    URL_PATH_MATCHING = "urlPathPattern"
    URL_MATCHING = "urlPattern"


class EqualFlag(str, Enum):
    """Less strict comparison flags for ``equalToJson``."""

    IGNORE_ARRAY_ORDER = "ignoreArrayOrder"
    IGNORE_EXTRA_ELEMENTS = "ignoreExtraElements"


class MatcherFlags(BaseModel):
    """Optional boolean modifiers emitted next to the strategy key."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    case_insensitive: bool | None = Field(default=None, alias="caseInsensitive")
    ignore_array_order: bool | None = Field(default=None, alias=EqualFlag.IGNORE_ARRAY_ORDER.value)
    ignore_extra_elements: bool | None = Field(default=None, alias=EqualFlag.IGNORE_EXTRA_ELEMENTS.value)

    @classmethod
    def from_equal_flags(cls, flags: tuple[EqualFlag, ...]) -> "MatcherFlags":
        return cls.model_validate({flag.value: True for flag in flags})

    def as_wire(self) -> dict[str, bool]:
        """Return only the flags that were set, keyed by their wire names."""

        return self.model_dump(by_alias=True, exclude_none=True)

    def is_empty(self) -> bool:
        return not self.as_wire()


class URLMatcher(BaseModel):
    """Strategy and value used to match the request URL or path."""

    model_config = ConfigDict(frozen=True)

    strategy: URLMatchingStrategy
    value: str


class ParamMatcher(BaseModel):
    """A single matching strategy applied to one string value."""

    model_config = ConfigDict(frozen=True)

    strategy: ParamMatchingStrategy
    value: str = ""
    flags: MatcherFlags = Field(default_factory=MatcherFlags)


class MultiParamMatcher(BaseModel):
    """Set-oriented matcher for fields carrying several values (headers, query params)."""

    model_config = ConfigDict(frozen=True)

    strategy: ParamMatchingStrategy
    values: tuple[ParamMatcher, ...] = ()
    flags: MatcherFlags = Field(default_factory=MatcherFlags)

    @property
    def is_single_param(self) -> bool:
        return len(self.values) == 1

    @property
    def first_value(self) -> str:
        return self.values[0].value

    @property
    def length(self) -> int:
        return len(self.values)


def url_equal_to(url: str) -> URLMatcher:
    return URLMatcher(strategy=URLMatchingStrategy.URL_EQUAL_TO, value=url)


def url_path_equal_to(path: str) -> URLMatcher:
    return URLMatcher(strategy=URLMatchingStrategy.URL_PATH_EQUAL_TO, value=path)


def url_path_matching(pattern: str) -> URLMatcher:
    return URLMatcher(strategy=URLMatchingStrategy.URL_PATH_MATCHING, value=pattern)


def url_matching(pattern: str) -> URLMatcher:
    return URLMatcher(strategy=URLMatchingStrategy.URL_MATCHING, value=pattern)


def equal_to(value: str) -> ParamMatcher:
    return ParamMatcher(strategy=ParamMatchingStrategy.EQUAL_TO, value=value)


def equal_to_ignore_case(value: str) -> ParamMatcher:
    """``equalTo`` with ``caseInsensitive`` set."""

    return ParamMatcher(
        strategy=ParamMatchingStrategy.EQUAL_TO,
        value=value,
        flags=MatcherFlags(case_insensitive=True),
    )


def matching(pattern: str) -> ParamMatcher:
    return ParamMatcher(strategy=ParamMatchingStrategy.MATCHES, value=pattern)


def contains(value: str) -> ParamMatcher:
    return ParamMatcher(strategy=ParamMatchingStrategy.CONTAINS, value=value)


def equal_to_xml(document: str) -> ParamMatcher:
    return ParamMatcher(strategy=ParamMatchingStrategy.EQUAL_TO_XML, value=document)


def equal_to_json(document: str, *flags: EqualFlag) -> ParamMatcher:
    """``equalToJson`` with optional less strict comparison flags.

    Flags are ``EqualFlag`` members; every member maps to a wire key, so the
    constructor cannot fail. Repeated flags collapse. The document is kept as
    text; it is not parsed or validated here.
    """

    return ParamMatcher(
        strategy=ParamMatchingStrategy.EQUAL_TO_JSON,
        value=document,
        flags=MatcherFlags.from_equal_flags(flags),
    )


def matching_xpath(expression: str) -> ParamMatcher:
    return ParamMatcher(strategy=ParamMatchingStrategy.MATCHES_XPATH, value=expression)


def matching_json_path(expression: str) -> ParamMatcher:
    return ParamMatcher(strategy=ParamMatchingStrategy.MATCHES_JSON_PATH, value=expression)


def not_matching(pattern: str) -> ParamMatcher:
    return ParamMatcher(strategy=ParamMatchingStrategy.DOES_NOT_MATCH, value=pattern)


def absent(*_: Any) -> ParamMatcher:
    """Field must not be present. Arguments are ignored; always encodes as ``{"absent": true}``."""

    return ParamMatcher(strategy=ParamMatchingStrategy.ABSENT)


def including(*matchers: ParamMatcher) -> MultiParamMatcher:
    return MultiParamMatcher(strategy=ParamMatchingStrategy.INCLUDES, values=matchers)


def having_exactly(*matchers: ParamMatcher) -> MultiParamMatcher:
    return MultiParamMatcher(strategy=ParamMatchingStrategy.HAS_EXACTLY, values=matchers)


def to_multi_param_matcher(matcher: ParamMatcher | MultiParamMatcher) -> MultiParamMatcher:
    """Promote a single matcher to a one-element multi matcher with the same strategy and flags."""

    if isinstance(matcher, MultiParamMatcher):
        return matcher
    return MultiParamMatcher(strategy=matcher.strategy, values=(matcher,), flags=matcher.flags)
