"""Builder for matching individual parts of a multipart request body."""

from __future__ import annotations

from copy import deepcopy
from enum import Enum

from .matching import MultiParamMatcher, ParamMatcher, contains, to_multi_param_matcher


class MultipartMatchingType(str, Enum):
    """Whether any part or every part must satisfy the pattern."""

    ANY = "ANY"
    ALL = "ALL"


CONTENT_DISPOSITION = "Content-Disposition"


class MultipartPattern:
    """Headers and body patterns expected on a multipart part.

    Mutators change the pattern in place and return it for chaining.
    """

    def __init__(self, matching_type: MultipartMatchingType = MultipartMatchingType.ANY) -> None:
        self.matching_type = MultipartMatchingType(matching_type)
        self.headers: dict[str, MultiParamMatcher] = {}
        self.body_patterns: list[ParamMatcher] = []

    def with_name(self, name: str) -> "MultipartPattern":
        """Match the part by the ``name`` parameter of its Content-Disposition header."""

        self.headers[CONTENT_DISPOSITION] = to_multi_param_matcher(contains(f'name="{name}"'))
        return self

    def with_matching_type(self, matching_type: MultipartMatchingType | str) -> "MultipartPattern":
        self.matching_type = MultipartMatchingType(matching_type)
        return self

    def with_all_matching_type(self) -> "MultipartPattern":
        return self.with_matching_type(MultipartMatchingType.ALL)

    def with_any_matching_type(self) -> "MultipartPattern":
        return self.with_matching_type(MultipartMatchingType.ANY)

    def with_body_pattern(self, matcher: ParamMatcher) -> "MultipartPattern":
        self.body_patterns.append(matcher)
        return self

    def with_header(self, header: str, matcher: ParamMatcher) -> "MultipartPattern":
        self.headers[header] = to_multi_param_matcher(matcher)
        return self

    def with_headers(self, header: str, matcher: MultiParamMatcher) -> "MultipartPattern":
        self.headers[header] = matcher
        return self

    def clone(self) -> "MultipartPattern":
        return deepcopy(self)

    def __repr__(self) -> str:
        return (
            f"MultipartPattern(matching_type={self.matching_type.value!r}, "
            f"headers={sorted(self.headers)!r}, body_patterns={len(self.body_patterns)})"
        )
