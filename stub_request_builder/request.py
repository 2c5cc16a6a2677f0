"""Request descriptor: the part of a stub rule that matches the incoming HTTP request."""

from __future__ import annotations

from collections.abc import Mapping
from copy import deepcopy
from typing import Any

from pydantic import BaseModel, ConfigDict

from .encoder import encode_request, marshal_request
from .matching import MultiParamMatcher, ParamMatcher, URLMatcher, to_multi_param_matcher
from .multipart import MultipartPattern


class BasicAuthCredentials(BaseModel):
    """Username/password pair the request must carry."""

    model_config = ConfigDict(frozen=True)

    username: str
    password: str


class Request:
    """Fluent builder for request matching rules.

    Every ``with_*`` call mutates this instance and returns it. Use :meth:`clone`
    before deriving variants from a shared base request.
    """

    def __init__(self, method: str, url_matcher: URLMatcher) -> None:
        self.method = method
        self.url_matcher = url_matcher
        self.headers: dict[str, MultiParamMatcher] = {}
        self.query_params: dict[str, MultiParamMatcher] = {}
        self.cookies: dict[str, ParamMatcher] = {}
        self.body_patterns: list[ParamMatcher] = []
        self.multipart_patterns: list[MultipartPattern | Mapping[str, Any]] = []
        self.basic_auth: BasicAuthCredentials | None = None

    def with_method(self, method: str) -> "Request":
        self.method = method
        return self

    def with_url_matched(self, url_matcher: URLMatcher) -> "Request":
        self.url_matcher = url_matcher
        return self

    def with_body_pattern(self, matcher: ParamMatcher) -> "Request":
        self.body_patterns.append(matcher)
        return self

    def with_multipart_pattern(self, pattern: MultipartPattern | Mapping[str, Any]) -> "Request":
        self.multipart_patterns.append(pattern)
        return self

    def with_basic_auth(self, username: str, password: str) -> "Request":
        """Set credentials, replacing any previously set pair."""

        self.basic_auth = BasicAuthCredentials(username=username, password=password)
        return self

    def with_query_param(self, param: str, matcher: ParamMatcher) -> "Request":
        self.query_params[param] = to_multi_param_matcher(matcher)
        return self

    def with_query_params(self, param: str, matcher: MultiParamMatcher) -> "Request":
        self.query_params[param] = matcher
        return self

    def with_header(self, header: str, matcher: ParamMatcher) -> "Request":
        self.headers[header] = to_multi_param_matcher(matcher)
        return self

    def with_headers(self, header: str, matcher: MultiParamMatcher) -> "Request":
        self.headers[header] = matcher
        return self

    def with_cookie(self, cookie: str, matcher: ParamMatcher) -> "Request":
        self.cookies[cookie] = matcher
        return self

    def clone(self) -> "Request":
        """Independent copy; later mutations of either side are not shared."""

        return deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        return encode_request(self)

    def to_json(self, *, indent: int | None = None) -> bytes:
        return marshal_request(self, indent=indent)

    def __repr__(self) -> str:
        return f"Request(method={self.method!r}, {self.url_matcher.strategy.value}={self.url_matcher.value!r})"


def new_request(method: str, url_matcher: URLMatcher) -> Request:
    """Minimal request: method plus URL matcher."""

    return Request(method, url_matcher)
