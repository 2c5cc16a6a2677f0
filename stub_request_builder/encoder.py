"""Encode request descriptors into the stub server's JSON wire format."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import structlog

from .matching import MultiParamMatcher, ParamMatcher, ParamMatchingStrategy
from .multipart import MultipartPattern

if TYPE_CHECKING:
    from .request import Request

LOGGER = structlog.get_logger("stub_request_builder")

ABSENT_DOCUMENT = {ParamMatchingStrategy.ABSENT.value: True}

# opaque multipart content deeper than this is reported as unserializable
MAX_NESTING_DEPTH = 256


class EncodingError(RuntimeError):
    """Raised when an assembled request document cannot be serialized to JSON."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"cannot serialize request document at '{path or '/'}': {message}")
        self.path = path


def encode_param(matcher: ParamMatcher) -> dict[str, Any]:
    """Flat form: the strategy key plus any flags as siblings."""

    if matcher.strategy is ParamMatchingStrategy.ABSENT:
        return dict(ABSENT_DOCUMENT)
    document: dict[str, Any] = {matcher.strategy.value: matcher.value}
    document.update(matcher.flags.as_wire())
    return document


def _encode_sub_matcher(matcher: ParamMatcher) -> dict[str, Any]:
    # entries of a nested list never carry flags
    if matcher.strategy is ParamMatchingStrategy.ABSENT:
        return dict(ABSENT_DOCUMENT)
    return {matcher.strategy.value: matcher.value}


def encode_multi_param(matcher: MultiParamMatcher) -> dict[str, Any]:
    """Flat form for a single value, nested-list form otherwise."""

    if matcher.strategy is ParamMatchingStrategy.ABSENT:
        return dict(ABSENT_DOCUMENT)
    document: dict[str, Any]
    if matcher.is_single_param:
        document = {matcher.strategy.value: matcher.first_value}
    else:
        document = {matcher.strategy.value: [_encode_sub_matcher(value) for value in matcher.values]}
    document.update(matcher.flags.as_wire())
    return document


def _encode_multi_params(matchers: Mapping[str, MultiParamMatcher]) -> dict[str, Any]:
    return {name: encode_multi_param(matcher) for name, matcher in matchers.items()}


def encode_multipart_pattern(pattern: MultipartPattern | Mapping[str, Any]) -> Any:
    """Builder patterns are encoded; plain mappings pass through verbatim."""

    if not isinstance(pattern, MultipartPattern):
        return pattern
    document: dict[str, Any] = {"matchingType": pattern.matching_type.value}
    if pattern.headers:
        document["headers"] = _encode_multi_params(pattern.headers)
    if pattern.body_patterns:
        document["bodyPatterns"] = [encode_param(matcher) for matcher in pattern.body_patterns]
    return document


def encode_request(request: "Request") -> dict[str, Any]:
    """Assemble the wire document for a request. Empty sections are omitted."""

    document: dict[str, Any] = {
        "method": request.method,
        request.url_matcher.strategy.value: request.url_matcher.value,
    }
    if request.body_patterns:
        document["bodyPatterns"] = [encode_param(matcher) for matcher in request.body_patterns]
    if request.multipart_patterns:
        document["multipartPatterns"] = [encode_multipart_pattern(pattern) for pattern in request.multipart_patterns]
    if request.headers:
        document["headers"] = _encode_multi_params(request.headers)
    if request.cookies:
        document["cookies"] = {name: encode_param(matcher) for name, matcher in request.cookies.items()}
    if request.query_params:
        document["queryParameters"] = _encode_multi_params(request.query_params)
    if request.basic_auth is not None:
        document["basicAuthCredentials"] = {
            "username": request.basic_auth.username,
            "password": request.basic_auth.password,
        }

    LOGGER.debug(
        "request_encoded",
        method=request.method,
        url_strategy=request.url_matcher.strategy.value,
        headers=len(request.headers),
        query_params=len(request.query_params),
        cookies=len(request.cookies),
        body_patterns=len(request.body_patterns),
        multipart_patterns=len(request.multipart_patterns),
    )
    return document


def marshal_request(request: "Request", *, indent: int | None = None) -> bytes:
    """Serialize a request to UTF-8 JSON bytes."""

    document = encode_request(request)
    try:
        return json.dumps(document, indent=indent, ensure_ascii=False, allow_nan=False).encode("utf-8")
    except RecursionError as exc:
        path = _find_unserializable(document, max_depth=MAX_NESTING_DEPTH)
        raise EncodingError(path or "", "content is nested too deeply") from exc
    except (TypeError, ValueError) as exc:
        raise EncodingError(_find_unserializable(document) or "", str(exc)) from exc


def _is_utf8(text: str) -> bool:
    # lone surrogates survive json.dumps but cannot be encoded
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def _find_unserializable(
    node: Any,
    path: str = "",
    *,
    ancestors: frozenset[int] = frozenset(),
    max_depth: int | None = None,
) -> str | None:
    """Return the slash-separated path of the first value JSON cannot represent.

    A container that appears inside itself is reported at the point it repeats.
    With ``max_depth`` set, the first container nested deeper than that is reported.
    """

    if node is None or isinstance(node, (bool, int)):
        return None
    if isinstance(node, str):
        return None if _is_utf8(node) else path
    if isinstance(node, float):
        # NaN and infinities are not valid JSON
        return None if node == node and node not in (float("inf"), float("-inf")) else path
    if not isinstance(node, (Mapping, list, tuple)):
        return path
    if id(node) in ancestors or (max_depth is not None and len(ancestors) >= max_depth):
        return path

    ancestors = ancestors | {id(node)}
    if isinstance(node, Mapping):
        children = []
        for key, value in node.items():
            child = f"{path}/{key}" if path else str(key)
            if key is not None and not isinstance(key, (str, int, float, bool)):
                return child
            if isinstance(key, str) and not _is_utf8(key):
                return child
            children.append((child, value))
    else:
        children = [(f"{path}/{index}" if path else str(index), value) for index, value in enumerate(node)]

    for child, value in children:
        found = _find_unserializable(value, child, ancestors=ancestors, max_depth=max_depth)
        if found is not None:
            return found
    return None
