"""Load request definitions written in the stub server's wire shape."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .matching import (
    MULTI_VALUE_STRATEGIES,
    MatcherFlags,
    MultiParamMatcher,
    ParamMatcher,
    ParamMatchingStrategy,
    URLMatcher,
    URLMatchingStrategy,
    absent,
    to_multi_param_matcher,
)
from .request import Request

LOGGER = structlog.get_logger("stub_request_builder")

FLAG_KEYS = frozenset(field.alias for field in MatcherFlags.model_fields.values() if field.alias)


class DefinitionError(ValueError):
    """Raised when a request definition cannot be turned into a Request."""


class RequestDefinition(BaseModel):
    """Top-level shape of a definition file; matcher entries are parsed separately."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    method: str
    url: str | None = None
    url_path: str | None = Field(default=None, alias="urlPath")
    url_path_pattern: str | None = Field(default=None, alias="urlPathPattern")
    url_pattern: str | None = Field(default=None, alias="urlPattern")
    headers: dict[str, dict[str, Any]] = Field(default_factory=dict)
    query_parameters: dict[str, dict[str, Any]] = Field(default_factory=dict, alias="queryParameters")
    cookies: dict[str, dict[str, Any]] = Field(default_factory=dict)
    body_patterns: list[dict[str, Any]] = Field(default_factory=list, alias="bodyPatterns")
    multipart_patterns: list[dict[str, Any]] = Field(default_factory=list, alias="multipartPatterns")
    basic_auth_credentials: dict[str, str] | None = Field(default=None, alias="basicAuthCredentials")

    def url_matcher(self) -> URLMatcher:
        candidates = {
            URLMatchingStrategy.URL_EQUAL_TO: self.url,
            URLMatchingStrategy.URL_PATH_EQUAL_TO: self.url_path,
            URLMatchingStrategy.URL_PATH_MATCHING: self.url_path_pattern,
            URLMatchingStrategy.URL_MATCHING: self.url_pattern,
        }
        present = [(strategy, value) for strategy, value in candidates.items() if value is not None]
        if len(present) != 1:
            keys = ", ".join(strategy.value for strategy in URLMatchingStrategy)
            raise DefinitionError(f"Definition must contain exactly one of: {keys}")
        strategy, value = present[0]
        return URLMatcher(strategy=strategy, value=value)


def load_request(path: Path) -> Request:
    """Load a YAML or JSON definition file into a Request."""

    try:
        text = path.read_text(encoding="utf-8")
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as exc:
        raise DefinitionError(f"Definition file {path} could not be parsed: {exc}") from exc
    if not isinstance(data, dict):
        raise DefinitionError(f"Definition file {path} must contain a mapping")
    request = request_from_definition(data)
    LOGGER.info("definition_loaded", path=str(path), method=request.method)
    return request


def request_from_definition(data: Mapping[str, Any]) -> Request:
    """Build a Request from a mapping shaped like the encoded wire document."""

    try:
        definition = RequestDefinition.model_validate(data)
    except ValidationError as exc:
        raise DefinitionError(f"Invalid request definition: {exc}") from exc

    request = Request(definition.method, definition.url_matcher())
    for index, entry in enumerate(definition.body_patterns):
        request.with_body_pattern(_parse_param(entry, f"bodyPatterns/{index}"))
    for pattern in definition.multipart_patterns:
        request.with_multipart_pattern(pattern)
    for name, entry in definition.headers.items():
        request.with_headers(name, _parse_multi_param(entry, f"headers/{name}"))
    for name, entry in definition.cookies.items():
        request.with_cookie(name, _parse_param(entry, f"cookies/{name}"))
    for name, entry in definition.query_parameters.items():
        request.with_query_params(name, _parse_multi_param(entry, f"queryParameters/{name}"))
    if definition.basic_auth_credentials is not None:
        credentials = definition.basic_auth_credentials
        if "username" not in credentials or "password" not in credentials:
            raise DefinitionError("basicAuthCredentials requires username and password")
        request.with_basic_auth(credentials["username"], credentials["password"])
    return request


def _split_entry(entry: Mapping[str, Any], where: str) -> tuple[ParamMatchingStrategy, Any, MatcherFlags]:
    flags = {key: value for key, value in entry.items() if key in FLAG_KEYS}
    strategy_keys = [key for key in entry if key not in FLAG_KEYS]
    if len(strategy_keys) != 1:
        raise DefinitionError(f"{where}: expected exactly one matching strategy, got {strategy_keys or 'none'}")
    key = strategy_keys[0]
    try:
        strategy = ParamMatchingStrategy(key)
    except ValueError as exc:
        raise DefinitionError(f"{where}: unknown matching strategy '{key}'") from exc
    try:
        parsed_flags = MatcherFlags.model_validate(flags)
    except ValidationError as exc:
        raise DefinitionError(f"{where}: invalid flags: {exc}") from exc
    return strategy, entry[key], parsed_flags


def _as_text(value: Any) -> str:
    # structured content (e.g. an equalToJson document) is carried as text
    if isinstance(value, str):
        return value
    return json.dumps(value)


def _parse_param(entry: Mapping[str, Any], where: str) -> ParamMatcher:
    strategy, value, flags = _split_entry(entry, where)
    if strategy is ParamMatchingStrategy.ABSENT:
        return absent()
    if strategy in MULTI_VALUE_STRATEGIES:
        raise DefinitionError(f"{where}: '{strategy.value}' is only allowed for headers and query parameters")
    return ParamMatcher(strategy=strategy, value=_as_text(value), flags=flags)


def _parse_multi_param(entry: Mapping[str, Any], where: str) -> MultiParamMatcher:
    strategy, value, flags = _split_entry(entry, where)
    if strategy not in MULTI_VALUE_STRATEGIES:
        return to_multi_param_matcher(_parse_param(entry, where))
    if isinstance(value, list):
        values = tuple(_parse_param(sub, f"{where}/{i}") for i, sub in enumerate(value) if isinstance(sub, Mapping))
        if len(values) != len(value):
            raise DefinitionError(f"{where}: '{strategy.value}' entries must be matcher mappings")
    else:
        # flat single-value form carries no inner strategy
        values = (ParamMatcher(strategy=ParamMatchingStrategy.EQUAL_TO, value=_as_text(value)),)
    return MultiParamMatcher(strategy=strategy, values=values, flags=flags)
