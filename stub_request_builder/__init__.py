"""Fluent builders and JSON encoding for stub server request matching rules."""

from .encoder import EncodingError, encode_request, marshal_request
from .matching import (
    EqualFlag,
    MatcherFlags,
    MultiParamMatcher,
    ParamMatcher,
    ParamMatchingStrategy,
    URLMatcher,
    URLMatchingStrategy,
    absent,
    contains,
    equal_to,
    equal_to_ignore_case,
    equal_to_json,
    equal_to_xml,
    having_exactly,
    including,
    matching,
    matching_json_path,
    matching_xpath,
    not_matching,
    to_multi_param_matcher,
    url_equal_to,
    url_matching,
    url_path_equal_to,
    url_path_matching,
)
from .multipart import MultipartMatchingType, MultipartPattern
from .request import BasicAuthCredentials, Request, new_request

__all__ = [
    "BasicAuthCredentials",
    "EncodingError",
    "EqualFlag",
    "MatcherFlags",
    "MultiParamMatcher",
    "MultipartMatchingType",
    "MultipartPattern",
    "ParamMatcher",
    "ParamMatchingStrategy",
    "Request",
    "URLMatcher",
    "URLMatchingStrategy",
    "absent",
    "contains",
    "encode_request",
    "equal_to",
    "equal_to_ignore_case",
    "equal_to_json",
    "equal_to_xml",
    "having_exactly",
    "including",
    "marshal_request",
    "matching",
    "matching_json_path",
    "matching_xpath",
    "new_request",
    "not_matching",
    "to_multi_param_matcher",
    "url_equal_to",
    "url_matching",
    "url_path_equal_to",
    "url_path_matching",
]

__version__ = "0.1.0"
