import pytest

from stub_request_builder.encoder import encode_multipart_pattern
from stub_request_builder.matching import contains, equal_to, equal_to_json, having_exactly
from stub_request_builder.multipart import MultipartMatchingType, MultipartPattern


def test_default_pattern_only_has_matching_type() -> None:
    assert encode_multipart_pattern(MultipartPattern()) == {"matchingType": "ANY"}


def test_with_name_matches_content_disposition() -> None:
    pattern = MultipartPattern().with_name("avatar")

    assert encode_multipart_pattern(pattern)["headers"] == {
        "Content-Disposition": {"contains": 'name="avatar"'},
    }


def test_matching_type_switches() -> None:
    pattern = MultipartPattern()

    assert pattern.with_all_matching_type().matching_type is MultipartMatchingType.ALL
    assert pattern.with_any_matching_type().matching_type is MultipartMatchingType.ANY
    assert pattern.with_matching_type("ALL").matching_type is MultipartMatchingType.ALL


def test_unknown_matching_type_is_rejected() -> None:
    with pytest.raises(ValueError):
        MultipartPattern().with_matching_type("SOME")


def test_headers_and_body_patterns() -> None:
    pattern = (
        MultipartPattern()
        .with_header("Content-Type", contains("image/"))
        .with_headers("X-Part", having_exactly(equal_to("1"), equal_to("2")))
        .with_body_pattern(equal_to_json("{}"))
        .with_body_pattern(contains("PNG"))
    )

    assert encode_multipart_pattern(pattern) == {
        "matchingType": "ANY",
        "headers": {
            "Content-Type": {"contains": "image/"},
            "X-Part": {"hasExactly": [{"equalTo": "1"}, {"equalTo": "2"}]},
        },
        "bodyPatterns": [{"equalToJson": "{}"}, {"contains": "PNG"}],
    }


def test_clone_is_independent() -> None:
    base = MultipartPattern().with_name("file")
    variant = base.clone().with_body_pattern(contains("x"))

    assert base.body_patterns == []
    assert len(variant.body_patterns) == 1
