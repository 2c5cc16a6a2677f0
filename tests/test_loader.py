import json
from pathlib import Path

import pytest

from stub_request_builder.loader import DefinitionError, load_request, request_from_definition
from stub_request_builder.matching import ParamMatchingStrategy, URLMatchingStrategy


def test_load_yaml_definition(testdata: Path) -> None:
    request = load_request(testdata / "orders.yaml")

    assert request.method == "POST"
    assert request.url_matcher.strategy is URLMatchingStrategy.URL_PATH_MATCHING
    assert request.to_dict() == {
        "method": "POST",
        "urlPathPattern": "/orders/[0-9]+",
        "bodyPatterns": [
            {"equalToJson": '{"total": 10}', "ignoreExtraElements": True},
            {"matchesJsonPath": "$.items[?(@.qty > 1)]"},
        ],
        "headers": {
            "Content-Type": {"equalTo": "application/json", "caseInsensitive": True},
            "X-Ids": {"includes": [{"equalTo": "a"}, {"matches": "b.*"}]},
            "X-Debug": {"absent": True},
        },
        "cookies": {"session": {"doesNotMatch": "expired-.*"}},
        "queryParameters": {"id": {"equalTo": "42"}},
        "basicAuthCredentials": {"username": "user", "password": "secret"},
    }


def test_load_json_definition_reproduces_golden_document(testdata: Path, tmp_path: Path) -> None:
    golden = json.loads((testdata / "full_request.json").read_text(encoding="utf-8"))
    source = tmp_path / "request.json"
    source.write_text(json.dumps(golden), encoding="utf-8")

    assert load_request(source).to_dict() == golden


def test_multi_value_entries_keep_flags_and_order() -> None:
    request = request_from_definition(
        {
            "method": "GET",
            "url": "/x",
            "queryParameters": {
                "tag": {"hasExactly": [{"equalTo": "b"}, {"contains": "a"}], "caseInsensitive": True},
            },
        }
    )

    matcher = request.query_params["tag"]
    assert matcher.strategy is ParamMatchingStrategy.HAS_EXACTLY
    assert [value.value for value in matcher.values] == ["b", "a"]
    assert matcher.flags.case_insensitive is True


@pytest.mark.parametrize(
    "definition",
    [
        {"url": "/x"},
        {"method": "GET"},
        {"method": "GET", "url": "/x", "urlPath": "/x"},
        {"method": "GET", "url": "/x", "unknown": 1},
        {"method": "GET", "url": "/x", "headers": {"A": {"startsWith": "a"}}},
        {"method": "GET", "url": "/x", "headers": {"A": {"equalTo": "a", "contains": "b"}}},
        {"method": "GET", "url": "/x", "headers": {"A": {"caseInsensitive": True}}},
        {"method": "GET", "url": "/x", "cookies": {"c": {"includes": [{"equalTo": "a"}]}}},
        {"method": "GET", "url": "/x", "headers": {"A": {"includes": ["a"]}}},
        {"method": "GET", "url": "/x", "basicAuthCredentials": {"username": "u"}},
    ],
)
def test_malformed_definitions_are_rejected(definition: dict) -> None:
    with pytest.raises(DefinitionError):
        request_from_definition(definition)


def test_non_mapping_file_is_rejected(tmp_path: Path) -> None:
    source = tmp_path / "list.yaml"
    source.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(DefinitionError, match="must contain a mapping"):
        load_request(source)


def test_unparseable_file_is_rejected(tmp_path: Path) -> None:
    source = tmp_path / "broken.json"
    source.write_text("{not json", encoding="utf-8")

    with pytest.raises(DefinitionError, match="could not be parsed"):
        load_request(source)


def test_non_utf8_file_is_rejected(tmp_path: Path) -> None:
    source = tmp_path / "latin1.yaml"
    source.write_bytes(b"method: GET\nurl: /\xff\xfe\n")

    with pytest.raises(DefinitionError, match="could not be parsed"):
        load_request(source)
