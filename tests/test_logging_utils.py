import pytest
import structlog

from stub_request_builder.logging_utils import LogFormat, RequestEventRenderer, configure_logging


def test_renderer_includes_event_and_sorted_fields() -> None:
    rendered = RequestEventRenderer()(
        None,
        "info",
        {"timestamp": "12:00:00", "level": "info", "event": "request_encoded", "headers": 2, "cookies": 0},
    )

    assert "request_encoded" in rendered
    assert rendered.index("cookies=") < rendered.index("headers=")
    assert "12:00:00" in rendered


def test_renderer_highlights_error_path() -> None:
    event = {"level": "error", "event": "request_render_failed", "path": "multipartPatterns/0/since"}

    rendered = RequestEventRenderer()(None, "error", event)

    assert "multipartPatterns/0/since" in rendered
    # bold red ANSI sequence wraps the highlighted value
    assert "\x1b[1;31mmultipartPatterns/0/since" in rendered


def test_renderer_can_be_reused() -> None:
    renderer = RequestEventRenderer()

    first = renderer(None, "info", {"event": "one"})
    second = renderer(None, "info", {"event": "two"})

    assert "one" in first and "two" not in first
    assert "two" in second


@pytest.mark.parametrize("log_format", list(LogFormat))
def test_configure_logging_returns_bound_logger(log_format: LogFormat) -> None:
    logger = configure_logging("debug", log_format)

    logger.debug("configured", format=log_format.value)
    assert structlog.is_configured()


def test_configure_logging_accepts_format_values() -> None:
    configure_logging("info", "json")  # type: ignore[arg-type]

    assert structlog.is_configured()
