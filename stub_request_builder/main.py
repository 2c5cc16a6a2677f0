"""CLI entrypoint rendering request definitions into stub server JSON."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from .encoder import EncodingError
from .loader import DefinitionError, load_request
from .logging_utils import LOG_FORMAT_ENV_VAR, LogFormat, configure_logging

app = typer.Typer(help="Render request matching definitions into stub server JSON.")


@app.command()
def render(
    definition: Path = typer.Option(
        ...,
        exists=True,
        readable=True,
        dir_okay=False,
        help="YAML/JSON request definition using stub server wire keys.",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the rendered JSON to this file instead of stdout.",
    ),
    indent: Optional[int] = typer.Option(
        2,
        help="Indentation for the rendered JSON; 0 renders a single line.",
    ),
    log_level: str = typer.Option(
        "INFO",
        help="Log level for diagnostic events (written to stderr).",
    ),
    log_format: LogFormat = typer.Option(
        LogFormat.CONSOLE,
        case_sensitive=False,
        envvar=LOG_FORMAT_ENV_VAR,
        help="Log format for diagnostic events.",
    ),
) -> None:
    """Render a request definition into the JSON document sent to the stub server."""

    logger = configure_logging(log_level, log_format)

    try:
        request = load_request(definition)
        payload = request.to_json(indent=indent or None)
    except DefinitionError as exc:
        raise typer.BadParameter(str(exc), param_hint="--definition") from exc
    except EncodingError as exc:
        logger.error("request_render_failed", path=exc.path, definition=str(definition))
        raise typer.Exit(code=1) from exc

    text = payload.decode("utf-8")
    if output is None:
        typer.echo(text)
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text + "\n", encoding="utf-8")
        typer.secho(f"Request rendered -> {output}", fg=typer.colors.GREEN, err=True)
    logger.info("request_rendered", definition=str(definition), output=str(output) if output else "stdout")


def run() -> None:
    """Console_scripts hook."""

    app()


if __name__ == "__main__":  # pragma: no cover
    run()
