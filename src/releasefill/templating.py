"""Template evaluation backed by Jinja2."""

from __future__ import annotations

import traceback
from collections.abc import Mapping
from typing import Any, Protocol

from jinja2 import Environment, StrictUndefined, TemplateSyntaxError

from releasefill.errors import TemplateEvalError

# Jinja2 reports frames of templates compiled from a string under this name.
TEMPLATE_FRAME_FILENAME = "<template>"

# Block and comment tags are moved to sequences that never occur in source
# text, leaving {{ ... }} as the only active syntax.
DISABLED_TAGS = {
    "block_start_string": "\x00{%",
    "block_end_string": "%}\x00",
    "comment_start_string": "\x00{#",
    "comment_end_string": "#}\x00",
}
NEWLINE_SEQUENCES = ("\r\n", "\r", "\n")


class TemplateEvaluator(Protocol):
    def render(self, text: str, variables: Mapping[str, Any]) -> str: ...


def _template_lineno(exc: BaseException) -> int | None:
    lineno: int | None = None
    for frame in traceback.extract_tb(exc.__traceback__):
        if frame.filename == TEMPLATE_FRAME_FILENAME:
            lineno = frame.lineno
    return lineno


def newline_sequence(text: str) -> str:
    """Line terminator used by ``text``: CRLF if present, else CR, else LF."""
    for sequence in NEWLINE_SEQUENCES:
        if sequence in text:
            return sequence
    return "\n"


class JinjaEvaluator:
    """Renders ``{{ ... }}`` expressions with Jinja2.

    Undefined variables are errors, and the text is otherwise returned
    byte for byte, line endings and trailing newline included.
    """

    def __init__(self, environment: Environment | None = None) -> None:
        self._environment = environment or Environment(
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            autoescape=False,
            **DISABLED_TAGS,
        )
        self._by_newline: dict[str, Environment] = {
            self._environment.newline_sequence: self._environment,
        }

    def _environment_for(self, text: str) -> Environment:
        sequence = newline_sequence(text)
        if sequence not in self._by_newline:
            self._by_newline[sequence] = self._environment.overlay(newline_sequence=sequence)
        return self._by_newline[sequence]

    def render(self, text: str, variables: Mapping[str, Any]) -> str:
        try:
            template = self._environment_for(text).from_string(text)
        except TemplateSyntaxError as exc:
            raise TemplateEvalError(exc.message or str(exc), lineno=exc.lineno) from exc

        try:
            return template.render(dict(variables))
        except TemplateEvalError:
            raise
        except Exception as exc:
            raise TemplateEvalError(
                f"{type(exc).__name__}: {exc}",
                lineno=_template_lineno(exc),
            ) from exc
