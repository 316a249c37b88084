from __future__ import annotations

import pytest

from releasefill.errors import TemplateEvalError
from releasefill.templating import JinjaEvaluator, newline_sequence


def test_render_substitutes_variables_and_keeps_trailing_newline() -> None:
    evaluator = JinjaEvaluator()
    assert evaluator.render("Version {{ version }}\n", {"version": "1.02"}) == "Version 1.02\n"


def test_render_without_markers_is_unchanged() -> None:
    text = "=head1 NAME\n\nFoo - plain text\n\n=cut"
    assert JinjaEvaluator().render(text, {}) == text


def test_render_calls_methods() -> None:
    class Helper:
        def shout(self, word: str) -> str:
            return word.upper()

    assert JinjaEvaluator().render("{{ t.shout('hi') }}", {"t": Helper()}) == "HI"


def test_undefined_variable_reports_template_line() -> None:
    with pytest.raises(TemplateEvalError) as exc_info:
        JinjaEvaluator().render("line one\n{{ missing }}\n", {})
    assert exc_info.value.lineno == 2
    assert "missing" in str(exc_info.value)
    assert "at template line 2" in str(exc_info.value)


def test_syntax_error_reports_template_line() -> None:
    with pytest.raises(TemplateEvalError) as exc_info:
        JinjaEvaluator().render("fine\n{{ version + }}\n", {"version": "1"})
    assert exc_info.value.lineno == 2


def test_exception_raised_by_helper_is_wrapped() -> None:
    class Helper:
        def fail(self) -> str:
            raise RuntimeError("helper exploded")

    with pytest.raises(TemplateEvalError, match="RuntimeError: helper exploded") as exc_info:
        JinjaEvaluator().render("a\nb\n{{ t.fail() }}", {"t": Helper()})
    assert exc_info.value.lineno == 3


def test_relocate_adds_offset_and_filename() -> None:
    error = TemplateEvalError("boom", lineno=3)
    moved = error.relocate("lib/Foo.pm", 9)
    assert moved.lineno == 12
    assert moved.filename == "lib/Foo.pm"
    assert str(moved) == "boom at lib/Foo.pm line 12"


def test_relocate_without_line_keeps_message() -> None:
    moved = TemplateEvalError("boom").relocate("README", 4)
    assert moved.lineno is None
    assert str(moved) == "boom in README"


def test_block_and_comment_delimiters_are_plain_text() -> None:
    text = "  $s =~ s{#}{}g;  # {% not a tag %} {# nor a comment\nversion {{ version }}\n"
    assert JinjaEvaluator().render(text, {"version": "1.02"}) == (
        "  $s =~ s{#}{}g;  # {% not a tag %} {# nor a comment\nversion 1.02\n"
    )


@pytest.mark.parametrize("newline", ["\r\n", "\r", "\n"])
def test_render_keeps_line_endings(newline: str) -> None:
    text = f"Foo version {{{{ version }}}}{newline}{newline}INSTALL{newline}"
    expected = f"Foo version 1.02{newline}{newline}INSTALL{newline}"
    assert JinjaEvaluator().render(text, {"version": "1.02"}) == expected


def test_newline_sequence_prefers_crlf() -> None:
    assert newline_sequence("a\r\nb\n") == "\r\n"
    assert newline_sequence("a\rb") == "\r"
    assert newline_sequence("no terminator") == "\n"
