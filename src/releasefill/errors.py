"""Error types raised while filling release templates."""

from __future__ import annotations


class ReleaseFillError(ValueError):
    """Base class for every fatal error raised by releasefill."""


class NoVersionFound(ReleaseFillError):
    pass


class VersionMismatch(ReleaseFillError):
    def __init__(self, filename: str, found: str, expected: str) -> None:
        super().__init__(f"{filename} begins with version {found}, expected version {expected}")
        self.filename = filename
        self.found = found
        self.expected = expected


class EmptyChangeText(ReleaseFillError):
    pass


class MissingModuleVersion(ReleaseFillError):
    pass


class InvalidReleaseDate(ReleaseFillError):
    pass


class BuildToolNotFound(ReleaseFillError):
    pass


class TemplateEvalError(ReleaseFillError):
    """A template failed to compile or render.

    ``lineno`` is 1-based. Until the error is relocated it is relative to
    the template text handed to the evaluator; ``relocate`` turns it into
    a line of the file the template was cut from.
    """

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        filename: str | None = None,
    ) -> None:
        self.message = message
        self.lineno = lineno
        self.filename = filename
        super().__init__(self._render())

    def _render(self) -> str:
        where = self.filename if self.filename is not None else "template"
        if self.lineno is None:
            return self.message if self.filename is None else f"{self.message} in {where}"
        return f"{self.message} at {where} line {self.lineno}"

    def relocate(self, filename: str | None, line_offset: int) -> TemplateEvalError:
        lineno = self.lineno + line_offset if self.lineno is not None else None
        return TemplateEvalError(self.message, lineno=lineno, filename=filename)
