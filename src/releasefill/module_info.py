"""Reading the package name and version declared by a module."""

from __future__ import annotations

import re
from collections.abc import Callable

from releasefill.models import ModuleInfo

PACKAGE_PATTERN = re.compile(
    r"^\s*package\s+([A-Za-z_]\w*(?:::\w+)*)(?:\s+(v?\d[\d._]*))?\s*[;{]",
    re.MULTILINE,
)
VERSION_PATTERN = re.compile(
    r"""^\s*(?:our\s+)?\$(?:[\w:]*::)?VERSION\s*=\s*"""
    r"""(?:(?P<call>qv|version->declare|version->parse)\s*\(\s*)?"""
    r"""(?:(?P<quote>['"])(?P<quoted>.*?)(?P=quote)|(?P<bare>v?\d[\d._]*))""",
    re.MULTILINE,
)
DOC_BLOCK_PATTERN = re.compile(r"^=(?!cut\b)\w.*?(?:\Z|^=cut\b[^\n]*)", re.MULTILINE | re.DOTALL)
END_MARKER_PATTERN = re.compile(r"^__(?:END|DATA)__\b.*\Z", re.MULTILINE | re.DOTALL)

DOTTED_CONSTRUCTORS = ("qv", "version->declare")

ModuleIntrospector = Callable[[str], ModuleInfo]


def _numeric_literal(literal: str) -> str:
    # Perl stringifies a decimal literal without leading or trailing zeros;
    # v-strings and dotted literals are left alone.
    if literal.startswith("v") or literal.count(".") >= 2:
        return literal
    integer, _, fraction = literal.replace("_", "").partition(".")
    integer = integer.lstrip("0") or "0"
    fraction = fraction.rstrip("0")
    return f"{integer}.{fraction}" if fraction else integer


def _assigned_version(match: re.Match[str]) -> str:
    if match.group("quote"):
        version = match.group("quoted")
    else:
        version = _numeric_literal(match.group("bare"))
    if match.group("call") in DOTTED_CONSTRUCTORS and version and not version.startswith("v"):
        version = f"v{version}"
    return version


def read_module_info(source: str) -> ModuleInfo:
    """Return the first package name and version declared in ``source``.

    ``$VERSION`` assignments win over a version given on the ``package``
    line.  Documentation blocks and anything after ``__END__`` are ignored
    so that examples in them are never mistaken for declarations.

    Only literal assignments are understood: a quoted string, a bare
    number (``1.00`` reads as ``1``, as Perl would print it), or one of
    those wrapped in ``qv(...)``, ``version->declare(...)`` or
    ``version->parse(...)``.  The first two always yield a dotted
    ``v``-prefixed version.  Computed versions such as
    ``sprintf(...)`` or ``eval $VERSION`` are not evaluated and count as
    no version at all.
    """
    code = END_MARKER_PATTERN.sub("", DOC_BLOCK_PATTERN.sub("", source))

    package = PACKAGE_PATTERN.search(code)
    assignment = VERSION_PATTERN.search(code)

    version: str | None = None
    if assignment is not None:
        version = _assigned_version(assignment)
    elif package is not None:
        version = package.group(2)

    return ModuleInfo(
        name=package.group(1) if package else None,
        version=version or None,
    )
