"""Locating template regions in a text buffer and filling them."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

from releasefill.errors import TemplateEvalError
from releasefill.models import RegionKind, TemplateRegion
from releasefill.templating import TemplateEvaluator

# A documentation block starts at "=word" (any word but "cut") and runs to
# the next "=cut" or the end of the buffer.
DOC_BLOCK_PATTERN = re.compile(r"^=(?!cut\b)\w.*?(?:\Z|^=cut\b)", re.MULTILINE | re.DOTALL)

# Only comments holding a complete {{ ... }} pair.
COMMENT_LINE_PATTERN = re.compile(r"^#.*\{\{.*\}\}.*", re.MULTILINE)

REGION_PATTERNS: dict[RegionKind, re.Pattern[str]] = {
    RegionKind.DOC_BLOCK: DOC_BLOCK_PATTERN,
    RegionKind.COMMENT_LINE: COMMENT_LINE_PATTERN,
}


def find_regions(buffer: str, kind: RegionKind) -> list[TemplateRegion]:
    if kind is RegionKind.WHOLE_FILE:
        return [TemplateRegion(start=0, text=buffer, kind=kind)]
    return [
        TemplateRegion(start=match.start(), text=match.group(0), kind=kind)
        for match in REGION_PATTERNS[kind].finditer(buffer)
    ]


def line_offset(buffer: str, start: int) -> int:
    """Number of lines in ``buffer`` that precede offset ``start``."""
    return buffer.count("\n", 0, start)


def fill_region(
    buffer: str,
    region: TemplateRegion,
    variables: Mapping[str, Any],
    evaluator: TemplateEvaluator,
    filename: str | None = None,
) -> str:
    try:
        return evaluator.render(region.text, variables)
    except TemplateEvalError as exc:
        raise exc.relocate(filename, line_offset(buffer, region.start)) from exc


def substitute(
    buffer: str,
    kind: RegionKind,
    variables: Mapping[str, Any],
    evaluator: TemplateEvaluator,
    filename: str | None = None,
) -> str:
    pieces: list[str] = []
    cursor = 0
    for region in find_regions(buffer, kind):
        pieces.append(buffer[cursor : region.start])
        pieces.append(fill_region(buffer, region, variables, evaluator, filename))
        cursor = region.start + len(region.text)
    pieces.append(buffer[cursor:])
    return "".join(pieces)


def substitute_all(
    buffer: str,
    variables: Mapping[str, Any],
    evaluator: TemplateEvaluator,
    kinds: Iterable[RegionKind] = (RegionKind.WHOLE_FILE,),
    filename: str | None = None,
) -> str:
    """Fill every region of each kind, one pass per kind in order.

    Each pass works on the output of the previous one, so reported line
    numbers refer to the buffer as that pass saw it.
    """
    for kind in kinds:
        buffer = substitute(buffer, kind, variables, evaluator, filename)
    return buffer
