"""Named selectors over the files of a build."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Sequence

from releasefill.build import BuildFile

FileFinder = Callable[[Sequence[BuildFile]], list[BuildFile]]


def _matching(pattern: str) -> FileFinder:
    compiled = re.compile(pattern)

    def finder(files: Sequence[BuildFile]) -> list[BuildFile]:
        return [file for file in files if compiled.search(file.name)]

    return finder


FINDERS: dict[str, FileFinder] = {
    ":InstallModules": _matching(r"^lib/.+\.(?:pm|pod)$"),
    ":IncModules": _matching(r"^inc/.+\.pm$"),
    ":ExecFiles": _matching(r"^(?:bin|script)/"),
    ":TestFiles": _matching(r"^t/"),
    ":AllFiles": lambda files: list(files),
    ":NoFiles": lambda files: [],
}


def resolve_finder(name: str) -> FileFinder:
    try:
        return FINDERS[name]
    except KeyError:
        raise ValueError(
            f"Unknown file finder {name!r}; expected one of {', '.join(sorted(FINDERS))}"
        ) from None


def find_files(files: Sequence[BuildFile], finder_names: Iterable[str]) -> list[BuildFile]:
    """Union of the files selected by each finder, in first-seen order."""
    selected: list[BuildFile] = []
    seen: set[str] = set()
    for name in finder_names:
        for file in resolve_finder(name)(files):
            if file.name not in seen:
                seen.add(file.name)
                selected.append(file)
    return selected
