from __future__ import annotations

import pytest

from releasefill.build import BuildFile
from releasefill.finders import find_files, resolve_finder

FILES = [
    BuildFile(name="Changes", content=""),
    BuildFile(name="README", content=""),
    BuildFile(name="bin/foo", content=""),
    BuildFile(name="inc/Helper.pm", content=""),
    BuildFile(name="lib/Foo.pm", content=""),
    BuildFile(name="lib/Foo/Manual.pod", content=""),
    BuildFile(name="lib/Foo/data.txt", content=""),
    BuildFile(name="t/basic.t", content=""),
]


def _names(files: list[BuildFile]) -> list[str]:
    return [file.name for file in files]


def test_install_modules_finder() -> None:
    assert _names(find_files(FILES, [":InstallModules"])) == [
        "lib/Foo.pm",
        "lib/Foo/Manual.pod",
    ]


def test_other_named_finders() -> None:
    assert _names(resolve_finder(":IncModules")(FILES)) == ["inc/Helper.pm"]
    assert _names(resolve_finder(":ExecFiles")(FILES)) == ["bin/foo"]
    assert _names(resolve_finder(":TestFiles")(FILES)) == ["t/basic.t"]
    assert resolve_finder(":NoFiles")(FILES) == []
    assert len(resolve_finder(":AllFiles")(FILES)) == len(FILES)


def test_finders_are_unioned_in_order_without_duplicates() -> None:
    selected = find_files(FILES, [":ExecFiles", ":InstallModules", ":AllFiles"])
    assert _names(selected)[:3] == ["bin/foo", "lib/Foo.pm", "lib/Foo/Manual.pod"]
    assert len(selected) == len(FILES)


def test_unknown_finder() -> None:
    with pytest.raises(ValueError, match="Unknown file finder ':Bogus'"):
        find_files(FILES, [":Bogus"])
