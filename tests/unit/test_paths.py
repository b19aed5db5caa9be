from __future__ import annotations

import pytest

from workspace_client.paths import clean_path, parent_directory, path_ancestors, split_path


@pytest.mark.parametrize(
    "path, expected",
    [
        ("/hello/world/", ("/hello", True)),
        ("/hello/world", ("/hello", True)),
        ("/hello/", ("/", True)),
        ("/hello", ("/", True)),
        ("/", ("", False)),
        ("hello/world", ("hello", True)),
        ("hello", (".", True)),
        ("./hello", (".", True)),
        ("../../", ("", False)),
        ("../..", ("", False)),
        ("../", ("", False)),
        ("..", ("", False)),
        ("./", ("", False)),
        (".", ("", False)),
        ("", ("", False)),
    ],
)
def test_parent_directory(path, expected):
    assert parent_directory(path) == expected


def test_parent_directory_rejects_escaping_relative_paths():
    assert parent_directory("../outside.txt") == ("", False)
    assert parent_directory("a/../../b") == ("", False)


def test_path_ancestors_absolute():
    assert path_ancestors("/hello/world/.gitignore") == ["/hello/world", "/hello", "/"]


def test_path_ancestors_relative():
    assert path_ancestors("hello/world/.gitignore") == ["hello/world", "hello", "."]


@pytest.mark.parametrize("path", ["/", ".", "", "..", "../x"])
def test_path_ancestors_empty_for_roots(path):
    assert path_ancestors(path) == []


def _depth(path: str) -> int:
    return len([part for part in path.split("/") if part not in ("", ".")])


@pytest.mark.parametrize("path", ["/a/b/c/d.txt", "a/b/c/d.txt", "./a//b/./c", "/a"])
def test_path_ancestors_shrink_and_start_at_parent(path):
    ancestors = path_ancestors(path)

    assert ancestors[0] == parent_directory(path)[0]
    depths = [_depth(ancestor) for ancestor in ancestors]
    assert all(deeper > shallower for deeper, shallower in zip(depths, depths[1:]))


def test_clean_path_collapses_separators():
    assert clean_path("a//b/./c/") == "a/b/c"
    assert clean_path("//a/b") == "/a/b"
    assert clean_path("") == "."


def test_split_path_keeps_trailing_separator():
    assert split_path("src/components/.gitignore") == ("src/components/", ".gitignore")
    assert split_path(".gitignore") == ("", ".gitignore")
