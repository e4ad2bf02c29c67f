import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from modrt import (  # noqa: E402
    dirname,
    join,
    normalize,
    split_package_id,
    split_package_name,
    without_extension,
)


@pytest.mark.parametrize(
    "parts, expected",
    [
        (["", "a", "..", "b"], "/b"),
        (["", "a", "."], "/a"),
        ([""], "/"),
        (["", "."], "/"),
        (["", "a", "b", ""], "/a/b"),
        (["", ""], "/"),
        (["", "a", "b", "..", "..", "c"], "/c"),
    ],
)
def test_normalize_collapses_dot_segments(parts, expected):
    assert normalize(parts) == expected


def test_normalize_above_root_is_unanchored():
    # ".." past the leading empty segment drops the anchor instead of failing
    assert normalize(["", "..", "a", "b"]) == "a/b"
    assert normalize(["", "..", ".."]) == ""


def test_normalize_does_not_mutate_input():
    parts = ["", "a", "..", "b"]
    normalize(parts)
    assert parts == ["", "a", "..", "b"]


def test_join_handles_root_and_relative_targets():
    assert join("/", "foo") == "/foo"
    assert join("/pkg$1.0.0/a", "./b") == "/pkg$1.0.0/a/b"
    assert join("/pkg$1.0.0/a", "../c/d") == "/pkg$1.0.0/c/d"
    assert join("", "./x") == "/x"
    assert join("/pkg$1.0.0", "lib/index") == "/pkg$1.0.0/lib/index"


def test_without_extension():
    assert without_extension("/foo/bar.js") == "/foo/bar"
    assert without_extension("/foo/bar.min.js") == "/foo/bar.min"
    assert without_extension("/foo/bar") is None
    assert without_extension("/foo.d/bar") is None


def test_dirname():
    assert dirname("/pkg$1.0.0/a/x") == "/pkg$1.0.0/a"
    assert dirname("/index") == ""
    assert dirname("/") == ""


def test_split_package_id_plain_and_scoped():
    assert split_package_id("/my-package$1.0.0/foo/bar") == ("my-package$1.0.0", "/foo/bar")
    assert split_package_id("/my-package$1.0.0") == ("my-package$1.0.0", "")
    assert split_package_id("/my-package$1.0.0/") == ("my-package$1.0.0", "/")
    assert split_package_id("/@scope/name$1.0.0/sub") == ("@scope/name$1.0.0", "/sub")
    assert split_package_id("/@scope/name$1.0.0") == ("@scope/name$1.0.0", "")


def test_split_package_name_plain_and_scoped():
    assert split_package_name("foo") == ("foo", "")
    assert split_package_name("foo/lib/x") == ("foo", "/lib/x")
    assert split_package_name("@scope/foo") == ("@scope/foo", "")
    assert split_package_name("@scope/foo/x") == ("@scope/foo", "/x")
