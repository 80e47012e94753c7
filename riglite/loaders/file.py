"""Loading files from disk by glob pattern or directory.

A ``FileLoader`` is a single-use, lazy stream of items. Failures do not stop
the stream: a failed item is yielded as a ``FileLoaderError`` instance, and
``ignore_errors`` drops those.
"""

from __future__ import annotations

import glob
import os
from pathlib import Path
from typing import Any, Callable, Generic, Iterable, Iterator, TypeVar

T = TypeVar("T")

_ERROR_WILDCARDS = "wildcards are either regular `*` or recursive `**`"
_ERROR_RECURSIVE_WILDCARDS = "recursive wildcards must form a single path component"
_ERROR_INVALID_RANGE = "invalid range pattern"


class FileLoaderError(Exception):
    """A failure while matching, listing or reading files."""


def _is_separator(char: str) -> bool:
    return char == "/" or char == os.sep or (os.altsep is not None and char == os.altsep)


def _pattern_error(pos: int, message: str) -> FileLoaderError:
    return FileLoaderError(f"Pattern error: Pattern syntax error near position {pos}: {message}")


def _check_pattern(pattern: str) -> None:
    """Reject malformed wildcards and unclosed character ranges."""
    chars = pattern
    i = 0
    while i < len(chars):
        char = chars[i]
        if char == "*":
            start = i
            while i < len(chars) and chars[i] == "*":
                i += 1
            count = i - start
            if count > 2:
                raise _pattern_error(start + 2, _ERROR_WILDCARDS)
            if count == 2:
                if start != 0 and not _is_separator(chars[start - 1]):
                    raise _pattern_error(start - 1, _ERROR_RECURSIVE_WILDCARDS)
                if i < len(chars) and not _is_separator(chars[i]):
                    raise _pattern_error(i, _ERROR_RECURSIVE_WILDCARDS)
            continue
        if char == "[":
            if i + 4 <= len(chars) and chars[i + 1] == "!":
                close = chars.find("]", i + 3)
            elif i + 3 <= len(chars) and chars[i + 1] != "!":
                close = chars.find("]", i + 2)
            else:
                close = -1
            if close < 0:
                raise _pattern_error(i, _ERROR_INVALID_RANGE)
            i = close + 1
            continue
        i += 1


def _read_text(path: Any) -> str:
    try:
        return Path(path).read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as error:
        raise FileLoaderError(f"IO error: {error}") from error


def _map_ok(items: Iterable[Any], func: Callable[[Any], Any]) -> Iterator[Any]:
    for item in items:
        if isinstance(item, FileLoaderError):
            yield item
            continue
        try:
            yield func(item)
        except FileLoaderError as error:
            yield error


class FileLoader(Generic[T]):
    """A lazy stream of paths, contents or errors produced from the filesystem."""

    def __init__(self, items: Iterable[T]) -> None:
        self._items = iter(items)

    @classmethod
    def with_glob(cls, pattern: str) -> "FileLoader[Any]":
        """Stream the paths matching ``pattern``, in sorted order.

        Raises ``FileLoaderError`` when the pattern is malformed.
        """
        _check_pattern(pattern)
        paths = sorted(glob.glob(pattern, recursive=True))
        return cls(Path(path) for path in paths)

    @classmethod
    def with_dir(cls, directory: str | os.PathLike[str]) -> "FileLoader[Any]":
        """Stream the regular files directly inside ``directory`` (no subdirectories).

        Raises ``FileLoaderError`` when the directory cannot be listed.
        """
        try:
            entries = sorted(Path(directory).iterdir())
        except OSError as error:
            raise FileLoaderError(f"IO error: {error}") from error
        return cls(path for path in entries if path.is_file())

    def read(self) -> "FileLoader[Any]":
        """Replace each path with the file's UTF-8 contents."""
        return self.__class__(_map_ok(self._items, _read_text))

    def read_with_path(self) -> "FileLoader[Any]":
        """Replace each path with a ``(path, contents)`` pair."""
        return self.__class__(_map_ok(self._items, lambda path: (Path(path), _read_text(path))))

    def ignore_errors(self) -> "FileLoader[Any]":
        """Drop the items that are errors."""
        return self.__class__(item for item in self._items if not isinstance(item, FileLoaderError))

    def __iter__(self) -> Iterator[T]:
        return self._items