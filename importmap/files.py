"""File descriptions shared by the package providers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

_JS_SUFFIX = re.compile(r"\.js$")
_CSS_SUFFIX = re.compile(r"\.css$")


class FileType(str, Enum):
    """Kind of asset a file holds."""

    JS = "js"
    CSS = "css"
    OTHER = "other"


@dataclass(frozen=True)
class File:
    """A file offered by a provider: its remote URL and its path inside the package."""

    path: str
    local_path: str
    type: FileType = FileType.OTHER


def _extension(filename: str) -> str:
    base = filename.rsplit("/", 1)[-1]
    dot = base.rfind(".")
    return base[dot:] if dot >= 0 else ""


def extract_file_type(filename: str) -> FileType:
    """Classify a file name by its extension."""
    extension = _extension(filename)
    if extension == ".js":
        return FileType.JS
    if extension == ".css":
        return FileType.CSS
    return FileType.OTHER


def file_name_min(filename: str) -> str:
    """Return the minified variant of a JavaScript or CSS file name."""
    if extract_file_type(filename) is FileType.JS:
        filename = _JS_SUFFIX.sub(".min.js", filename)
    if extract_file_type(filename) is FileType.CSS:
        filename = _CSS_SUFFIX.sub(".min.css", filename)
    return filename