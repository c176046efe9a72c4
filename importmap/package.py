"""Packages, include patterns and the on-disk cache and asset layout."""

from __future__ import annotations

import logging
import os
import posixpath
import re
import shutil
from dataclasses import dataclass, field
from typing import Iterable, Optional, Protocol, runtime_checkable

import requests

from .files import File

logger = logging.getLogger(__name__)


class ProviderError(Exception):
    """Raised when a package provider cannot deliver a package's files."""


@runtime_checkable
class Provider(Protocol):
    """Something that lists the files of a package at a version."""

    def fetch_package_files(self, name: str, version: str) -> tuple[list[File], str]:
        """Return the package's files and the version that was resolved."""


def _join(*parts: str) -> str:
    """Join slash-separated path parts, skipping empty ones, and clean the result."""
    joined = "/".join(part for part in parts if part)
    if not joined:
        return ""
    cleaned = posixpath.normpath(joined)
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def _base(path: str) -> str:
    if not path:
        return "."
    path = path.rstrip("/")
    if not path:
        return "/"
    return path.rsplit("/", 1)[-1]


@dataclass(frozen=True)
class Include:
    """A pattern selecting package files, or a raw URL, with an optional import name."""

    file: str = ""
    raw: str = ""
    alias: str = ""

    def name(self) -> str:
        """The import name: the alias, or the base file name up to its first dot."""
        if self.alias:
            return self.alias
        return _base(self.file).split(".")[0].split("*")[-1]

    def pattern(self) -> str:
        """The regular expression this include's file pattern stands for."""
        pattern = "^" + self.file.strip("/") + "$"
        pattern = pattern.replace("**/", "**")
        pattern = pattern.replace(".", "\\.")
        pattern = pattern.replace("**", ".*")
        # A leading single star repeats the start anchor, leaving the match unanchored.
        if pattern.startswith("^*"):
            pattern = pattern[2:]
        return pattern


def find_include(includes: Iterable[Include], path: str) -> Optional[Include]:
    """Return the first include whose pattern matches the path, or None."""
    for include in includes:
        try:
            compiled = re.compile(include.pattern())
        except re.error as exc:
            logger.warning("skipping include pattern %r: %s", include.file, exc)
            continue
        if compiled.search(path):
            return include
    return None


def _download(src: str, target: str) -> None:
    with open(target, "wb") as out, requests.get(src, stream=True) as response:
        for chunk in response.iter_content(chunk_size=65536):
            out.write(chunk)


def _ensure_parent(path: str) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, mode=0o755, exist_ok=True)


@dataclass
class Package:
    """A library to include in the import map."""

    name: str
    version: str = ""
    provider: Optional[Provider] = None
    require: list[Include] = field(default_factory=list)

    def cache_dir(self, cache_dir: str) -> str:
        """Directory holding this package's cached files for its version."""
        return _join(cache_dir, self.name, self.version or "latest")

    def has_cache(self, root_dir: str, cache_dir: str) -> bool:
        """Whether the package's cache directory exists."""
        return os.path.exists(_join(root_dir, self.cache_dir(cache_dir)))

    def make_cache(self, root_dir: str, cache_dir: str, file_path: str, src: str) -> None:
        """Download a file into the package's cache."""
        full_path = _join(root_dir, self.cache_dir(cache_dir), file_path)
        _ensure_parent(full_path)
        _download(src, full_path)

    def assets_dir(self, assets: str) -> str:
        """Directory holding this package's unversioned asset files."""
        return _join(assets, self.name)

    def has_assets(self, root_dir: str, assets_dir: str) -> bool:
        """Whether the package's asset directory exists."""
        return os.path.exists(_join(root_dir, self.assets_dir(assets_dir)))

    def has_asset_file(self, root_dir: str, assets_dir: str, file_path: str) -> bool:
        """Whether one asset file of the package exists."""
        return os.path.exists(_join(root_dir, self.assets_dir(assets_dir), file_path))

    def make_assets(
        self, root_dir: str, cache_dir: str, assets_dir: str, file_path: str, src: str
    ) -> None:
        """Write an asset file, copying it from the cache when there is one."""
        full_path = _join(root_dir, self.assets_dir(assets_dir), file_path)
        _ensure_parent(full_path)
        if cache_dir and self.has_cache(root_dir, cache_dir):
            cache_path = _join(root_dir, self.cache_dir(cache_dir), file_path)
            with open(full_path, "wb") as out, open(cache_path, "rb") as cached:
                shutil.copyfileobj(cached, out)
            return
        _download(src, full_path)