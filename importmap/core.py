"""Builds an import map and stylesheet links from packages served by CDN providers."""

from __future__ import annotations

import json
import logging
import os
import posixpath
import shutil
from dataclasses import dataclass, field, replace
from typing import Any, Iterable, Optional

from .cdnjs import CdnjsClient
from .files import File, FileType, extract_file_type
from .package import Package, Provider, ProviderError, find_include

DEFAULT_ASSETS_DIR = "assets"
DEFAULT_CACHE_DIR = ".importmap"
DEFAULT_SHIM_SRC = "https://ga.jspm.io/npm:es-module-shims@2.0.10/dist/es-module-shims.js"

_HTML_ESCAPES = (
    ("<", "\\u003c"),
    (">", "\\u003e"),
    ("&", "\\u0026"),
    ("\u2028", "\\u2028"),
    ("\u2029", "\\u2029"),
)


def _to_json(value: Any, indent: bool = False) -> str:
    """Encode as JSON with sorted keys and HTML-sensitive characters escaped."""
    if indent:
        text = json.dumps(value, indent=2, sort_keys=True, ensure_ascii=False)
    else:
        text = json.dumps(value, separators=(",", ":"), sort_keys=True, ensure_ascii=False)
    for char, escaped in _HTML_ESCAPES:
        text = text.replace(char, escaped)
    return text


def _join(*parts: str) -> str:
    joined = "/".join(part for part in parts if part)
    if not joined:
        return ""
    cleaned = posixpath.normpath(joined)
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


@dataclass
class _Structure:
    imports: dict[str, str] = field(default_factory=dict)
    scopes: dict[str, dict[str, str]] = field(default_factory=dict)
    styles: dict[str, str] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        fields = (("imports", self.imports), ("scopes", self.scopes), ("styles", self.styles))
        return {key: value for key, value in fields if value}


class ImportMap:
    """Collects packages, stores their files locally and renders the import map."""

    def __init__(self) -> None:
        self.structure = _Structure()
        self._provider: Optional[Provider] = None
        self._packages: list[Package] = []
        self._root_dir = ""
        self._assets_dir: Optional[str] = None
        self._cache_dir: Optional[str] = None
        self._shim = ""
        self._logger: Optional[logging.Logger] = None

    def with_defaults(self) -> "ImportMap":
        """Use the default cache and asset directories, shim and cdnjs provider."""
        self.cache_dir(DEFAULT_CACHE_DIR)
        self.assets_dir(DEFAULT_ASSETS_DIR)
        self.shim_path(DEFAULT_SHIM_SRC)
        self.with_provider(CdnjsClient())
        return self

    def with_provider(self, provider: Provider) -> "ImportMap":
        self._provider = provider
        return self

    def with_packages(self, packages: Iterable[Package]) -> "ImportMap":
        self._packages = list(packages)
        return self

    def with_package(self, package: Package) -> "ImportMap":
        self._packages.append(package)
        return self

    def with_logger(self, logger: Optional[logging.Logger]) -> "ImportMap":
        self._logger = logger
        return self

    def clean(self) -> "ImportMap":
        """Remove the cache and asset directories."""
        cache = self._cache_dir if self._cache_dir is not None else DEFAULT_CACHE_DIR
        assets = self._assets_dir if self._assets_dir is not None else DEFAULT_ASSETS_DIR
        for directory in (cache, assets):
            shutil.rmtree(_join(self._root_dir, directory) or ".", ignore_errors=True)
        return self

    def cache_dir(self, directory: str) -> "ImportMap":
        self._cache_dir = directory
        return self

    def assets_dir(self, directory: str) -> "ImportMap":
        self._assets_dir = directory
        return self

    def root_dir(self, directory: str) -> "ImportMap":
        self._root_dir = os.fspath(directory)
        return self

    def shim(self) -> str:
        """The URL of the module shim script, or an empty string."""
        return self._shim

    def shim_path(self, src: str) -> "ImportMap":
        self._shim = src
        return self

    def _log(self, message: str, *args: Any) -> None:
        if self._logger is not None:
            self._logger.info(message, *args)

    def fetch(self) -> None:
        """Resolve every package, store its files and fill the import map."""
        for pkg in self._packages:
            self._log("fetching assets package=%s", pkg.name)
            provider = pkg.provider if pkg.provider is not None else self._provider
            if provider is None:
                raise ProviderError(f"no provider configured for package {pkg.name!r}")

            files, version = provider.fetch_package_files(pkg.name, pkg.version)
            if not pkg.version:
                pkg = replace(pkg, version=version)

            if self._cache_dir is not None and not pkg.has_cache(self._root_dir, self._cache_dir):
                self._log("building cache package=%s version=%s", pkg.name, pkg.version)
                for entry in files:
                    pkg.make_cache(self._root_dir, self._cache_dir, entry.local_path, entry.path)

            self._log("building assets package=%s version=%s", pkg.name, pkg.version)
            targets = self._asset_targets(pkg, files, self._cache_dir or "")

            for target, alias in targets:
                if not target.startswith(("/", "h")):
                    target = "/" + target
                kind = extract_file_type(target)
                if kind is FileType.CSS:
                    self.structure.styles[alias] = target
                elif kind is FileType.JS:
                    self.structure.imports[alias] = target

            for include in pkg.require:
                if include.raw:
                    self.structure.imports[include.name()] = include.raw

    def _asset_targets(
        self, pkg: Package, files: Iterable[File], cache_dir: str
    ) -> list[tuple[str, str]]:
        targets = []
        for entry in files:
            if pkg.require:
                include = find_include(pkg.require, entry.local_path)
                if include is None:
                    continue
                alias = include.name()
            else:
                alias = entry.local_path

            if self._assets_dir is None:
                targets.append((entry.path, alias))
                continue

            if not pkg.has_asset_file(self._root_dir, self._assets_dir, entry.local_path):
                pkg.make_assets(
                    self._root_dir, cache_dir, self._assets_dir, entry.local_path, entry.path
                )
            target = _join(self._root_dir, pkg.assets_dir(self._assets_dir), entry.local_path)
            targets.append((target, alias))
        return targets

    def marshal(self) -> bytes:
        """The whole structure as compact JSON."""
        return _to_json(self.structure.as_dict()).encode("utf-8")

    def marshal_indent(self) -> bytes:
        """The whole structure as indented JSON."""
        return _to_json(self.structure.as_dict(), indent=True).encode("utf-8")

    def imports(self) -> str:
        """The imports as a compact JSON import map."""
        return _to_json({"imports": self.structure.imports})

    def imports_indent(self) -> str:
        """The imports as an indented JSON import map."""
        return _to_json({"imports": self.structure.imports}, indent=True)

    def scopes(self) -> str:
        """The scopes as indented JSON."""
        return _to_json(self.structure.scopes, indent=True)

    def styles(self) -> str:
        """Stylesheet link tags for every collected style."""
        if self.structure.styles is None:
            return ""
        return "".join(
            f'<link rel="stylesheet" href="{href}" as="{alias}">'
            for alias, href in sorted(self.structure.styles.items())
        )

    def render(self) -> str:
        """An HTML snippet with style links, the shim script and the import map."""
        parts = [
            f'<link rel="stylesheet" href="{href}" as="{alias}"/>\n'
            for alias, href in sorted(self.structure.styles.items())
        ]
        if self._shim:
            parts.append(f'<script async src="{self._shim}"></script>\n')
        if self.structure.imports:
            parts.append('<script type="importmap">\n')
            parts.append(self.imports_indent())
            parts.append("\n</script>")
        return "".join(parts)


def new_defaults() -> ImportMap:
    """A new import map with the default directories, shim and provider."""
    return ImportMap().with_defaults()