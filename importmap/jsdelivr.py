"""Provider backed by the jsDelivr npm data API."""

from __future__ import annotations

import re
from typing import Any, Iterable, Mapping

import requests

from .files import File, extract_file_type, file_name_min
from .package import ProviderError

DEFAULT_API_BASE_URL = "https://data.jsdelivr.com/v1/package/npm/"
DEFAULT_CDN_BASE_URL = "https://cdn.jsdelivr.net/npm/"

_SOURCE_SUFFIX = re.compile(r"(\.js\Z|\.css\Z)")
_MIN_SUFFIX = re.compile(r"(\.min\.js\Z|\.min\.css\Z)")


def _get_json(url: str) -> Any:
    response = requests.get(url)
    with response:
        if response.status_code != 200:
            raise ProviderError(f"client api responded with code {response.status_code}")
        return response.json()


def walk_files(
    entries: Iterable[Mapping[str, Any]],
    base_path: str,
    file_path: str = "",
    dist: bool = False,
) -> list[File]:
    """Flatten a jsDelivr file tree into files, adding minified variants.

    When ``dist`` is set and a ``dist`` directory is met, only that directory
    is descended into and the remaining entries at that level are skipped.
    """
    files: list[File] = []
    for entry in entries:
        name = entry.get("name") or ""
        if entry.get("type") == "directory":
            children = entry.get("files") or []
            prefix = f"{file_path}{name}/"
            if dist and name == "dist":
                files.extend(walk_files(children, base_path, prefix, False))
                break
            files.extend(walk_files(children, base_path, prefix, dist))
            continue

        local = file_path + name
        files.append(File(path=base_path + local, local_path=local, type=extract_file_type(name)))
        if _SOURCE_SUFFIX.search(name) and not _MIN_SUFFIX.search(name):
            minified = file_path + file_name_min(name)
            files.append(
                File(path=base_path + minified, local_path=minified, type=extract_file_type(name))
            )
    return files


class JsdelivrClient:
    """Lists an npm package's files through the jsDelivr data API."""

    def __init__(
        self,
        api_base_url: str = DEFAULT_API_BASE_URL,
        cdn_base_url: str = DEFAULT_CDN_BASE_URL,
    ) -> None:
        self.api_base_url = api_base_url
        self.cdn_base_url = cdn_base_url

    def fetch_package_files(self, name: str, version: str) -> tuple[list[File], str]:
        """Return the package's files and the version used.

        An unknown version falls back to the latest tag.
        """
        search = _get_json(self.api_base_url + name)
        use_version = (search.get("tags") or {}).get("latest") or ""
        if version and version != use_version and version in (search.get("versions") or []):
            use_version = version

        listing = _get_json(f"{self.api_base_url}{name}@{use_version}")
        base_path = f"{self.cdn_base_url}{name}@{use_version}/"
        has_dist = "dist" in (listing.get("default") or "")
        return walk_files(listing.get("files") or [], base_path, "", has_dist), use_version