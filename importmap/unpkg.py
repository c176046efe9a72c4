"""Provider backed by the unpkg CDN and the npm registry."""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Mapping

import requests

from .files import File, extract_file_type
from .package import ProviderError

DEFAULT_META_URL = "https://unpkg.com/{name}@{version}/?meta"
DEFAULT_CDN_URL = "https://unpkg.com/{name}@{version}/"
DEFAULT_REGISTRY_URL = "https://registry.npmjs.org/"


class UnpkgClient:
    """Lists a package's files through unpkg's meta listings."""

    def __init__(
        self,
        meta_url: str = DEFAULT_META_URL,
        cdn_url: str = DEFAULT_CDN_URL,
        registry_url: str = DEFAULT_REGISTRY_URL,
    ) -> None:
        self.meta_url = meta_url
        self.cdn_url = cdn_url
        self.registry_url = registry_url

    def fetch_package_files(self, name: str, version: str) -> tuple[list[File], str]:
        """Return the package's files and the version used.

        Without a version, the registry's latest tag is used.
        """
        if not version:
            version = self._latest_version(name)

        response = requests.get(self.meta_url.format(name=name, version=version))
        with response:
            if response.status_code != 200:
                raise ProviderError(f"unpkg API responded with status {response.status_code}")
            meta = response.json()

        base_path = self.cdn_url.format(name=name, version=version)
        return list(self._walk(meta.get("files") or [], base_path)), version

    def _walk(self, listings: Iterable[Mapping[str, Any]], base_path: str) -> Iterator[File]:
        for item in listings:
            item_path = item.get("path") or ""
            if item.get("type") == "directory":
                # Unreadable subdirectories are skipped.
                try:
                    with requests.get(f"{base_path}{item_path}/?meta") as response:
                        subdir = response.json()
                except (requests.RequestException, ValueError):
                    continue
                yield from self._walk(subdir.get("files") or [], base_path)
            else:
                local = item_path.removeprefix("/")
                yield File(path=base_path + local, local_path=local, type=extract_file_type(item_path))

    def _latest_version(self, name: str) -> str:
        with requests.get(self.registry_url + name) as response:
            data = response.json()
        return (data.get("dist-tags") or {}).get("latest") or ""