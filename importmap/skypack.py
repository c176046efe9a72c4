"""Provider backed by the Skypack package and browse APIs."""

from __future__ import annotations

from typing import Any

import requests

from .files import File, extract_file_type
from .package import ProviderError

DEFAULT_PACKAGE_API_BASE_URL = "https://api.skypack.dev/v1/package/"
DEFAULT_BROWSE_API_BASE_URL = "https://api.skypack.dev/v1/browse/"
DEFAULT_CDN_BASE_URL = "https://cdn.skypack.dev/"


def _get_json(url: str, label: str) -> Any:
    response = requests.get(url)
    with response:
        if response.status_code != 200:
            raise ProviderError(f"{label} responded with code {response.status_code}")
        return response.json()


class SkypackClient:
    """Lists a package's files through Skypack."""

    def __init__(
        self,
        package_api_base_url: str = DEFAULT_PACKAGE_API_BASE_URL,
        browse_api_base_url: str = DEFAULT_BROWSE_API_BASE_URL,
        cdn_base_url: str = DEFAULT_CDN_BASE_URL,
    ) -> None:
        self.package_api_base_url = package_api_base_url
        self.browse_api_base_url = browse_api_base_url
        self.cdn_base_url = cdn_base_url

    def fetch_package_files(self, name: str, version: str) -> tuple[list[File], str]:
        """Return the package's files and the version used.

        A requested version is used as given; otherwise the package's current one.
        Without any listed files the package entry point is returned.
        """
        package = _get_json(self.package_api_base_url + name, "Skypack package API")
        use_version = version or package.get("version") or ""

        browse = _get_json(
            f"{self.browse_api_base_url}{name}/{use_version}", "skypack browse API"
        )
        files = [
            File(
                path=info.get("url") or "",
                local_path=info.get("name") or "",
                type=extract_file_type(info.get("name") or ""),
            )
            for info in browse.get("files") or []
        ]

        if not files:
            fallback = f"{self.cdn_base_url}{name}@{use_version}"
            files.append(File(path=fallback, local_path=name, type=extract_file_type(fallback)))

        return files, use_version