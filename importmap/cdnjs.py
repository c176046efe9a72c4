"""Provider backed by the cdnjs library API."""

from __future__ import annotations

import requests

from .files import File, extract_file_type
from .package import ProviderError

DEFAULT_API_BASE_URL = "https://api.cdnjs.com/libraries/"
DEFAULT_CDN_BASE_URL = "https://cdnjs.cloudflare.com/ajax/libs/"


class CdnjsClient:
    """Lists a library's files through the cdnjs API."""

    def __init__(
        self,
        api_base_url: str = DEFAULT_API_BASE_URL,
        cdn_base_url: str = DEFAULT_CDN_BASE_URL,
    ) -> None:
        self.api_base_url = api_base_url
        self.cdn_base_url = cdn_base_url

    def fetch_package_files(self, name: str, version: str) -> tuple[list[File], str]:
        """Return the library's files and the version used.

        An unknown version falls back to the latest one.
        """
        response = requests.get(self.api_base_url + name)
        with response:
            if response.status_code != 200:
                raise ProviderError(f"client api responded with code {response.status_code}")
            data = response.json()

        use_version = data.get("version") or ""
        if version and version != use_version and version in (data.get("versions") or []):
            use_version = version

        base_path = f"{self.cdn_base_url}{name}/{use_version}/"
        files = [
            File(path=base_path + local, local_path=local, type=extract_file_type(local))
            for assets in data.get("assets") or []
            for local in assets.get("files") or []
        ]

        filename = data.get("filename") or ""
        if not files and filename:
            files.append(
                File(path=base_path + filename, local_path=filename, type=extract_file_type(filename))
            )

        return files, use_version