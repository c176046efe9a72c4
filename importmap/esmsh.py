"""Provider backed by the esm.sh module CDN."""

from __future__ import annotations

import re

import requests

from .files import File, extract_file_type
from .package import ProviderError

DEFAULT_API_BASE_URL = "https://esm.sh/"


class EsmshClient:
    """Resolves a package's main module through the esm.sh meta endpoint."""

    def __init__(self, api_base_url: str = DEFAULT_API_BASE_URL) -> None:
        self.api_base_url = api_base_url

    def fetch_package_files(self, name: str, version: str) -> tuple[list[File], str]:
        """Return the package's single entry module and its resolved version."""
        package_id = f"{name}@{version}" if version else name
        response = requests.get(f"{self.api_base_url}{package_id}?meta")
        with response:
            if response.status_code != 200:
                raise ProviderError(
                    f"esm.sh meta API responded with code {response.status_code}"
                )
            text = response.text

        quoted = re.escape(name)
        version_match = re.search(r"/\*\s*esm\.sh\s*-\s*" + quoted + r"@([^\s*]+)", text)
        if version_match is None:
            raise ProviderError("failed to parse version from esm.sh meta output")

        export_match = re.search(
            r"""export\s+\*\s+from\s+["'](/""" + quoted + r"""@[^"']+)["']""", text
        )
        if export_match is None:
            raise ProviderError("failed to parse export file URL from esm.sh meta output")

        file_path = export_match.group(1)
        file_url = self.api_base_url[:-1] + file_path
        entry = File(path=file_url, local_path=file_path, type=extract_file_type(file_url))
        return [entry], version_match.group(1)