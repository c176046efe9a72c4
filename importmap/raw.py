"""Provider for a single file at a fixed URL."""

from __future__ import annotations

from .files import File, extract_file_type
from .package import ProviderError


class RawProvider:
    """Serves one file from a given URL; the version passes through unchanged."""

    def __init__(self, url: str) -> None:
        self.url = url

    def fetch_package_files(self, name: str, version: str) -> tuple[list[File], str]:
        """Return the single file at the URL, stored under the package name."""
        if not self.url:
            raise ProviderError("raw provider URL is empty")
        entry = File(path=self.url, local_path=name, type=extract_file_type(self.url))
        return [entry], version