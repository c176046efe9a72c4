"""Build browser import maps from CDN-hosted JavaScript and CSS packages."""

__version__ = "0.1.0"