"""Command that fetches a sample set of packages and prints the HTML snippet."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

import requests

from .core import new_defaults
from .package import Include, Package, ProviderError

EXAMPLE_SHIM = "https://ga.jspm.io/npm:es-module-shims@1.7.0"


def _example_packages() -> list[Package]:
    return [
        Package(
            name="htmx",
            version="1.8.5",
            require=[
                Include(file="htmx.min.js"),
                Include(file="/ext/json-enc.js", alias="json-enc"),
            ],
        ),
        Package(
            name="bootstrap",
            require=[
                Include(file="css/bootstrap.min.css", alias="bootstrap"),
                Include(file="js/bootstrap.min.js", alias="bootstrap"),
            ],
        ),
    ]


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Fetch the sample packages and print the rendered import map."""
    parser = argparse.ArgumentParser(
        prog="importmap", description="Fetch packages and print an import map snippet."
    )
    parser.add_argument("--shim", default=EXAMPLE_SHIM, help="URL of the module shim script")
    parser.add_argument("--root-dir", default="", help="directory the cache and assets live in")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(message)s")
    im = (
        new_defaults()
        .with_logger(logging.getLogger("importmap"))
        .shim_path(args.shim)
        .root_dir(args.root_dir)
        .with_packages(_example_packages())
    )

    try:
        im.fetch()
        snippet = im.render()
    except (ProviderError, requests.RequestException, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(snippet)
    return 0