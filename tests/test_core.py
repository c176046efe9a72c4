import json
import logging
import re

import pytest
import responses

from importmap.core import DEFAULT_SHIM_SRC, ImportMap, new_defaults
from importmap.cdnjs import CdnjsClient
from importmap.jsdelivr import JsdelivrClient
from importmap.package import Include, Package, ProviderError
from importmap.raw import RawProvider

CDNJS_API = "https://api.cdnjs.com/libraries/"
JSDELIVR_API = "https://data.jsdelivr.com/v1/package/npm/"

HTMX_CDNJS = {
    "name": "htmx",
    "version": "2.0.4",
    "filename": "htmx.min.js",
    "versions": ["1.8.6", "1.9.10", "2.0.4"],
    "assets": [{"version": "2.0.4", "files": ["htmx.min.js", "htmx.js", "ext/json-enc.js"]}],
}

BOOTSTRAP_CDNJS = {
    "name": "bootstrap",
    "version": "5.3.3",
    "filename": "js/bootstrap.min.js",
    "versions": ["5.3.3"],
    "assets": [
        {
            "version": "5.3.3",
            "files": ["css/bootstrap.min.css", "js/bootstrap.min.js", "js/bootstrap.js"],
        }
    ],
}


@pytest.fixture
def rsps():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as mock:
        yield mock


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _serve_url_as_body(rsps, pattern):
    rsps.add_callback(
        responses.GET,
        re.compile(pattern),
        callback=lambda request: (200, {}, request.url),
    )


def test_import_map_with_local_assets(rsps, workdir):
    rsps.add(responses.GET, CDNJS_API + "htmx", json=HTMX_CDNJS)
    rsps.add(responses.GET, CDNJS_API + "bootstrap", json=BOOTSTRAP_CDNJS)
    _serve_url_as_body(rsps, r"https://cdnjs\.cloudflare\.com/.*")

    im = (
        ImportMap()
        .with_defaults()
        .with_provider(CdnjsClient())
        .with_packages(
            [
                Package(
                    name="htmx",
                    version="1.9.10",
                    require=[
                        Include(file="htmx.min.js"),
                        Include(file="/ext/json-enc.js", alias="json-enc"),
                    ],
                ),
                Package(
                    name="bootstrap",
                    require=[
                        Include(file="css/bootstrap.min.css"),
                        Include(file="js/bootstrap.min.js", alias="bootstrap"),
                    ],
                ),
            ]
        )
    )
    im.fetch()

    assert im.imports() == (
        '{"imports":{"bootstrap":"/assets/bootstrap/js/bootstrap.min.js",'
        '"htmx":"/assets/htmx/htmx.min.js","json-enc":"/assets/htmx/ext/json-enc.js"}}'
    )
    assert im.styles() == (
        '<link rel="stylesheet" href="/assets/bootstrap/css/bootstrap.min.css" as="bootstrap">'
    )
    assert im.render() == """<link rel="stylesheet" href="/assets/bootstrap/css/bootstrap.min.css" as="bootstrap"/>
<script async src="https://ga.jspm.io/npm:es-module-shims@2.0.10/dist/es-module-shims.js"></script>
<script type="importmap">
{
  "imports": {
    "bootstrap": "/assets/bootstrap/js/bootstrap.min.js",
    "htmx": "/assets/htmx/htmx.min.js",
    "json-enc": "/assets/htmx/ext/json-enc.js"
  }
}
</script>"""

    asset = workdir / "assets" / "htmx" / "htmx.min.js"
    assert asset.read_text() == "https://cdnjs.cloudflare.com/ajax/libs/htmx/1.9.10/htmx.min.js"
    assert (workdir / ".importmap" / "htmx" / "1.9.10" / "htmx.js").is_file()
    assert (workdir / ".importmap" / "bootstrap" / "5.3.3" / "js" / "bootstrap.js").is_file()


def test_import_map_with_local_assets_jsdelivr(rsps, workdir):
    rsps.add(
        responses.GET,
        JSDELIVR_API + "htmx.org",
        json={"tags": {"latest": "1.9.10"}, "versions": ["1.9.10"]},
    )
    rsps.add(
        responses.GET,
        JSDELIVR_API + "htmx.org@1.9.10",
        json={
            "default": "/dist/htmx.min.js",
            "files": [
                {"type": "file", "name": "package.json"},
                {
                    "type": "directory",
                    "name": "dist",
                    "files": [
                        {"type": "file", "name": "htmx.min.js"},
                        {
                            "type": "directory",
                            "name": "ext",
                            "files": [{"type": "file", "name": "json-enc.js"}],
                        },
                    ],
                },
            ],
        },
    )
    rsps.add(
        responses.GET,
        JSDELIVR_API + "bootstrap",
        json={"tags": {"latest": "5.3.3"}, "versions": ["5.3.3"]},
    )
    rsps.add(
        responses.GET,
        JSDELIVR_API + "bootstrap@5.3.3",
        json={
            "default": "/dist/js/bootstrap.min.js",
            "files": [
                {
                    "type": "directory",
                    "name": "dist",
                    "files": [
                        {
                            "type": "directory",
                            "name": "css",
                            "files": [{"type": "file", "name": "bootstrap.min.css"}],
                        },
                        {
                            "type": "directory",
                            "name": "js",
                            "files": [{"type": "file", "name": "bootstrap.min.js"}],
                        },
                    ],
                }
            ],
        },
    )
    _serve_url_as_body(rsps, r"https://cdn\.jsdelivr\.net/.*")

    im = (
        ImportMap()
        .with_defaults()
        .with_provider(JsdelivrClient())
        .with_packages(
            [
                Package(
                    name="htmx.org",
                    require=[
                        Include(file="*/htmx.min.js"),
                        Include(file="*/json-enc.js", alias="json-enc"),
                    ],
                ),
                Package(
                    name="bootstrap",
                    require=[
                        Include(file="/dist**bootstrap.min.css"),
                        Include(file="/dist**bootstrap.min.js", alias="bootstrap"),
                    ],
                ),
            ]
        )
    )
    im.fetch()

    assert im.imports() == (
        '{"imports":{"bootstrap":"/assets/bootstrap/dist/js/bootstrap.min.js",'
        '"htmx":"/assets/htmx.org/dist/htmx.min.js",'
        '"json-enc":"/assets/htmx.org/dist/ext/json-enc.js"}}'
    )
    assert im.styles() == (
        '<link rel="stylesheet" href="/assets/bootstrap/dist/css/bootstrap.min.css" as="bootstrap">'
    )
    assert im.render() == """<link rel="stylesheet" href="/assets/bootstrap/dist/css/bootstrap.min.css" as="bootstrap"/>
<script async src="https://ga.jspm.io/npm:es-module-shims@2.0.10/dist/es-module-shims.js"></script>
<script type="importmap">
{
  "imports": {
    "bootstrap": "/assets/bootstrap/dist/js/bootstrap.min.js",
    "htmx": "/assets/htmx.org/dist/htmx.min.js",
    "json-enc": "/assets/htmx.org/dist/ext/json-enc.js"
  }
}
</script>"""


def test_import_raw(rsps, workdir):
    rsps.add(responses.GET, CDNJS_API + "htmx", json=HTMX_CDNJS)
    im = ImportMap().with_provider(CdnjsClient()).with_logger(logging.getLogger("test"))
    im.with_packages(
        [
            Package(
                name="htmx",
                version="1.8.6",
                require=[
                    Include(
                        raw="https://unpkg.com/browse/htmx.org@1.8.6/dist/htmx.min.js",
                        alias="htmx",
                    )
                ],
            )
        ]
    )
    im.fetch()
    assert im.imports() == (
        '{"imports":{"htmx":"https://unpkg.com/browse/htmx.org@1.8.6/dist/htmx.min.js"}}'
    )
    assert not (workdir / "assets").exists()


def test_import_raw_client(rsps):
    im = ImportMap().with_provider(CdnjsClient()).with_logger(logging.getLogger("test"))
    im.with_packages(
        [
            Package(
                name="htmx",
                version="2.0.4",
                provider=RawProvider("https://unpkg.com/browse/htmx.org@2.0.4/dist/htmx.min.js"),
            )
        ]
    )
    im.fetch()
    assert im.imports() == (
        '{"imports":{"htmx":"https://unpkg.com/browse/htmx.org@2.0.4/dist/htmx.min.js"}}'
    )
    assert len(rsps.calls) == 0


def test_with_package_appends():
    im = ImportMap()
    im.with_package(Package(name="a", provider=RawProvider("https://cdn.example.com/a.js")))
    im.with_package(Package(name="b", provider=RawProvider("https://cdn.example.com/b.css")))
    im.fetch()
    assert im.structure.imports == {"a": "https://cdn.example.com/a.js"}
    assert im.structure.styles == {"b": "https://cdn.example.com/b.css"}


def test_fetch_without_provider_raises():
    im = ImportMap().with_package(Package(name="htmx"))
    with pytest.raises(ProviderError):
        im.fetch()


def test_fetch_propagates_provider_error(rsps):
    rsps.add(responses.GET, CDNJS_API + "htmx", status=500)
    im = ImportMap().with_provider(CdnjsClient()).with_package(Package(name="htmx"))
    with pytest.raises(ProviderError, match="500"):
        im.fetch()


def test_new_defaults_sets_shim():
    im = new_defaults()
    assert im.shim() == DEFAULT_SHIM_SRC
    assert im.shim_path("https://cdn.example.com/shim.js").shim() == "https://cdn.example.com/shim.js"


def test_marshal_omits_empty_sections():
    im = ImportMap()
    assert im.marshal() == b"{}"
    im.structure.imports["app"] = "/app.js"
    assert im.marshal() == b'{"imports":{"app":"/app.js"}}'
    assert json.loads(im.marshal_indent()) == {"imports": {"app": "/app.js"}}
    assert im.marshal_indent() == b'{\n  "imports": {\n    "app": "/app.js"\n  }\n}'


def test_marshal_escapes_html_characters():
    im = ImportMap()
    im.structure.imports["x"] = "/a.js?q=<b>&c"
    text = im.marshal().decode()
    assert "<" not in text and ">" not in text and "&" not in text
    assert json.loads(text) == {"imports": {"x": "/a.js?q=<b>&c"}}


def test_imports_keep_empty_map():
    im = ImportMap()
    assert im.imports() == '{"imports":{}}'
    assert im.imports_indent() == '{\n  "imports": {}\n}'
    assert im.scopes() == "{}"


def test_scopes_are_indented():
    im = ImportMap()
    im.structure.scopes["/app/"] = {"lib": "/lib.js"}
    assert json.loads(im.scopes()) == {"/app/": {"lib": "/lib.js"}}
    assert im.scopes().startswith("{\n  ")


def test_render_without_imports_or_shim():
    im = ImportMap()
    im.structure.styles["site"] = "/site.css"
    assert im.render() == '<link rel="stylesheet" href="/site.css" as="site"/>\n'
    assert ImportMap().render() == ""


def test_clean_removes_directories(tmp_path):
    (tmp_path / "cache" / "x").mkdir(parents=True)
    (tmp_path / "public" / "y").mkdir(parents=True)
    (tmp_path / "keep").mkdir()
    ImportMap().root_dir(str(tmp_path)).cache_dir("cache").assets_dir("public").clean()
    assert not (tmp_path / "cache").exists()
    assert not (tmp_path / "public").exists()
    assert (tmp_path / "keep").exists()


def test_assets_under_root_dir(rsps, tmp_path):
    rsps.add(responses.GET, CDNJS_API + "htmx", json=HTMX_CDNJS)
    _serve_url_as_body(rsps, r"https://cdnjs\.cloudflare\.com/.*")
    im = (
        ImportMap()
        .root_dir(str(tmp_path))
        .assets_dir("static")
        .with_provider(CdnjsClient())
        .with_package(Package(name="htmx", require=[Include(file="htmx.min.js")]))
    )
    im.fetch()
    target = tmp_path / "static" / "htmx" / "htmx.min.js"
    assert im.structure.imports == {"htmx": str(target)}
    assert target.read_text().endswith("/htmx/2.0.4/htmx.min.js")