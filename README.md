# importmap

Generate a browser import map and stylesheet links for JavaScript and CSS
packages served by public CDNs.

Files are downloaded once into a versioned cache directory (`.importmap` by
default) and copied into an assets directory (`assets` by default), so your
pages load them from your own server. The result is an HTML snippet ready to
drop into a template.

## Installation

```
pip install importmap
```

## Usage

```python
from importmap.core import new_defaults
from importmap.package import Include, Package

im = new_defaults().with_packages([
    Package(
        name="htmx",
        version="1.9.10",
        require=[Include(file="htmx.min.js")],
    ),
    Package(
        name="bootstrap",
        require=[
            Include(file="css/bootstrap.min.css"),
            Include(file="js/bootstrap.min.js"),
        ],
    ),
])

im.fetch()
print(im.render())
```

`render()` produces the stylesheet `<link>` tags, the module shim `<script>`
and a `<script type="importmap">` block such as:

```html
<link rel="stylesheet" href="/assets/bootstrap/css/bootstrap.min.css" as="bootstrap"/>
<script async src="https://ga.jspm.io/npm:es-module-shims@2.0.10/dist/es-module-shims.js"></script>
<script type="importmap">
{
  "imports": {
    "bootstrap": "/assets/bootstrap/js/bootstrap.min.js",
    "htmx": "/assets/htmx/htmx.min.js"
  }
}
</script>
```

Keys are written in sorted order. `.css` files end up as stylesheet links,
`.js` files as imports; other files are stored but not referenced.

### Selecting files

Each `Include` names a file of the package relative to its root. `**` matches
any run of characters, including directory separators, so
`Include(file="/dist**bootstrap.min.js")` picks the file wherever it sits under
`dist`. `importmap.package.find_include` returns the first include that matches
a path. Without any `Include`, every JavaScript and CSS file the provider lists
is added under its path inside the package.

The import name is the include's `alias` when given, otherwise the base file
name up to its first dot (`htmx.min.js` becomes `htmx`).

An include with `raw` set adds that URL to the imports directly, under its
import name:

```python
Include(raw="https://unpkg.com/htmx.org@1.8.6/dist/htmx.min.js", alias="htmx")
```

### Providers

`new_defaults()` uses cdnjs. Other CDNs are available and can be set for the
whole map with `with_provider(...)` or for a single package through its
`provider`:

- `importmap.cdnjs.CdnjsClient`
- `importmap.jsdelivr.JsdelivrClient`
- `importmap.unpkg.UnpkgClient`
- `importmap.skypack.SkypackClient`
- `importmap.esmsh.EsmshClient`
- `importmap.raw.RawProvider` – serves a single file from a fixed URL

Any object with a `fetch_package_files(name, version)` method returning a list
of `importmap.files.File` and the resolved version can act as a provider
(`importmap.package.Provider`). When a package has no version, the provider's
resolved version is used. A provider failure raises
`importmap.package.ProviderError`, as does fetching a package for which no
provider is set.

### Configuration

`ImportMap` is configured by chaining:

- `cache_dir(...)`, `assets_dir(...)`, `root_dir(...)` – where files are stored
- `shim_path(...)` – the es-module-shims script to load; `shim()` returns it
- `with_provider(...)`, `with_packages(...)`, `with_package(...)`
- `with_logger(...)` – a `logging.Logger` that reports progress
- `with_defaults()` – the default directories, shim and cdnjs provider
- `clean()` – removes the cache and assets directories

A bare `ImportMap()` has no cache or assets directory, no shim and no provider;
its imports and styles then point straight at the CDN URLs.

Besides `render()`, the map can be output piece by piece with `imports()`,
`imports_indent()`, `scopes()`, `styles()`, `marshal()` and `marshal_indent()`.
`fetch()` never fills in scopes, so `scopes()` gives `{}` unless the
`structure.scopes` mapping is filled by hand.

## Command line

```
importmap [--shim URL] [--root-dir DIR]
```

fetches an example set of packages (htmx 1.8.5 and bootstrap) from cdnjs,
stores them under the root directory (the current directory by default) and
prints the rendered HTML snippet. `--shim` sets the shim script URL. The
command does not take a list of packages of its own; for that, use the
library.