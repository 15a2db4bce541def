"""Jinja templates for the generated stubs and the markdown index."""

from __future__ import annotations

from functools import lru_cache
from typing import Sequence

from jinja2 import Environment, StrictUndefined, Template

_ENV = Environment(
    autoescape=False,
    keep_trailing_newline=True,
    undefined=StrictUndefined,
)

_STAR_JS = """\
const { __exportStar } = require('tslib');
__exportStar(require('{{ package }}'), exports);
"""

_STAR_DTS = """\
export * from '{{ package }}';
"""

_EQUALS_JS = """\
module.exports = require('{{ package }}');
"""

_EQUALS_DTS = """\
import {{ namespace }} = require('{{ package }}');
export = {{ namespace }};
"""

_OPTIONAL_JS = """\
module.exports = undefined;
try {
    module.exports = require('{{ package }}');
} catch (error) {
    if (error.code === 'MODULE_NOT_FOUND') {
        console.warn('{{ package }} not found');
    } else {
        throw error;
    }
}
"""

_MARKDOWN = """\
# {{ package_name }} re-exports

In order to make application builds more stable `{{ package_name }}` re-exports some common dependencies
for extensions to re-use.

## Usage example

Let's take inversify as an example since you will most likely use this package, you can import this
package by prefixing with `{{ package_name }}/shared/`:

```ts
import { injectable } from '{{ package_name }}/shared/inversify';

@injectable()
export class SomeClass {
    // ...
}
```

## List of re-exported packages

{{ packages | map('format_bullet') | join('\\n') }}
"""


def _format_bullet(package: str) -> str:
    return f" - `{package}`"


_ENV.filters["format_bullet"] = _format_bullet


@lru_cache(maxsize=None)
def _template(source: str) -> Template:
    return _ENV.from_string(source)


def render_star_js(package: str) -> str:
    return _template(_STAR_JS).render(package=package)


def render_star_dts(package: str) -> str:
    return _template(_STAR_DTS).render(package=package)


def render_equals_js(package: str) -> str:
    return _template(_EQUALS_JS).render(package=package)


def render_equals_dts(package: str, namespace: str) -> str:
    return _template(_EQUALS_DTS).render(package=package, namespace=namespace)


def render_optional_js(package: str) -> str:
    """Shim that leaves the export undefined when ``package`` is absent."""

    return _template(_OPTIONAL_JS).render(package=package)


def render_optional_dts(package: str, namespace: str) -> str:
    return render_equals_dts(package, namespace)


def render_markdown(package_name: str, packages: Sequence[str]) -> str:
    """Render the re-export index; ``packages`` must already be sorted."""

    return _template(_MARKDOWN).render(
        package_name=package_name,
        packages=list(packages),
    )


def shim_namespace(name: str) -> str:
    """Type-stub namespace for a shim name: ``electron`` -> ``Electron``."""

    stem = name.rsplit("/", 1)[-1]
    parts = [part for part in stem.replace("_", "-").split("-") if part]
    return "".join(part[:1].upper() + part[1:] for part in parts) or "Optional"


__all__ = [
    "render_equals_dts",
    "render_equals_js",
    "render_markdown",
    "render_optional_dts",
    "render_optional_js",
    "render_star_dts",
    "render_star_js",
    "shim_namespace",
]
