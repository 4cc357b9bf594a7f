"""Base URL rewriting for rendered output.

Pages are rendered while the site believes it lives at a temporary
render-time base.  Before a file is written every occurrence of that base
is replaced with the base the export will be served from, both as plain
text and in the escaped form used inside JSON/script blocks
(``https:\\/\\/example.com``).

This is literal substitution, not URL parsing: the render-time base must be
a value that does not otherwise occur in page content.
"""

from __future__ import annotations

import json
import re


def json_escape(value: str) -> str:
    """Return *value* as it appears inside a JSON string literal.

    Slashes are escaped (``\\/``) the way template layers emit URLs into
    inline scripts; the surrounding quotes are stripped.

    """
    return json.dumps(value, ensure_ascii=False)[1:-1].replace("/", "\\/")


def rewrite_urls(content: str, from_base: str, to_base: str) -> str:
    """Replace the render-time base *from_base* with *to_base* in *content*.

    Four forms are recognized, longest first at each position:

    - ``from_base + "/"``            -> ``to_base``
    - ``from_base``                  -> ``to_base``
    - escaped ``from_base + "/"``    -> escaped ``to_base``
    - escaped ``from_base``          -> escaped ``to_base``

    The text is scanned once, so a *to_base* that contains *from_base*
    (``https://ex.com`` -> ``https://ex.com/docs/``) is never rewritten a
    second time.  *to_base* is expected to end with a slash, so
    ``<from_base>/about`` becomes ``<to_base>about``.

    """
    if not from_base or from_base == to_base:
        return content

    escaped_from = json_escape(from_base)
    escaped_to = json_escape(to_base)

    # Plain forms win when escaping leaves the base unchanged
    targets = {
        escaped_from + "\\/": escaped_to,
        escaped_from: escaped_to,
        from_base + "/": to_base,
        from_base: to_base,
    }
    pattern = re.compile(
        "|".join(re.escape(form) for form in sorted(targets, key=len, reverse=True))
    )
    return pattern.sub(lambda found: targets[found.group(0)], content)
