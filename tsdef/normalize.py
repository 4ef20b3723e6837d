"""Text normalization of rendered type expressions.

One pattern, three mutually exclusive alternatives:

| group | matches                | canonical | debug |
|-------|------------------------|-----------|-------|
| nl    | run of newlines        | " "       | " "   |
| brack | `[` whitespace `]`     | "[]"      | "[ ]" |
| brace | `{` whitespace `}`     | "{}"      | "{ }" |

Both modes share the pattern, so they always rewrite the same spans.
Both forms are single-line; they differ only in empty bracket pairs.

The pass is textual and does not skip string literals: a variant renamed
to "{ }" comes out as the literal "{}" in canonical form.
"""

from __future__ import annotations

import re
from typing import Final

PATTERN: Final = re.compile(r"(?P<nl>\n+)|(?P<brack>\[\s+\])|(?P<brace>\{\s+\})")

CANONICAL: Final[dict[str, str]] = {"nl": " ", "brack": "[]", "brace": "{}"}
DEBUG: Final[dict[str, str]] = {"nl": " ", "brack": "[ ]", "brace": "{ }"}


def _rewrite(text: str, replacements: dict[str, str]) -> str:
    def repl(m: re.Match[str]) -> str:
        group = m.lastgroup
        assert group is not None
        return replacements[group]

    return PATTERN.sub(repl, text)


def normalize_canonical(text: str) -> str:
    """Minimal form embedded in `export type` declarations."""
    return _rewrite(text, CANONICAL)


def normalize_debug(text: str) -> str:
    """Single-line, whitespace-stable form for diffing."""
    return _rewrite(text, DEBUG)
