"""SQL parameter normalization.

Statements are written with ``$n`` positional placeholders. Drivers that
do not accept them get the placeholders rewritten to their own style and
the parameter list re-ordered to match placeholder occurrence order.
String literals are left untouched.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from functools import lru_cache
from typing import Any

from row_map.core.exceptions import ParameterBindingError

# $1, $2, ... but not inside identifiers such as foo$1
_PARAM_PATTERN = re.compile(r"(?<![\w$])\$(\d+)")

# Matches single-quoted string literals ('' escapes included)
_STRING_LITERAL_PATTERN = re.compile(r"'(?:[^']|'')*'")

# Placeholder emitted for each paramstyle
_MARKERS: dict[str, str] = {
    "qmark": "?",
    "format": "%s",
}


def _split_literals(sql: str) -> list[tuple[bool, str]]:
    """Split *sql* into ``(is_literal, text)`` segments."""
    parts: list[tuple[bool, str]] = []
    last_end = 0
    for match in _STRING_LITERAL_PATTERN.finditer(sql):
        start, end = match.span()
        if start > last_end:
            parts.append((False, sql[last_end:start]))
        parts.append((True, match.group()))
        last_end = end
    if last_end < len(sql):
        parts.append((False, sql[last_end:]))
    return parts


@lru_cache(maxsize=256)
def _rewrite(sql: str, paramstyle: str) -> tuple[str, tuple[int, ...]]:
    """Rewrite ``$n`` placeholders; return the SQL and the 1-based index order."""
    marker = _MARKERS[paramstyle]
    order: list[int] = []

    def _replace(match: re.Match[str]) -> str:
        order.append(int(match.group(1)))
        return marker

    out: list[str] = []
    for is_literal, text in _split_literals(sql):
        if paramstyle == "format":
            # A bare % would be read as a placeholder by pyformat drivers.
            text = text.replace("%", "%%")
        out.append(text if is_literal else _PARAM_PATTERN.sub(_replace, text))
    return "".join(out), tuple(order)


def placeholder_indexes(sql: str) -> list[int]:
    """Return the ``$n`` indexes of *sql* in occurrence order."""
    found: list[int] = []
    for is_literal, text in _split_literals(sql):
        if not is_literal:
            found.extend(int(m.group(1)) for m in _PARAM_PATTERN.finditer(text))
    return found


def bind_params(
    sql: str,
    params: Sequence[Any] | None,
    paramstyle: str,
) -> tuple[str, tuple[Any, ...]]:
    """Convert a ``$n`` statement to *paramstyle*.

    Args:
        sql: Statement using ``$1``-style placeholders.
        params: Positional parameters; ``params[0]`` binds ``$1``.
        paramstyle: ``numeric_dollar`` (no conversion), ``qmark`` (``?``)
            or ``format`` (``%s``).

    Returns:
        ``(sql, params)`` ready for the driver.

    Raises:
        ParameterBindingError: If a placeholder has no parameter, or a
            parameter is never referenced.
    """
    values = tuple(params or ())
    indexes = placeholder_indexes(sql)
    used = set(indexes)
    if used and (min(used) < 1 or max(used) > len(values)):
        raise ParameterBindingError(
            sql, f"placeholders {sorted(used)} but {len(values)} parameters"
        )
    if len(used) != len(values):
        raise ParameterBindingError(
            sql, f"{len(values)} parameters but only {len(used)} distinct placeholders"
        )

    if paramstyle == "numeric_dollar" or not values:
        return sql, values
    if paramstyle not in _MARKERS:
        raise ParameterBindingError(sql, f"unsupported paramstyle '{paramstyle}'")

    converted, order = _rewrite(sql, paramstyle)
    return converted, tuple(values[i - 1] for i in order)
