"""Regular-expression extraction of message-function call sites."""

from __future__ import annotations

import re
from typing import Iterable, Iterator, Sequence


def build_regexps(
    function_names: Iterable[str], custom_regexps: Iterable[str] = ()
) -> list[re.Pattern[str]]:
    """Return the expressions matching configured message-function calls.

    For each function name two expressions are built, one for a double-quoted
    and one for a single-quoted first argument, e.g. ``_t("Hello"`` or
    ``_t ( 'Hello'``. Further arguments are ignored. Custom expressions are
    used verbatim; their first capture group is the message.
    """

    expressions: list[re.Pattern[str]] = []
    for name in function_names:
        escaped = re.escape(name)
        expressions.append(re.compile(rf'{escaped}\s*\(\s*"([\s\S]*?)"', re.MULTILINE))
        expressions.append(re.compile(rf"{escaped}\s*\(\s*'([\s\S]*?)'", re.MULTILINE))
    for expression in custom_regexps:
        expressions.append(re.compile(expression, re.MULTILINE))
    return expressions


def find_messages(contents: str, regexps: Sequence[re.Pattern[str]]) -> Iterator[str]:
    """Yield every candidate message in ``contents``, expression by expression."""

    for expression in regexps:
        for match in expression.finditer(contents):
            message = match.group(1)
            if message is not None:
                yield message


__all__ = ["build_regexps", "find_messages"]
