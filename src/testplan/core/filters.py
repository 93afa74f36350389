"""Title (grep) and exclusivity (only) filtering of declarations."""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional, Union

from testplan.core.declarations import Entry, SuiteDeclaration

logger = logging.getLogger(__name__)

# /body/ or /body/i; "g" is accepted for compatibility and has no effect
_REGEX_LITERAL = re.compile(r"^/(.*)/(g|i|)$", re.DOTALL)


def parse_grep(pattern: Optional[str]) -> Optional[re.Pattern[str]]:
    """Compile a user-supplied grep pattern.

    Accepts a delimited literal such as ``/login/i`` or a bare pattern.
    Input that does not compile is matched as literal text.

    Returns:
        Compiled pattern, or None when no pattern was supplied
    """
    if not pattern:
        return None

    body, flags = pattern, 0
    match = _REGEX_LITERAL.match(pattern)
    if match and match.group(1):
        body = match.group(1)
        if match.group(2) == "i":
            flags = re.IGNORECASE

    try:
        return re.compile(body, flags)
    except re.error as e:
        logger.warning("Invalid grep pattern %r (%s), matching it literally", pattern, e)
        return re.compile(re.escape(pattern))


def matches_grep(grep: Optional[re.Pattern[str]], title: str) -> bool:
    return grep is None or grep.search(title) is not None


@dataclass
class Pruned:
    """Some entries of the suite survive exclusivity filtering."""

    entries: list[Entry] = field(default_factory=list)


@dataclass
class Empty:
    """Nothing in the suite is exclusive."""


OnlyResult = Union[Pruned, Empty]


def filter_only(suite: SuiteDeclaration) -> OnlyResult:
    """Compute which entries of ``suite`` survive exclusivity filtering.

    Child suites are visited first and pruned in place when they hold
    exclusive entries. A child suite survives if it was pruned or is
    itself marked only; a direct test survives if it is marked only.
    ``suite`` itself is left for the caller to update.
    """
    entries: list[Entry] = []
    for entry in suite.entries:
        if isinstance(entry, SuiteDeclaration):
            result = filter_only(entry)
            if isinstance(result, Pruned):
                entry.entries = result.entries
            if isinstance(result, Pruned) or entry.only:
                entries.append(entry)
        elif entry.only:
            entries.append(entry)

    if entries:
        return Pruned(entries)
    return Empty()
