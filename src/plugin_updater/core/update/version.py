"""
Version comparison for release tags.

``compare_versions(a, b)`` orders two version strings:

  * dotted numeric components compare numerically;
  * the shorter version is padded with zero components ("1.0" == "1.0.0");
  * a pre-release suffix sorts below the same numeric core without one
    ("1.1.0-beta" < "1.1.0"); two suffixes compare lexically.

When both strings are valid PEP 440 versions, ``packaging`` does the work.
Otherwise both sides go through the tolerant segment comparison below, so
a pair is always compared with one rule and ``compare(a, b)`` is always the
inverse of ``compare(b, a)``.
"""

from __future__ import annotations

import re
from enum import IntEnum
from itertools import zip_longest

from packaging.version import InvalidVersion, Version


class Ordering(IntEnum):
    LESS = -1
    EQUAL = 0
    GREATER = 1

    def inverse(self) -> Ordering:
        return Ordering(-self.value)


def compare_versions(a: str, b: str) -> Ordering:
    """Return how version *a* orders relative to version *b*."""
    parsed_a = _parse(a)
    parsed_b = _parse(b)
    if parsed_a is not None and parsed_b is not None:
        if parsed_a < parsed_b:
            return Ordering.LESS
        if parsed_a > parsed_b:
            return Ordering.GREATER
        return Ordering.EQUAL
    return Ordering(_compare_parts(_version_parts(a), _version_parts(b)))


def is_newer(candidate: str, current: str) -> bool:
    return compare_versions(candidate, current) is Ordering.GREATER


def _parse(version: str) -> Version | None:
    try:
        return Version((version or "").strip())
    except InvalidVersion:
        return None


def _version_parts(version: str) -> list[int | str]:
    version = (version or "").strip()
    if version[:1] in {"v", "V"}:
        version = version[1:]
    parts: list[int | str] = []
    for chunk in re.split(r"[.\-+_]", version):
        if not chunk:
            continue
        if chunk.isdigit():
            parts.append(int(chunk))
        else:
            parts.append(chunk.lower())
    return parts


def _compare_parts(left: list[int | str], right: list[int | str]) -> int:
    for lhs, rhs in zip_longest(left, right, fillvalue=0):
        if lhs == rhs:
            continue
        if isinstance(lhs, int) and isinstance(rhs, int):
            return -1 if lhs < rhs else 1
        # A numeric (or padded) component outranks a suffix like "beta".
        if isinstance(lhs, int):
            return 1
        if isinstance(rhs, int):
            return -1
        return -1 if lhs < rhs else 1
    return 0
