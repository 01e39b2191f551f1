from __future__ import annotations

import re

_VERSION_RE = re.compile(r"^v?(\d+(?:\.\d+)*)")


def parse_version(text: str | None) -> tuple[int, ...] | None:
    m = _VERSION_RE.match((text or "").strip())
    if not m:
        return None
    return tuple(int(part) for part in m.group(1).split("."))


def compare_versions(left: str, right: str) -> int | None:
    """Return -1, 0 or 1 like a classic cmp; None when either side is not a version.

    Missing trailing segments count as 0, so "1.2" == "1.2.0".
    """
    a = parse_version(left)
    b = parse_version(right)
    if a is None or b is None:
        return None
    width = max(len(a), len(b))
    a = a + (0,) * (width - len(a))
    b = b + (0,) * (width - len(b))
    return (a > b) - (a < b)


def is_version_at_least(version: str, minimum: str) -> bool:
    result = compare_versions(version, minimum)
    return result is not None and result >= 0
