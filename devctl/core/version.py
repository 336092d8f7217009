"""
Version comparison — equality only, no ordering.

Versions are compared after stripping one optional leading ``v`` and
reducing both sides to a canonical semantic version:

    1       → 1.0.0
    1.2     → 1.2.0
    1.2.3+b → 1.2.3        (build metadata ignored)
    1.2.3-rc.1 stays as-is (prerelease is significant)

Strings that are not semver-like (e.g. scoop's ``2.40.0.windows.1``)
are compared exactly after the ``v`` is stripped.
No I/O, no subprocess.
"""

from __future__ import annotations

import re

_NUM = r"(?:0|[1-9]\d*)"
_IDENT = r"[0-9A-Za-z-]+"

_SEMVER_RE = re.compile(
    rf"^(?P<major>{_NUM})"
    rf"(?:\.(?P<minor>{_NUM})"
    rf"(?:\.(?P<patch>{_NUM})"
    rf"(?:-(?P<pre>{_IDENT}(?:\.{_IDENT})*))?"
    rf"(?:\+(?P<build>{_IDENT}(?:\.{_IDENT})*))?"
    rf")?)?$"
)


def normalize(version: str) -> str:
    """Strip a single leading ``v`` (``v1.2.3`` → ``1.2.3``)."""
    if version.startswith("v"):
        return version[1:]
    return version


def canonical(version: str) -> str | None:
    """Return the canonical ``MAJOR.MINOR.PATCH[-PRE]`` form, or None.

    None means the string is not a semantic version.
    """
    match = _SEMVER_RE.match(normalize(version))
    if not match:
        return None

    result = ".".join((
        match.group("major"),
        match.group("minor") or "0",
        match.group("patch") or "0",
    ))
    if match.group("pre"):
        result += f"-{match.group('pre')}"
    return result


def versions_equal(a: str, b: str) -> bool:
    """Whether two version strings denote the same version.

    Two empty strings are equal; empty vs non-empty never is.
    """
    if not a and not b:
        return True
    if not a or not b:
        return False

    canon_a = canonical(a)
    canon_b = canonical(b)
    if canon_a is not None and canon_b is not None:
        return canon_a == canon_b

    return normalize(a) == normalize(b)
