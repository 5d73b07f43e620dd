"""Decide whether an installed dependency range already covers a required one.

Ranges follow the semver requirement grammar used by package.json: caret,
tilde, comparison operators and ``x``/``*`` wildcards. Each comparator is
translated into a PEP 440 specifier so the actual containment check runs on
:mod:`packaging`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import InvalidVersion, Version

_OPERATOR_GAP_RE = re.compile(r"(>=|<=|>|<|=|~|\^)\s+")
_SEPARATOR_RE = re.compile(r"[\s,]+")
_COMPARATOR_RE = re.compile(
    r"^(?P<op>>=|<=|>|<|=|~|\^)?v?"
    r"(?P<major>\d+|[xX*])"
    r"(?:\.(?P<minor>\d+|[xX*]))?"
    r"(?:\.(?P<patch>\d+|[xX*]))?"
    r"(?:-(?P<pre>[0-9A-Za-z.-]+))?"
    r"(?:\+[0-9A-Za-z.-]+)?$"
)
_WILDCARDS = {"x", "X", "*"}


@dataclass(frozen=True)
class _Comparator:
    op: str
    major: int
    minor: int | None = None
    patch: int | None = None
    pre: str | None = None

    def version_text(self, *, bump_patch: bool = False) -> str:
        patch = (self.patch or 0) + (1 if bump_patch else 0)
        text = f"{self.major}.{self.minor or 0}.{patch}"
        return f"{text}-{self.pre}" if self.pre else text

    def specifiers(self) -> list[str]:
        major, minor, patch = self.major, self.minor, self.patch
        if self.op == "=":
            if minor is None:
                return [f">={major}.0.0", f"<{major + 1}.0.0"]
            if patch is None:
                return [f">={major}.{minor}.0", f"<{major}.{minor + 1}.0"]
            return [f"=={self.version_text()}"]
        if self.op == ">":
            if minor is None:
                return [f">={major + 1}.0.0"]
            if patch is None:
                return [f">={major}.{minor + 1}.0"]
            return [f">{self.version_text()}"]
        if self.op == ">=":
            return [f">={self.version_text()}"]
        if self.op == "<":
            return [f"<{self.version_text()}"]
        if self.op == "<=":
            if minor is None:
                return [f"<{major + 1}.0.0"]
            if patch is None:
                return [f"<{major}.{minor + 1}.0"]
            return [f"<={self.version_text()}"]
        if self.op in ("~", "*"):
            if minor is None:
                return [f">={self.version_text()}", f"<{major + 1}.0.0"]
            return [f">={self.version_text()}", f"<{major}.{minor + 1}.0"]
        # caret
        if major > 0 or minor is None:
            return [f">={self.version_text()}", f"<{major + 1}.0.0"]
        if minor > 0 or patch is None:
            return [f">={self.version_text()}", f"<0.{minor + 1}.0"]
        return [f">={self.version_text()}", f"<0.0.{patch + 1}"]


def spec_satisfies(installed: str | None, required: str | None) -> bool:
    """Return True when ``installed`` accepts the lowest version ``required`` allows.

    Unparseable input never counts as satisfied, so the caller installs.
    """
    if installed is None or required is None:
        return False
    installed = installed.strip()
    required = required.strip()
    if not installed or not required:
        return False
    if installed == required:
        return True
    try:
        required_comparators = _parse_requirement(required)
        installed_comparators = _parse_requirement(installed)
        minimum = _minimal_version(required_comparators)
        if minimum is None:
            return False
        version = Version(minimum.version_text(bump_patch=minimum.op == ">"))
        if version.is_prerelease and not _allows_prerelease(installed_comparators, minimum):
            return False
        specifier = SpecifierSet(
            ",".join(spec for comparator in installed_comparators for spec in comparator.specifiers())
        )
        return specifier.contains(version, prereleases=True)
    except (ValueError, InvalidSpecifier, InvalidVersion):
        return False


def _parse_requirement(text: str) -> list[_Comparator]:
    normalized = _OPERATOR_GAP_RE.sub(r"\1", text.strip())
    comparators: list[_Comparator] = []
    for token in _SEPARATOR_RE.split(normalized):
        if not token:
            continue
        comparator = _parse_comparator(token)
        if comparator is not None:
            comparators.append(comparator)
    return comparators


def _parse_comparator(token: str) -> _Comparator | None:
    match = _COMPARATOR_RE.match(token)
    if match is None:
        raise ValueError(f"invalid version requirement `{token}`")
    op = match.group("op")
    parts = [match.group("major"), match.group("minor"), match.group("patch")]
    pre = match.group("pre")

    if parts[0] in _WILDCARDS:
        if op not in (None, "="):
            raise ValueError(f"unexpected wildcard in `{token}`")
        # a bare star places no constraint at all
        return None

    numbers: list[int | None] = []
    wildcard = False
    for part in parts:
        if part is None:
            numbers.append(None)
        elif part in _WILDCARDS:
            wildcard = True
            numbers.append(None)
        elif wildcard:
            raise ValueError(f"unexpected version after wildcard in `{token}`")
        else:
            numbers.append(int(part))

    if wildcard:
        if op not in (None, "="):
            raise ValueError(f"unexpected wildcard in `{token}`")
        if pre:
            raise ValueError(f"wildcard with prerelease in `{token}`")
        op = "*"
    elif op is None:
        op = "^"
    if pre and numbers[2] is None:
        raise ValueError(f"prerelease requires a full version in `{token}`")
    major, minor, patch = numbers
    return _Comparator(op=op, major=int(major or 0), minor=minor, patch=patch, pre=pre)


def _minimal_version(comparators: list[_Comparator]) -> _Comparator | None:
    if not comparators:
        return _Comparator(op="=", major=0, minor=0, patch=0)
    for comparator in comparators:
        if comparator.op in ("<", "<="):
            continue
        return comparator
    return None


def _allows_prerelease(comparators: list[_Comparator], minimum: _Comparator) -> bool:
    bumped = 1 if minimum.op == ">" else 0
    target = (minimum.major, minimum.minor or 0, (minimum.patch or 0) + bumped)
    for comparator in comparators:
        if comparator.pre and (comparator.major, comparator.minor, comparator.patch) == target:
            return True
    return False
