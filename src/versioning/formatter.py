"""String formatting for version ranges.

Format codes:
    N  normalized interval, e.g. ``[1.0.0, 2.0.0)``
    P  pretty print with parentheses, e.g. ``(>= 1.0.0 && < 2.0.0)``
    p  pretty print without parentheses
    L  lower bound only
    U  upper bound only
    S  short hand where possible
    D  legacy interval (floats shown as their minimum)
    T  legacy short hand
    A  short hand that keeps float notation
Any other character is copied through.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from .version import NuGetVersion
    from .version_range import VersionRange


def format_range(fmt: str, version_range: "VersionRange") -> str:
    """Render ``version_range`` according to ``fmt`` (defaults to ``N``)."""
    if not fmt or not fmt.strip():
        fmt = "N"
    out: List[str] = []
    for code in fmt:
        _format_code(out, code, version_range)
    return "".join(out)


def _format_code(out: List[str], code: str, vr: "VersionRange") -> None:
    # pylint: disable=too-many-branches
    if code == "P":
        _pretty_print(out, vr, True)
    elif code == "p":
        _pretty_print(out, vr, False)
    elif code == "L":
        if vr.has_lower_bound:
            out.append(_normalized(vr.min_version))
    elif code == "U":
        if vr.has_upper_bound:
            out.append(_normalized(vr.max_version))
    elif code == "S":
        _to_string(out, vr)
    elif code == "N":
        _normalized_range(out, vr)
    elif code == "D":
        _legacy_range(out, vr)
    elif code == "T":
        _legacy_short(out, vr)
    elif code == "A":
        _short_string(out, vr)
    else:
        out.append(code)


def _normalized(version: "NuGetVersion") -> str:
    return version.to_normalized_string()


def _is_exact(vr: "VersionRange") -> bool:
    return (
        vr.has_lower_and_upper_bounds
        and vr.is_min_inclusive
        and vr.is_max_inclusive
        and vr.min_version == vr.max_version
    )


def _short_string(out: List[str], vr: "VersionRange") -> None:
    if vr.has_lower_bound and vr.is_min_inclusive and not vr.has_upper_bound:
        out.append(str(vr.float_range) if vr.is_floating else _normalized(vr.min_version))
    elif _is_exact(vr):
        out.append(f"[{_normalized(vr.min_version)}]")
    else:
        _normalized_range(out, vr)


def _normalized_range(out: List[str], vr: "VersionRange") -> None:
    out.append("[" if vr.is_min_inclusive else "(")
    if vr.has_lower_bound:
        out.append(str(vr.float_range) if vr.is_floating else _normalized(vr.min_version))
    out.append(", ")
    if vr.has_upper_bound:
        out.append(_normalized(vr.max_version))
    out.append("]" if vr.is_max_inclusive else ")")


def _to_string(out: List[str], vr: "VersionRange") -> None:
    if vr.has_lower_bound and vr.is_min_inclusive and not vr.has_upper_bound:
        out.append(_normalized(vr.min_version))
    elif _is_exact(vr):
        out.append(f"[{_normalized(vr.min_version)}]")
    else:
        _normalized_range(out, vr)


def _legacy_short(out: List[str], vr: "VersionRange") -> None:
    if vr.has_lower_bound and vr.is_min_inclusive and not vr.has_upper_bound:
        out.append(_normalized(vr.min_version))
    elif _is_exact(vr):
        out.append(f"[{_normalized(vr.min_version)}]")
    else:
        _legacy_range(out, vr)


def _legacy_range(out: List[str], vr: "VersionRange") -> None:
    out.append("[" if vr.is_min_inclusive else "(")
    if vr.has_lower_bound:
        out.append(_normalized(vr.min_version))
    out.append(", ")
    if vr.has_upper_bound:
        out.append(_normalized(vr.max_version))
    out.append("]" if vr.is_max_inclusive else ")")


def _pretty_print(out: List[str], vr: "VersionRange", parentheses: bool) -> None:
    if not vr.has_lower_bound and not vr.has_upper_bound:
        return
    if parentheses:
        out.append("(")
    if _is_exact(vr):
        out.append("= " + _normalized(vr.min_version))
    else:
        if vr.has_lower_bound:
            out.append(_bound(">", vr.min_version, vr.is_min_inclusive))
        if vr.has_lower_and_upper_bounds:
            out.append(" && ")
        if vr.has_upper_bound:
            out.append(_bound("<", vr.max_version, vr.is_max_inclusive))
    if parentheses:
        out.append(")")


def _bound(char: str, version: "NuGetVersion", inclusive: bool) -> str:
    return f"{char}{'= ' if inclusive else ' '}{_normalized(version)}"
