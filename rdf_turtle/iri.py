"""IRI reference helpers: scheme detection, RFC 3986 resolution, IRIREF encoding."""

from __future__ import annotations

import re
from urllib.parse import SplitResult, urlsplit, urlunsplit

from .errors import ConstraintViolation

SCHEME_PREFIX_RE = re.compile(r"[A-Za-z][A-Za-z0-9+.-]*:")

# Characters that may not appear raw between ``<`` and ``>``.
IRIREF_FORBIDDEN = '<>"{}|^`\\'


def has_scheme(value: str) -> bool:
    """Return whether ``value`` starts with ``scheme:`` and is thus absolute."""
    return SCHEME_PREFIX_RE.match(value) is not None


def is_iriref_char(ch: str) -> bool:
    """Return whether ``ch`` may stand unescaped inside an IRIREF."""
    return ch not in IRIREF_FORBIDDEN and ord(ch) > 0x20


def encode_iri_ref(value: str) -> str:
    """Render ``value`` as ``<...>``, escaping characters an IRIREF forbids."""
    body = "".join(ch if is_iriref_char(ch) else f"\\u{ord(ch):04X}" for ch in value)
    return f"<{body}>"


def remove_dot_segments(path: str) -> str:
    """Normalize ``path`` by removing ``.`` and ``..`` segments (RFC 3986 5.2.4).

    Works on the ``/``-separated segment list. A trailing ``.`` or ``..``
    leaves a trailing slash, and ``..`` above the root is discarded.
    """
    if not path:
        return path
    rooted = path.startswith("/")
    segments = path[1:].split("/") if rooted else path.split("/")
    kept: list[str] = []
    last = len(segments) - 1
    for index, segment in enumerate(segments):
        if segment in (".", ".."):
            if segment == ".." and kept:
                kept.pop()
                # Popping the head of a rootless path leaves the rest rooted.
                rooted = rooted or not kept
            if index == last:
                kept.append("")
            continue
        kept.append(segment)
    joined = "/".join(kept)
    return "/" + joined if rooted else joined


def merge_paths(base_path: str, base_has_authority: bool, ref_path: str) -> str:
    """Merge a relative-path reference onto the base path (RFC 3986 5.2.3)."""
    if base_has_authority and not base_path:
        return "/" + ref_path
    directory, slash, _ = base_path.rpartition("/")
    return directory + slash + ref_path


def split_iri_reference(value: str) -> SplitResult:
    """Split ``value`` into its components, rejecting what cannot be an IRI.

    ``urlsplit`` silently drops tabs and newlines and raises a bare
    ``ValueError`` on a malformed bracketed host. Both are reported as a
    :class:`ConstraintViolation` tagged ``iri-reference`` instead.
    """
    bad = [ch for ch in value if ord(ch) <= 0x20]
    if bad:
        raise ConstraintViolation(
            f"IRI reference {value!r} contains whitespace or control character {bad[0]!r}",
            constraint="iri-reference",
        )
    try:
        return urlsplit(value)
    except ValueError as exc:
        raise ConstraintViolation(
            f"malformed IRI reference {value!r}: {exc}", constraint="iri-reference"
        ) from exc


def _target_components(base_iri: str, ref_iri: str, ref: SplitResult) -> tuple[str, str, str, str]:
    """Return scheme, authority, path and query of the resolved target (RFC 3986 5.2.2)."""
    if has_scheme(ref_iri):
        return ref.scheme, ref.netloc, remove_dot_segments(ref.path), ref.query
    base = split_iri_reference(base_iri)
    if ref_iri.startswith("//"):
        return base.scheme, ref.netloc, remove_dot_segments(ref.path), ref.query
    if not ref.path:
        query = ref.query if _has_query_marker(ref_iri) else base.query
        return base.scheme, base.netloc, base.path, query
    if ref.path.startswith("/"):
        path = ref.path
    else:
        path = merge_paths(base.path, bool(base.netloc), ref.path)
    return base.scheme, base.netloc, remove_dot_segments(path), ref.query


def _has_query_marker(value: str) -> bool:
    return "?" in value.partition("#")[0]


def resolve_iri_reference(base_iri: str, ref_iri: str) -> str:
    """Resolve ``ref_iri`` against ``base_iri``.

    References that already carry a scheme are returned with only dot
    segments normalized. Empty query and fragment markers (``?``/``#``) on
    the reference survive resolution, which ``urlunsplit`` alone would drop.
    Raises :class:`ConstraintViolation` when either side cannot be split.
    """
    ref = split_iri_reference(ref_iri)
    scheme, netloc, path, query = _target_components(base_iri, ref_iri, ref)
    resolved = urlunsplit((scheme, netloc, path, query, ref.fragment))

    if _has_query_marker(ref_iri) and not query:
        head, sep, tail = resolved.partition("#")
        resolved = head + "?" + sep + tail
    if "#" in ref_iri and not ref.fragment:
        resolved += "#"
    return resolved
