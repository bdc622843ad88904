"""Namespace strings and the well-known prefix table used for serialization."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType

RDF_NS = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"
RDFS_NS = "http://www.w3.org/2000/01/rdf-schema#"
XSD_NS = "http://www.w3.org/2001/XMLSchema#"
OWL_NS = "http://www.w3.org/2002/07/owl#"

RDF_TYPE_IRI = f"{RDF_NS}type"
RDF_LANG_STRING_IRI = f"{RDF_NS}langString"
XSD_STRING_IRI = f"{XSD_NS}string"

# Canonical forms; vocabularies published under http:// stay http:// here.
WELL_KNOWN_PREFIXES = MappingProxyType(
    {
        "acl": "http://www.w3.org/ns/auth/acl#",
        "dc": "http://purl.org/dc/elements/1.1/",
        "dcterms": "http://purl.org/dc/terms/",
        "foaf": "http://xmlns.com/foaf/0.1/",
        "ldp": "http://www.w3.org/ns/ldp#",
        "owl": OWL_NS,
        "rdf": RDF_NS,
        "rdfs": RDFS_NS,
        "schema": "https://schema.org/",
        "skos": "http://www.w3.org/2004/02/skos/core#",
        "solid": "http://www.w3.org/ns/solid/terms#",
        "vcard": "http://www.w3.org/2006/vcard/ns#",
        "xsd": XSD_NS,
    }
)


class NamespaceMappings(Mapping[str, str]):
    """Read-only prefix -> namespace table.

    The default instance carries the well-known vocabularies. Use
    :meth:`custom` to overlay project-specific prefixes; custom entries win on
    conflicting prefixes. Instances never change after construction and can be
    shared freely between serializer calls and threads.
    """

    def __init__(self, mappings: Mapping[str, str] | None = None):
        """Initialize the table from ``mappings`` or the well-known defaults."""
        source = WELL_KNOWN_PREFIXES if mappings is None else mappings
        self._mappings = MappingProxyType(dict(source))

    @classmethod
    def custom(cls, mappings: Mapping[str, str]) -> NamespaceMappings:
        """Return the defaults overlaid with ``mappings``."""
        return cls({**WELL_KNOWN_PREFIXES, **mappings})

    def __getitem__(self, prefix: str) -> str:
        return self._mappings[prefix]

    def __iter__(self) -> Iterator[str]:
        return iter(self._mappings)

    def __len__(self) -> int:
        return len(self._mappings)

    def as_dict(self) -> dict[str, str]:
        """Return a plain mutable copy of the table."""
        return dict(self._mappings)

    def __repr__(self) -> str:
        return f"NamespaceMappings({dict(self._mappings)!r})"


DEFAULT_NAMESPACE_MAPPINGS = NamespaceMappings()
