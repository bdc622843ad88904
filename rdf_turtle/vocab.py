"""Predefined IRI terms for the RDF and XSD vocabularies."""

from __future__ import annotations

from .namespaces import RDF_LANG_STRING_IRI, RDF_NS, RDF_TYPE_IRI, RDFS_NS, XSD_NS, XSD_STRING_IRI
from .terms import IRI

RDF_TYPE = IRI(RDF_TYPE_IRI)
RDF_LANG_STRING = IRI(RDF_LANG_STRING_IRI)
RDF_PROPERTY = IRI(f"{RDF_NS}Property")

RDFS_LABEL = IRI(f"{RDFS_NS}label")
RDFS_COMMENT = IRI(f"{RDFS_NS}comment")
RDFS_CLASS = IRI(f"{RDFS_NS}Class")

XSD_STRING = IRI(XSD_STRING_IRI)
XSD_BOOLEAN = IRI(f"{XSD_NS}boolean")
XSD_INTEGER = IRI(f"{XSD_NS}integer")
XSD_INT = IRI(f"{XSD_NS}int")
XSD_DECIMAL = IRI(f"{XSD_NS}decimal")
XSD_DOUBLE = IRI(f"{XSD_NS}double")
XSD_DATE = IRI(f"{XSD_NS}date")
XSD_DATE_TIME = IRI(f"{XSD_NS}dateTime")

# Datatypes that Turtle writes without a ``^^`` suffix.
IMPLICIT_DATATYPES = frozenset({XSD_STRING, RDF_LANG_STRING})
