"""Autogenerated markdown link reference definitions."""

from .formatter import format_block, format_entry
from .graph import encode_reference, resolve_outbound_links
from .locator import FoundBySentinel, FoundImplicit, NotFound, locate_block
from .synthesizer import generate_link_references

__all__ = [
    "encode_reference",
    "format_block",
    "format_entry",
    "generate_link_references",
    "locate_block",
    "resolve_outbound_links",
    "FoundBySentinel",
    "FoundImplicit",
    "NotFound",
]
