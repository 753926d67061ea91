"""Parsers for HTML submissions."""
from parsers.document_model import DocumentModel

__all__ = ["DocumentModel"]
