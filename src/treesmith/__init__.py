"""Treesmith: folder structure diagrams, code collection and distribution."""

__version__ = "0.4.0"
