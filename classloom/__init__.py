"""Classloom — Mermaid class diagrams from C# source trees."""

__version__ = "0.1.0"
