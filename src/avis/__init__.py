"""Avis: feedback collection API with French sentiment scoring."""

__version__ = "0.1.0"
