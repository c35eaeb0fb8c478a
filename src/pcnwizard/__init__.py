"""Guided wizard for contesting UK parking notices."""

__version__ = "0.1.0"
