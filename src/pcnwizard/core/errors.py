"""Exceptions raised across the wizard, analyzer and export layers."""

from __future__ import annotations


class AnalyzerError(Exception):
    """The analyzer failed: transport error or a response outside the schema."""


class AnalyzerConfigError(AnalyzerError):
    """The analyzer cannot run at all, e.g. credentials are missing."""


class ScanInProgressError(RuntimeError):
    """An analyzer call is already in flight for the current screen."""


class ExportUnavailableError(RuntimeError):
    """Export requested outside the result screen or before unlocking."""
