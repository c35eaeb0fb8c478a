"""Persistence bridge that lets a case survive the payment redirect."""

from pcnwizard.persistence.store import CaseStore, InMemoryCaseStore, JsonFileCaseStore

__all__ = ["CaseStore", "InMemoryCaseStore", "JsonFileCaseStore"]
