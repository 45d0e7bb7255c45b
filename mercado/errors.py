"""Exception hierarchy for storage and AI service failures."""

from __future__ import annotations


class MercadoError(Exception):
    """Base class for every failure surfaced to the caller."""


class StorageError(MercadoError):
    pass


class StorageReadError(StorageError):
    """Saved lists could not be read or parsed."""


class StorageWriteError(StorageError):
    """A saved list could not be written or deleted."""


class ServiceError(MercadoError):
    pass


class ClassificationError(ServiceError):
    """The product could not be identified from the image."""


class AssistantError(ServiceError):
    """The assistant did not produce a reply."""
