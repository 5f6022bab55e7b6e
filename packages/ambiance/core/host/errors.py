"""Errors raised by collaborator implementations."""

from __future__ import annotations


class ContainerNotFoundError(KeyError):
    """Raised when a container key is not in the store."""

    pass
