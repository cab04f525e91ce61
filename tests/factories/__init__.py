"""Test factories and in-memory collaborators."""

from tests.factories.identity import IdentityFactory, StudentRecordFactory
from tests.factories.stores import (
    FailingRecordStore,
    InMemoryRecordStore,
    StaticVerifier,
)


__all__ = [
    "FailingRecordStore",
    "IdentityFactory",
    "InMemoryRecordStore",
    "StaticVerifier",
    "StudentRecordFactory",
]
