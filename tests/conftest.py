"""Shared pytest fixtures for proxywire tests."""

import pytest

from proxywire import Lifetime, Registry


@pytest.fixture()
def registry() -> Registry:
    """Empty registry with transient default lifetime."""
    return Registry()


@pytest.fixture()
def scoped_registry() -> Registry:
    """Empty registry whose registrations default to the scoped lifetime."""
    return Registry(default_lifetime=Lifetime.SCOPED)
