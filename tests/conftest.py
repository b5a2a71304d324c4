"""Shared pytest fixtures for diregistry tests."""

import pytest

from diregistry import AutowireResolver, Container


@pytest.fixture()
def container() -> Container:
    """Empty container without delegates."""
    return Container()


@pytest.fixture()
def autowire_container() -> Container:
    """Container with an attached autowire delegate."""
    container = Container()
    container.add_delegate(AutowireResolver())
    return container
