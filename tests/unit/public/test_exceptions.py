"""Tests for the exception hierarchy and the public API surface."""

import pytest

import diregistry
from diregistry import (
    Container,
    DIRegistryCircularDependencyError,
    DIRegistryContainerError,
    DIRegistryError,
    DIRegistryInvalidArgumentError,
    DIRegistryInvalidSignatureError,
    DIRegistryNotFoundError,
    DIRegistryNotInjectedError,
    DIRegistryProviderLiedError,
    DIRegistryUnresolvableParameterError,
)


@pytest.mark.parametrize(
    ("error", "parent"),
    [
        (DIRegistryNotFoundError, DIRegistryError),
        (DIRegistryContainerError, DIRegistryError),
        (DIRegistryInvalidArgumentError, DIRegistryError),
        (DIRegistryProviderLiedError, DIRegistryContainerError),
        (DIRegistryInvalidSignatureError, DIRegistryContainerError),
        (DIRegistryNotInjectedError, DIRegistryContainerError),
        (DIRegistryNotInjectedError, AttributeError),
        (DIRegistryCircularDependencyError, DIRegistryContainerError),
        (DIRegistryUnresolvableParameterError, DIRegistryInvalidArgumentError),
    ],
)
def test_hierarchy(error: type[Exception], parent: type[Exception]) -> None:
    assert issubclass(error, parent)


def test_not_found_is_not_a_container_error() -> None:
    assert not issubclass(DIRegistryNotFoundError, DIRegistryContainerError)


def test_circular_dependency_message_lists_chain() -> None:
    error = DIRegistryCircularDependencyError(("a", "b", "a"))

    assert error.chain == ("a", "b", "a")
    assert str(error) == "Circular dependency detected: a -> b -> a"


def test_unresolvable_parameter_attributes() -> None:
    error = DIRegistryUnresolvableParameterError("app.Service", "retries")

    assert error.owner == "app.Service"
    assert error.parameter == "retries"
    assert str(error) == "Cannot resolve the dependency 'retries' of app.Service"


def test_base_error_catches_every_failure(container: Container) -> None:
    with pytest.raises(DIRegistryError):
        container.resolve("missing")
    with pytest.raises(DIRegistryError):
        container.add("")


def test_public_api_exports() -> None:
    for name in diregistry.__all__:
        assert hasattr(diregistry, name), name
    assert "Container" in diregistry.__all__
    assert "AutowireResolver" in diregistry.__all__
