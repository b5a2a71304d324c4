from diregistry._internal.arguments import Argument, ContainerAware, ContainerAwareMixin, ValueArgument
from diregistry._internal.autowire import AutowireResolver
from diregistry._internal.container import Container
from diregistry._internal.definitions import Definition, DefinitionAggregate
from diregistry._internal.delegates import Delegate, ParameterResolver
from diregistry._internal.injection import InjectionKind, SignatureSource
from diregistry._internal.providers import AbstractProvider, Provider, ProviderAggregate
from diregistry.exceptions import (
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

__all__ = [
    "AbstractProvider",
    "Argument",
    "AutowireResolver",
    "Container",
    "ContainerAware",
    "ContainerAwareMixin",
    "DIRegistryCircularDependencyError",
    "DIRegistryContainerError",
    "DIRegistryError",
    "DIRegistryInvalidArgumentError",
    "DIRegistryInvalidSignatureError",
    "DIRegistryNotFoundError",
    "DIRegistryNotInjectedError",
    "DIRegistryProviderLiedError",
    "DIRegistryUnresolvableParameterError",
    "Definition",
    "DefinitionAggregate",
    "Delegate",
    "InjectionKind",
    "ParameterResolver",
    "Provider",
    "ProviderAggregate",
    "SignatureSource",
    "ValueArgument",
]
