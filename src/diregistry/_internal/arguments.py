from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from typing_extensions import Self

from diregistry._internal.type_checks import is_runtime_class, qualified_name
from diregistry.exceptions import DIRegistryContainerError, DIRegistryInvalidArgumentError

if TYPE_CHECKING:
    from diregistry._internal.container import Container


class Argument(ABC):
    """A definition argument that supplies its own value.

    Subclass it when a constructor argument should not be looked up in the
    container by identifier.
    """

    @abstractmethod
    def get(self) -> Any:
        """Return the value passed to the constructor or factory."""


class ValueArgument(Argument):
    """Argument that passes a literal value through unchanged."""

    def __init__(self, value: Any) -> None:
        self.value = value

    def get(self) -> Any:
        return self.value

    def __repr__(self) -> str:
        return f"ValueArgument({self.value!r})"


@runtime_checkable
class ContainerAware(Protocol):
    """Object that accepts a back-reference to the container it is attached to."""

    def set_container(self, container: Container) -> Self: ...


class ContainerAwareMixin:
    """Store the container back-reference for providers and delegates."""

    _container: Container | None = None

    def set_container(self, container: Container) -> Self:
        self._container = container
        return self

    def get_container(self) -> Container:
        if self._container is None:
            msg = f"{type(self).__qualname__} is not attached to a container."
            raise DIRegistryContainerError(msg)
        return self._container

    @property
    def has_container(self) -> bool:
        return self._container is not None


def resolve_argument(container: Container, argument: object) -> Any:
    """Turn one definition argument into a value.

    Args:
        container: Container used for identifier lookups.
        argument: Identifier string, class, or ``Argument`` instance.

    Raises:
        DIRegistryInvalidArgumentError: If the argument has any other type.

    """
    if isinstance(argument, str):
        return container.resolve(argument)
    if isinstance(argument, Argument):
        return argument.get()
    if is_runtime_class(argument):
        return container.resolve(argument)

    msg = (
        f"Invalid argument type: expected str or {qualified_name(Argument)}, "
        f"found {type(argument).__qualname__}."
    )
    raise DIRegistryInvalidArgumentError(msg)


def resolve_arguments(container: Container, arguments: Iterable[object]) -> list[Any]:
    return [resolve_argument(container, argument) for argument in arguments]
