from __future__ import annotations

import inspect
import logging
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any

from typing_extensions import Self

from diregistry._internal.arguments import Argument, resolve_arguments
from diregistry._internal.type_checks import identifier_for, is_runtime_class, qualified_name
from diregistry.exceptions import (
    DIRegistryContainerError,
    DIRegistryInvalidArgumentError,
    DIRegistryNotFoundError,
)

if TYPE_CHECKING:
    from diregistry._internal.container import Container

logger = logging.getLogger(__name__)

_MISSING: Any = object()


class Definition:
    """Recipe for building one service.

    A definition holds the concrete (a class, a dotted class name, a factory
    callable or a literal value), the ordered constructor arguments, the
    ordered post-construction method calls and the shared flag. Shared
    definitions cache the first instance they build; transient ones build a
    new instance on every ``make``.

    Configuration methods return the definition itself so calls can be
    chained:

    .. code-block:: python

        container.add(Mailer).add_argument(Transport).inject_method_call("connect")

    """

    def __init__(self, concrete: Any, container: Container) -> None:
        self.concrete = concrete
        self._container = container
        self._arguments: list[object] = []
        self._method_calls: dict[str, list[Any] | None] = {}
        self._shared = False
        self._instance: Any = _MISSING

    def add_argument(self, argument: str | type[Any] | Argument) -> Self:
        """Append a constructor argument.

        Args:
            argument: Identifier resolved against the container at build
                time, a class (resolved by its identifier) or an ``Argument``
                that supplies the value itself.

        Raises:
            DIRegistryInvalidArgumentError: If the argument is none of those.

        """
        if not isinstance(argument, str | Argument) and not is_runtime_class(argument):
            msg = (
                f"Invalid argument type: expected str or {qualified_name(Argument)}, "
                f"found {type(argument).__qualname__}."
            )
            raise DIRegistryInvalidArgumentError(msg)
        self._arguments.append(argument)
        return self

    def add_arguments(self, arguments: Iterable[str | type[Any] | Argument]) -> Self:
        for argument in arguments:
            self.add_argument(argument)
        return self

    def inject_method_call(self, method: str, params: Sequence[Any] | None = None) -> Self:
        """Queue a method call on every instance this definition builds.

        Calls run in the order they were first queued. Queuing the same method
        again replaces its parameters but keeps its position.

        Args:
            method: Name of the method to call on the built instance.
            params: Positional arguments for the call, passed as-is.

        """
        self._method_calls[method] = list(params) if params is not None else None
        return self

    def get_concrete_arguments(self) -> list[object]:
        return list(self._arguments)

    def has_method_call(self) -> bool:
        return bool(self._method_calls)

    def is_shared(self) -> bool:
        return self._shared

    def set_shared(self, value: bool = True) -> Self:  # noqa: FBT001, FBT002
        self._shared = value
        return self

    def make(self, force_new: bool = False) -> Any:  # noqa: FBT001, FBT002
        """Return an instance of the service.

        Shared definitions return their cached instance unless ``force_new``
        is set. Forced builds never read or write the cache, but still run the
        queued method calls.

        Args:
            force_new: Build a fresh instance even when one is cached.

        Returns:
            The built (or cached) instance.

        """
        if self._shared and not force_new and self._instance is not _MISSING:
            return self._instance

        instance = self.resolve()
        self._invoke_method_calls(instance)

        if self._shared and not force_new:
            self._instance = instance
        return instance

    def resolve(self) -> Any:
        """Build the concrete without touching the cache or running method calls."""
        concrete = self.concrete
        if isinstance(concrete, str):
            located = self._container.types.locate(concrete)
            if located is not None:
                concrete = located

        if is_runtime_class(concrete):
            return self._resolve_class(concrete)

        if callable(concrete):
            return concrete(*resolve_arguments(self._container, self._arguments))

        return concrete

    def _resolve_class(self, cls: type[Any]) -> Any:
        if inspect.isabstract(cls):
            msg = f"Class '{qualified_name(cls)}' is abstract and cannot be instantiated."
            raise DIRegistryContainerError(msg)
        dependencies = resolve_arguments(self._container, self._arguments)
        return cls(*dependencies)

    def _invoke_method_calls(self, instance: Any) -> None:
        for name, params in self._method_calls.items():
            method = getattr(instance, name, None)
            if method is None or not callable(method):
                msg = f"{type(instance).__qualname__} has no callable method '{name}'."
                raise DIRegistryContainerError(msg)
            if params is None:
                method()
            else:
                method(*params)

    def __repr__(self) -> str:
        return f"Definition(concrete={self.concrete!r}, shared={self._shared})"


class DefinitionAggregate:
    """Identifier-keyed collection of definitions owned by one container."""

    def __init__(self) -> None:
        self._definitions: dict[str, Definition] = {}
        self._container: Container | None = None

    def set_container(self, container: Container) -> Self:
        self._container = container
        return self

    def add(self, identifier: str, concrete: Any = None) -> Definition:
        """Create the definition for ``identifier``, replacing any previous one.

        Args:
            identifier: Normalised service identifier.
            concrete: What to build. Defaults to the identifier itself.

        """
        if self._container is None:
            msg = "DefinitionAggregate is not attached to a container."
            raise DIRegistryContainerError(msg)
        if concrete is None:
            concrete = identifier
        if identifier in self._definitions:
            logger.debug("Replacing definition for %s", identifier)
        definition = Definition(concrete, self._container)
        self._definitions[identifier] = definition
        return definition

    def get(self, identifier: str) -> Definition:
        try:
            return self._definitions[identifier]
        except KeyError:
            msg = f"Service ({identifier}) is not a definition."
            raise DIRegistryNotFoundError(msg) from None

    def has(self, identifier: str) -> bool:
        return identifier in self._definitions

    def resolve(self, identifier: object, force_new: bool = False) -> Any:  # noqa: FBT001, FBT002
        return self.get(identifier_for(identifier)).make(force_new)

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, identifier: object) -> bool:
        return isinstance(identifier, str) and identifier in self._definitions
