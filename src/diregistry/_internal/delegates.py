from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from typing_extensions import Self

from diregistry._internal.arguments import ContainerAwareMixin
from diregistry._internal.integrations.pydantic_settings import settings_parameters
from diregistry.exceptions import DIRegistryNotFoundError


@runtime_checkable
class Delegate(Protocol):
    """Fallback resolution source consulted after definitions and providers miss."""

    def has(self, identifier: str) -> bool: ...

    def get(self, identifier: str) -> Any: ...


class ParameterResolver(ContainerAwareMixin):
    """Delegate serving plain values stored under arbitrary keys.

    Values are returned as-is by ``Container.resolve``, which makes this the
    natural home for configuration parameters:

    .. code-block:: python

        parameters = ParameterResolver().add_parameter("app.name", "Billing")
        container.add_delegate(parameters)
        container.add("greeter", Greeter).add_argument("app.name")

    """

    def __init__(self, parameters: Mapping[str, Any] | None = None) -> None:
        self._parameters: dict[str, Any] = dict(parameters or {})

    def add_parameter(self, identifier: str, value: Any) -> Self:
        self._parameters[identifier] = value
        return self

    def add_parameters(self, parameters: Mapping[str, Any]) -> Self:
        self._parameters.update(parameters)
        return self

    def add_settings(self, settings: Any, prefix: str | None = None) -> Self:
        """Store every field of a pydantic settings model as a parameter.

        Nested models and mappings are flattened into dotted keys, so a
        ``database.url`` field of a nested model is served under
        ``"database.url"`` (or ``"<prefix>.database.url"``). The nested
        values themselves stay available as dicts under their own key.

        Args:
            settings: A ``pydantic_settings.BaseSettings`` (or any pydantic
                model) instance.
            prefix: Optional key prefix.

        """
        self._parameters.update(settings_parameters(settings, prefix=prefix))
        return self

    def get(self, identifier: str) -> Any:
        try:
            return self._parameters[identifier]
        except KeyError:
            msg = f"Parameter {identifier} not found"
            raise DIRegistryNotFoundError(msg) from None

    def has(self, identifier: str) -> bool:
        return identifier in self._parameters
