from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from diregistry._internal.arguments import ContainerAwareMixin
from diregistry._internal.autoregistration import AutowirePolicy
from diregistry._internal.dependencies import ConstructorInspector, ConstructorParameter
from diregistry._internal.integrations.pydantic_settings import is_pydantic_settings_subclass
from diregistry._internal.resolution_stack import tracking
from diregistry._internal.type_checks import (
    TypeLocator,
    identifier_for,
    is_runtime_class,
    qualified_name,
)
from diregistry.exceptions import (
    DIRegistryContainerError,
    DIRegistryNotFoundError,
    DIRegistryUnresolvableParameterError,
)

logger = logging.getLogger(__name__)

_UNRESOLVED: Any = object()


class AutowireResolver(ContainerAwareMixin):
    """Delegate that builds classes by resolving their constructor parameters.

    Any identifier naming a loadable class is accepted. Each constructor
    parameter is filled, in declaration order, by the first rule that
    applies:

    1. A value from ``overrides`` with the parameter's name, unless the
       annotation is a union of several types.
    2. For a non-primitive class annotation: the container's service for that
       class, ``None`` when the annotation is optional, or a recursively
       autowired instance when the class is instantiable.
    3. The parameter's default value.

    A parameter matched by no rule raises
    ``DIRegistryUnresolvableParameterError``.

    Register it last so explicit definitions and other delegates win:

    .. code-block:: python

        container.add_delegate(AutowireResolver())
        service = container.resolve(ReportService)

    """

    def __init__(self, policy: AutowirePolicy | None = None) -> None:
        self._policy = policy or AutowirePolicy()
        self._inspector = ConstructorInspector()
        self._types = TypeLocator()

    def has(self, identifier: str | type[Any]) -> bool:
        return self._class_for(identifier) is not None

    def get(
        self,
        identifier: str | type[Any],
        overrides: Mapping[str, Any] | None = None,
    ) -> Any:
        """Build an instance of the class named by ``identifier``.

        Args:
            identifier: Dotted class identifier (or the class itself).
            overrides: Values to use for constructor parameters, by name.

        Raises:
            DIRegistryNotFoundError: If the identifier is not a loadable class.
            DIRegistryContainerError: If the class cannot be instantiated.
            DIRegistryUnresolvableParameterError: If a parameter has no value.

        """
        name = identifier_for(identifier)
        cls = self._class_for(identifier)
        if cls is None:
            msg = f"Service ({name}) is not an existing class and therefore cannot be resolved."
            raise DIRegistryNotFoundError(msg)

        if self._container is not None and not self._container.detect_cycles:
            return self._build(cls, overrides or {})
        # Tracked under the resolver so a definition factory may autowire its own identifier.
        with tracking(self, name):
            return self._build(cls, overrides or {})

    def _build(self, cls: type[Any], overrides: Mapping[str, Any]) -> Any:
        if not self._policy.is_instantiable(cls):
            msg = f"Class '{qualified_name(cls)}' is not instantiable."
            raise DIRegistryContainerError(msg)

        if is_pydantic_settings_subclass(cls):
            logger.debug("Autowiring settings %s from the environment", qualified_name(cls))
            return cls()

        parameters = self._inspector.get_parameters(cls)
        if parameters is None:
            return cls()

        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        for parameter in parameters:
            value = self._resolve_parameter(cls, parameter, overrides)
            if parameter.is_keyword_only:
                kwargs[parameter.name] = value
            else:
                args.append(value)

        logger.debug("Autowiring %s", qualified_name(cls))
        return cls(*args, **kwargs)

    def _resolve_parameter(
        self,
        owner: type[Any],
        parameter: ConstructorParameter,
        overrides: Mapping[str, Any],
    ) -> Any:
        if parameter.name in overrides and not parameter.is_multi_type_union:
            return overrides[parameter.name]

        value = self._resolve_by_type(parameter)
        if value is not _UNRESOLVED:
            return value

        if parameter.has_default:
            return parameter.default

        raise DIRegistryUnresolvableParameterError(qualified_name(owner), parameter.name)

    def _resolve_by_type(self, parameter: ConstructorParameter) -> Any:
        members = parameter.union_members
        if len(members) != 1 or not self._policy.is_injectable(members[0]):
            return _UNRESOLVED
        dependency = members[0]

        if self._container is not None and self._container.has(dependency):
            return self._container.resolve(dependency)
        if parameter.allows_none:
            return None
        if self._policy.is_instantiable(dependency):
            return self.get(dependency)
        return _UNRESOLVED

    def _class_for(self, identifier: object) -> type[Any] | None:
        if is_runtime_class(identifier):
            return identifier
        name = identifier_for(identifier)
        if self._container is not None:
            return self._container.types.locate(name)
        return self._types.locate(name)
