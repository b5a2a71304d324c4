from __future__ import annotations

import importlib
import types
from typing import Any, TypeGuard

from diregistry.exceptions import DIRegistryInvalidArgumentError

_LOCALS_MARKER = "<locals>"


def is_runtime_class(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when candidate is a runtime class safe for class-only operations.

    Args:
        candidate: Value being checked for eligibility or runtime type constraints.

    """
    return isinstance(candidate, type) and not isinstance(candidate, types.GenericAlias)


def qualified_name(cls: type[Any]) -> str:
    """Return the dotted identifier used for a class inside the container."""
    return f"{cls.__module__}.{cls.__qualname__}"


def identifier_for(identifier: object) -> str:
    """Normalise a user supplied identifier to its string form.

    Args:
        identifier: A non-empty string or a runtime class.

    Raises:
        DIRegistryInvalidArgumentError: If the identifier is empty or of an
            unsupported type.

    """
    if isinstance(identifier, str):
        if not identifier:
            msg = "Service identifier must not be empty."
            raise DIRegistryInvalidArgumentError(msg)
        return identifier
    if is_runtime_class(identifier):
        return qualified_name(identifier)
    msg = f"Service identifier must be a string or a class, got {identifier!r}."
    raise DIRegistryInvalidArgumentError(msg)


class TypeLocator:
    """Map dotted identifiers back to classes.

    Classes seen by the container are remembered by their qualified name, so
    classes that cannot be imported (for example ones defined inside a
    function) can still be located. Other names are imported on demand.
    """

    def __init__(self) -> None:
        self._known: dict[str, type[Any]] = {}

    def remember(self, cls: type[Any]) -> str:
        name = qualified_name(cls)
        self._known[name] = cls
        return name

    def locate(self, name: str) -> type[Any] | None:
        """Return the class named by ``name`` or ``None`` when it is not loadable."""
        known = self._known.get(name)
        if known is not None:
            return known

        candidate = import_dotted(name)
        if not is_runtime_class(candidate):
            return None
        self._known[name] = candidate
        return candidate


def import_dotted(name: str) -> object | None:
    """Import ``name`` as ``module.attr.attr`` using the longest importable module prefix."""
    if _LOCALS_MARKER in name:
        return None
    parts = name.split(".")
    if not all(part.isidentifier() for part in parts):
        return None

    for split in range(len(parts) - 1, 0, -1):
        module_name = ".".join(parts[:split])
        try:
            target: object = importlib.import_module(module_name)
        except ImportError:
            continue
        for attribute in parts[split:]:
            target = getattr(target, attribute, None)
            if target is None:
                return None
        return target
    return None


__all__ = ["TypeLocator", "identifier_for", "import_dotted", "is_runtime_class", "qualified_name"]
