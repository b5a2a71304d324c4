from __future__ import annotations

import importlib
import warnings
from collections.abc import Mapping
from typing import Any

from diregistry._internal.type_checks import is_runtime_class
from diregistry.exceptions import DIRegistryInvalidArgumentError

_PYDANTIC_V1_WARNING_PATTERN = (
    r"Core Pydantic V1 functionality isn't compatible with Python 3\.14 or greater\."
)


def _load_pydantic_settings_base() -> type[Any] | None:
    return _load_base_settings("pydantic_settings")


def _load_pydantic_v1_base() -> type[Any] | None:
    with warnings.catch_warnings():
        warnings.filterwarnings(
            "ignore",
            message=_PYDANTIC_V1_WARNING_PATTERN,
            category=UserWarning,
        )
        return _load_base_settings("pydantic.v1")


def _load_base_settings(module_name: str) -> type[Any] | None:
    try:
        module = importlib.import_module(module_name)
    except ImportError:
        return None
    base_settings = getattr(module, "BaseSettings", None)
    if isinstance(base_settings, type):
        return base_settings
    return None


def _build_settings_bases() -> tuple[type[Any], ...]:
    bases: list[type[Any]] = []
    for candidate in (_load_pydantic_settings_base(), _load_pydantic_v1_base()):
        if candidate is not None and candidate not in bases:
            bases.append(candidate)
    return tuple(bases)


SETTINGS_BASES: tuple[type[Any], ...] = _build_settings_bases()


def is_pydantic_settings_subclass(candidate: object) -> bool:
    """Return whether a class is a supported Pydantic settings model.

    Both ``pydantic_settings.BaseSettings`` and the legacy
    ``pydantic.v1.BaseSettings`` are recognised when installed. Without
    pydantic every candidate is rejected.

    The autowire resolver builds such classes with no arguments so that their
    values are read from the environment.

    Args:
        candidate: Object to test.

    """
    if not is_runtime_class(candidate):
        return False
    try:
        return any(issubclass(candidate, base) for base in SETTINGS_BASES)
    except TypeError:
        return False


def settings_parameters(settings: Any, prefix: str | None = None) -> dict[str, Any]:
    """Flatten a pydantic model instance into dotted parameter keys.

    Args:
        settings: Pydantic model instance (v2 ``model_dump`` or v1 ``dict``).
        prefix: Optional prefix prepended to every key.

    Raises:
        DIRegistryInvalidArgumentError: If ``settings`` is not a pydantic model.

    """
    if hasattr(settings, "model_dump"):
        values = settings.model_dump()
    elif hasattr(settings, "dict") and hasattr(settings, "__fields__"):
        values = settings.dict()
    else:
        msg = f"Expected a pydantic settings instance, got {type(settings).__qualname__}."
        raise DIRegistryInvalidArgumentError(msg)

    flattened: dict[str, Any] = {}
    _flatten(values, prefix or "", flattened)
    return flattened


def _flatten(values: Mapping[str, Any], prefix: str, into: dict[str, Any]) -> None:
    for key, value in values.items():
        name = f"{prefix}.{key}" if prefix else str(key)
        into[name] = value
        if isinstance(value, Mapping):
            _flatten(value, name, into)


__all__ = [
    "SETTINGS_BASES",
    "is_pydantic_settings_subclass",
    "settings_parameters",
]
