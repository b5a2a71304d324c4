from __future__ import annotations

import datetime
import decimal
import inspect
import pathlib
import uuid
from dataclasses import dataclass
from typing import Any, TypeGuard

from diregistry._internal.type_checks import is_runtime_class


@dataclass(frozen=True, slots=True)
class AutowirePolicy:
    """Internal policy deciding which annotations the autowire resolver may build."""

    ignored_base_types: tuple[type[Any], ...] = (
        pathlib.PurePath,
        datetime.datetime,
        datetime.date,
        datetime.time,
        datetime.timedelta,
        uuid.UUID,
        decimal.Decimal,
    )

    def is_injectable(self, candidate: object) -> TypeGuard[type[Any]]:
        """Return true when an annotation names a non-primitive class.

        Args:
            candidate: Parameter annotation being checked.

        """
        if not is_runtime_class(candidate):
            return False
        if candidate.__module__ == "builtins":
            return False
        if issubclass(candidate, type):
            return False
        return not issubclass(candidate, self.ignored_base_types)

    def is_instantiable(self, candidate: type[Any]) -> bool:
        """Return true when a class can be constructed directly."""
        if inspect.isabstract(candidate):
            return False
        return not getattr(candidate, "_is_protocol", False)
