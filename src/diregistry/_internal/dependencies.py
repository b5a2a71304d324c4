from __future__ import annotations

import inspect
import logging
import sys
import types
from dataclasses import dataclass
from typing import Any, Union, get_args, get_origin, get_type_hints

logger = logging.getLogger(__name__)

NO_ANNOTATION: Any = inspect.Parameter.empty


@dataclass(frozen=True, slots=True)
class ConstructorParameter:
    """One constructor parameter as seen by the autowire resolver."""

    name: str
    kind: Any
    annotation: Any
    default: Any

    @property
    def has_default(self) -> bool:
        return self.default is not inspect.Parameter.empty

    @property
    def is_keyword_only(self) -> bool:
        return self.kind is inspect.Parameter.KEYWORD_ONLY

    @property
    def union_members(self) -> tuple[Any, ...]:
        """Return the non-``None`` members of the annotation (the annotation itself if not a union)."""
        if self.annotation is NO_ANNOTATION:
            return ()
        if not is_union(self.annotation):
            return (self.annotation,)
        return tuple(arg for arg in get_args(self.annotation) if arg is not type(None))

    @property
    def allows_none(self) -> bool:
        if self.annotation is None or self.annotation is type(None):
            return True
        return is_union(self.annotation) and type(None) in get_args(self.annotation)

    @property
    def is_multi_type_union(self) -> bool:
        return len(self.union_members) > 1


def is_union(annotation: Any) -> bool:
    return get_origin(annotation) in (Union, types.UnionType)


class ConstructorInspector:
    """Extract constructor parameters with evaluated type hints, cached per class."""

    def __init__(self) -> None:
        self._cache: dict[type[Any], list[ConstructorParameter] | None] = {}

    def get_parameters(self, cls: type[Any]) -> list[ConstructorParameter] | None:
        """Return the constructor parameters of ``cls``.

        Returns ``None`` when the class does not define a constructor of its
        own. ``self`` and variadic parameters are not included.
        """
        if cls in self._cache:
            return self._cache[cls]

        init = cls.__init__
        if init is object.__init__:
            self._cache[cls] = None
            return None

        try:
            signature = inspect.signature(init)
        except (TypeError, ValueError):
            self._cache[cls] = None
            return None

        hints = self._get_type_hints(cls, init)
        parameters = [
            ConstructorParameter(
                name=name,
                kind=parameter.kind,
                annotation=hints.get(name, NO_ANNOTATION),
                default=parameter.default,
            )
            for name, parameter in list(signature.parameters.items())[1:]
            if parameter.kind not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
        ]
        self._cache[cls] = parameters
        return parameters

    def _get_type_hints(self, cls: type[Any], init: Any) -> dict[str, Any]:
        try:
            return get_type_hints(init)
        except (TypeError, NameError):
            pass

        # Resolve annotations one by one so a single unresolvable forward reference only drops itself.
        module_globals = getattr(sys.modules.get(cls.__module__), "__dict__", {})
        localns = {cls.__name__: cls}
        hints: dict[str, Any] = {}
        for name, annotation in getattr(init, "__annotations__", {}).items():
            holder = types.SimpleNamespace(__annotations__={name: annotation})
            try:
                hints.update(get_type_hints(holder, globalns=module_globals, localns=localns))
            except (TypeError, NameError):
                logger.debug("Cannot resolve annotation %r of %s.%s", annotation, cls.__qualname__, name)
        return hints
