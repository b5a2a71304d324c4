from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import Enum

from diregistry.exceptions import DIRegistryInvalidSignatureError, DIRegistryNotInjectedError


class SignatureSource(str, Enum):
    """Kind of object a signature points at."""

    DELEGATE = "delegate"
    """The signed object sits in the container's delegate chain."""

    PROVIDER = "provider"
    """The signed object sits in the container's provider aggregate."""


class InjectionKind(str, Enum):
    """What a dynamic call on the container returns."""

    METHOD = "method"
    """Forward the call to the method of the same name on the signed object."""

    INSTANCE = "instance"
    """Return the signed object itself, ignoring call arguments."""


@dataclass(frozen=True, slots=True)
class SignatureEntry:
    """Position of a signed delegate or provider."""

    source: SignatureSource
    index: int


@dataclass(frozen=True, slots=True)
class InjectionBinding:
    """A container-level name bound to a signature."""

    signature: str
    kind: InjectionKind


class SignatureTable:
    """Opaque tokens identifying signed delegates and providers."""

    def __init__(self) -> None:
        self._entries: dict[str, SignatureEntry] = {}

    def issue(self, source: SignatureSource, index: int) -> str:
        token = uuid.uuid4().hex
        self._entries[token] = SignatureEntry(source=source, index=index)
        return token

    def get(self, signature: str) -> SignatureEntry | None:
        return self._entries.get(signature)

    def __contains__(self, signature: object) -> bool:
        return signature in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class InjectionTable:
    """Names exposed on the container, each bound to one signature."""

    def __init__(self, signatures: SignatureTable) -> None:
        self._signatures = signatures
        self._bindings: dict[str, InjectionBinding] = {}

    def bind(self, signature: str, name: str, kind: InjectionKind | str) -> InjectionBinding:
        """Bind ``name`` to ``signature``, replacing any previous binding.

        Raises:
            DIRegistryInvalidSignatureError: If the signature was never issued.
            ValueError: If ``kind`` is not a known injection kind.

        """
        if signature not in self._signatures:
            msg = f"Signature ({signature}) is not valid"
            raise DIRegistryInvalidSignatureError(msg)
        binding = InjectionBinding(signature=signature, kind=InjectionKind(kind))
        self._bindings[name] = binding
        return binding

    def lookup(self, name: str) -> InjectionBinding:
        try:
            return self._bindings[name]
        except KeyError:
            msg = f"Calling ({name}) not injected."
            raise DIRegistryNotInjectedError(msg) from None

    def __contains__(self, name: object) -> bool:
        return name in self._bindings
