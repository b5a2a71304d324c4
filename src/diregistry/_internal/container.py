from __future__ import annotations

import logging
from typing import Any, cast

from diregistry._internal.arguments import ContainerAware
from diregistry._internal.definitions import Definition, DefinitionAggregate
from diregistry._internal.delegates import Delegate
from diregistry._internal.injection import (
    InjectionKind,
    InjectionTable,
    SignatureSource,
    SignatureTable,
)
from diregistry._internal.providers import Provider, ProviderAggregate
from diregistry._internal.resolution_stack import tracking
from diregistry._internal.type_checks import TypeLocator, identifier_for, is_runtime_class
from diregistry.exceptions import (
    DIRegistryInvalidArgumentError,
    DIRegistryNotFoundError,
    DIRegistryProviderLiedError,
)

logger = logging.getLogger(__name__)


class Container:
    """Register services under identifiers and build them on demand.

    Identifiers are strings; classes are accepted wherever an identifier is
    and stand for their dotted qualified name. A lookup consults, in order:

    1. the definitions added with ``add``/``add_shared``;
    2. the providers added with ``add_provider``, which register their
       definitions lazily the first time one of their identifiers is looked up;
    3. the delegates added with ``add_delegate``, in registration order.

    Delegates and providers added with ``sign=True`` return a signature token.
    ``inject`` binds a name to that token so the delegate (or one of its
    methods) becomes callable through ``invoke`` or as an attribute of the
    container.

    .. code-block:: python

        container = Container()
        container.add(Mailer).add_argument(Transport)
        container.add_shared(Transport, SmtpTransport)

        mailer = container.resolve(Mailer)

    """

    def __init__(
        self,
        definitions: DefinitionAggregate | None = None,
        providers: ProviderAggregate | None = None,
        *,
        detect_cycles: bool = True,
    ) -> None:
        """Initialize an empty container.

        Args:
            definitions: Definition store to use. A new one is created by default.
            providers: Provider store to use. A new one is created by default.
            detect_cycles: Raise ``DIRegistryCircularDependencyError`` when a
                service depends on itself. When disabled, a cycle recurses until
                Python's recursion limit is hit.

        """
        self.detect_cycles = detect_cycles
        self.types = TypeLocator()
        self._definitions = definitions if definitions is not None else DefinitionAggregate()
        self._providers = providers if providers is not None else ProviderAggregate()
        self._delegates: list[Delegate] = []
        self._signatures = SignatureTable()
        self._injections = InjectionTable(self._signatures)

        self._definitions.set_container(self)
        self._providers.set_container(self)

    def add(self, identifier: str | type[Any], concrete: Any = None) -> Definition:
        """Register a transient service and return its definition.

        Re-adding an identifier replaces its definition.

        Args:
            identifier: Service identifier, or a class standing for its
                qualified name.
            concrete: Class, dotted class name, factory callable or literal
                value. Defaults to the identifier itself.

        Returns:
            The new definition, for fluent configuration.

        Raises:
            DIRegistryInvalidArgumentError: If the identifier is empty or not
                a string/class.

        Examples:
            .. code-block:: python

                container.add(Foo).add_argument(Bar)
                container.add("clock", time.monotonic)
                container.add("app.name", "Billing")

        """
        name = self._identifier(identifier)
        if concrete is None and is_runtime_class(identifier):
            concrete = identifier
        if is_runtime_class(concrete):
            self.types.remember(concrete)
        return self._definitions.add(name, concrete)

    def add_shared(self, identifier: str | type[Any], concrete: Any = None) -> Definition:
        """Register a shared service; every non-forced resolve returns the same instance."""
        return self.add(identifier, concrete).set_shared()

    def add_provider(self, provider: Provider, *, sign: bool = False) -> str | None:
        """Register a service provider.

        Args:
            provider: Provider whose ``register()`` runs the first time one of
                its identifiers is looked up.
            sign: Return a signature token for use with ``inject``.

        Returns:
            The signature token when ``sign`` is true, otherwise ``None``.

        Raises:
            DIRegistryInvalidArgumentError: If ``provider`` is not a provider.

        """
        self._providers.add(provider)
        if not sign:
            return None

        # add() keeps either this provider or an equal one, so the index always exists.
        index = cast("int", self._providers.index_of(provider))
        signature = self._signatures.issue(SignatureSource.PROVIDER, index)
        logger.debug("Signed provider %s as %s", provider.identifier, signature)
        return signature

    def add_delegate(self, delegate: Delegate, *, sign: bool = False) -> str | None:
        """Append a delegate to the fallback chain.

        Unsigned delegates that accept a container (``set_container``) are
        attached to this container. Signed delegates are not attached; expose
        them with ``inject`` instead.

        Args:
            delegate: Object implementing ``has(identifier)`` and
                ``get(identifier)``.
            sign: Return a signature token for use with ``inject``.

        Returns:
            The signature token when ``sign`` is true, otherwise ``None``.

        Raises:
            DIRegistryInvalidArgumentError: If ``delegate`` is not a delegate.

        """
        if not isinstance(delegate, Delegate):
            msg = f"Expected a delegate with has() and get(), got {type(delegate).__qualname__}."
            raise DIRegistryInvalidArgumentError(msg)

        self._delegates.append(delegate)

        if sign:
            signature = self._signatures.issue(SignatureSource.DELEGATE, len(self._delegates) - 1)
            logger.debug("Signed delegate %s as %s", type(delegate).__qualname__, signature)
            return signature

        if isinstance(delegate, ContainerAware):
            delegate.set_container(self)
        return None

    def has(self, identifier: str | type[Any]) -> bool:
        """Return whether any definition, provider or delegate can supply ``identifier``."""
        name = self._identifier(identifier)
        if self._definitions.has(name):
            return True
        if self._providers.can_provide(name):
            return True
        return any(delegate.has(name) for delegate in self._delegates)

    def get(self, identifier: str | type[Any]) -> Any:
        """Look up ``identifier`` without building it.

        Returns:
            The ``Definition`` when the identifier is defined (directly or by a
            provider), otherwise the value supplied by the first matching
            delegate.

        Raises:
            DIRegistryNotFoundError: If no source knows the identifier.
            DIRegistryProviderLiedError: If a provider claimed the identifier
                but did not register it.

        """
        return self._get_service(self._identifier(identifier))

    def resolve(self, identifier: str | type[Any], force_new: bool = False) -> Any:  # noqa: FBT001, FBT002
        """Return the built service for ``identifier``.

        Definitions are built with ``Definition.make``; delegate values are
        returned unchanged.

        Args:
            identifier: Service identifier or class.
            force_new: Build a new instance of a shared service without
                replacing its cached instance.

        Raises:
            DIRegistryNotFoundError: If no source knows the identifier.
            DIRegistryProviderLiedError: If a provider claimed the identifier
                but did not register it.
            DIRegistryCircularDependencyError: If the service depends on itself
                and cycle detection is enabled.

        Examples:
            .. code-block:: python

                container.add_shared(Foo)
                assert container.resolve(Foo) is container.resolve(Foo)
                assert container.resolve(Foo, force_new=True) is not container.resolve(Foo)

        """
        name = self._identifier(identifier)
        service = self._get_service(name)
        if not isinstance(service, Definition):
            return service
        if not self.detect_cycles:
            return service.make(force_new)
        with tracking(self, name):
            return service.make(force_new)

    def modify(self, identifier: str | type[Any]) -> Definition:
        """Return the definition added for ``identifier`` for further configuration.

        Raises:
            DIRegistryNotFoundError: If the identifier was never added
                explicitly (provider and delegate services cannot be modified
                before they are registered).

        """
        name = self._identifier(identifier)
        if self._definitions.has(name):
            return self._definitions.get(name)
        msg = f"Service ({name}) can not be modified, as it is not found"
        raise DIRegistryNotFoundError(msg)

    def inject(
        self,
        signature: str,
        name: str,
        kind: InjectionKind | str = InjectionKind.METHOD,
    ) -> None:
        """Expose a signed delegate or provider under ``name``.

        Args:
            signature: Token returned by ``add_delegate``/``add_provider``.
            name: Name callable through ``invoke`` or as a container attribute.
                Private names and existing ``Container`` attributes are rejected.
            kind: ``"method"`` forwards calls to the method called ``name`` on
                the signed object; ``"instance"`` returns the object itself.

        Raises:
            DIRegistryInvalidSignatureError: If the signature is unknown.
            DIRegistryInvalidArgumentError: If ``name`` is private or shadows a
                ``Container`` attribute.

        """
        if name.startswith("_") or name in vars(self) or hasattr(type(self), name):
            msg = f"Cannot inject ({name}): the name is private or already a container attribute."
            raise DIRegistryInvalidArgumentError(msg)

        binding = self._injections.bind(signature, name, kind)
        logger.debug("Injected %s as %s (%s)", signature, name, binding.kind.value)

    def inject_instance(self, signature: str, name: str) -> None:
        self.inject(signature, name, InjectionKind.INSTANCE)

    def inject_method(self, signature: str, name: str) -> None:
        self.inject(signature, name, InjectionKind.METHOD)

    def invoke(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """Run the dynamic call bound to ``name``.

        Raises:
            DIRegistryNotInjectedError: If ``name`` is not bound.
            DIRegistryNotFoundError: If the bound signature no longer locates
                a delegate or provider.

        """
        binding = self._injections.lookup(name)
        target = self._signed_target(binding.signature)
        if target is None:
            msg = f"Signature for call ({name}) not found"
            raise DIRegistryNotFoundError(msg)

        if binding.kind is InjectionKind.INSTANCE:
            return target
        return getattr(target, name)(*args, **kwargs)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)

        self._injections.lookup(name)

        def call(*args: Any, **kwargs: Any) -> Any:
            return self.invoke(name, *args, **kwargs)

        call.__name__ = name
        return call

    def _get_service(self, identifier: str) -> Any:
        if self._definitions.has(identifier):
            return self._definitions.get(identifier)

        if self._providers.can_provide(identifier):
            self._providers.register(identifier)
            if not self._definitions.has(identifier):
                msg = f"Service provider lied to provides ({identifier}) service"
                raise DIRegistryProviderLiedError(msg)
            return self._get_service(identifier)

        for delegate in self._delegates:
            if delegate.has(identifier):
                logger.debug("Resolving %s from delegate %s", identifier, type(delegate).__qualname__)
                return delegate.get(identifier)

        msg = f"Service ({identifier}) not found"
        raise DIRegistryNotFoundError(msg)

    def _signed_target(self, signature: str) -> Any | None:
        entry = self._signatures.get(signature)
        if entry is None:
            return None
        if entry.source is SignatureSource.DELEGATE:
            if entry.index < len(self._delegates):
                return self._delegates[entry.index]
            return None
        for index, provider in enumerate(self._providers):
            if index == entry.index:
                return provider
        return None

    def _identifier(self, identifier: object) -> str:
        if is_runtime_class(identifier):
            return self.types.remember(identifier)
        return identifier_for(identifier)
