from __future__ import annotations

from typing import Any

import pytest

from diregistry import (
    AbstractProvider,
    AutowireResolver,
    Container,
    Definition,
    DIRegistryContainerError,
    DIRegistryInvalidArgumentError,
    DIRegistryNotFoundError,
    DIRegistryProviderLiedError,
    ParameterResolver,
)


class FooBar:
    pass


class Bar:
    def __init__(self, foo_bar: Any = None) -> None:
        self.foo_bar = foo_bar


class Foo:
    def __init__(self, bar: Any = None) -> None:
        self.bar = bar


class FooBarProvider(AbstractProvider):
    provides = ("foo", "foo_bar", "bar")

    def __init__(self) -> None:
        self.register_calls = 0

    def register(self) -> None:
        self.register_calls += 1
        container = self.get_container()
        container.add("foo", Foo)
        container.add("foo_bar", FooBar)


class LyingProvider(AbstractProvider):
    provides = ("foo", "bar")

    def register(self) -> None:
        pass


class StaticDelegate:
    def __init__(self, values: dict[str, Any]) -> None:
        self.values = values

    def has(self, identifier: str) -> bool:
        return identifier in self.values

    def get(self, identifier: str) -> Any:
        return self.values[identifier]


def test_add_returns_definition_and_get_returns_it(container: Container) -> None:
    definition = container.add(Foo)

    assert isinstance(definition, Definition)
    assert container.get(Foo) is definition
    assert container.get(f"{Foo.__module__}.Foo") is definition


def test_add_and_resolve(container: Container) -> None:
    container.add(Foo)

    assert container.has(Foo)
    assert not container.has(Bar)
    assert isinstance(container.resolve(Foo), Foo)


def test_add_with_factory(container: Container) -> None:
    container.add("foo.interface", lambda: Foo("made"))

    foo = container.resolve("foo.interface")

    assert isinstance(foo, Foo)
    assert foo.bar == "made"


def test_add_with_literal_value(container: Container) -> None:
    container.add("app.name", "Billing")

    assert container.resolve("app.name") == "Billing"


def test_resolves_dependencies_recursively(container: Container) -> None:
    container.add(Foo).add_argument(Bar)
    container.add(Bar).add_argument(FooBar)
    container.add(FooBar)

    foo = container.resolve(Foo)

    assert isinstance(foo, Foo)
    assert isinstance(foo.bar, Bar)
    assert isinstance(foo.bar.foo_bar, FooBar)


def test_shared_definition_returns_same_instance(container: Container) -> None:
    container.add_shared(Foo)

    foo = container.resolve(Foo)
    foo_again = container.resolve(Foo)
    foo_new = container.resolve(Foo, force_new=True)

    assert foo is foo_again
    assert foo_new is not foo
    assert container.resolve(Foo) is foo


def test_transient_definition_returns_new_instances(container: Container) -> None:
    container.add(Bar)

    assert container.resolve(Bar) is not container.resolve(Bar)


def test_end_to_end_string_identifiers(container: Container) -> None:
    container.add("foo", Foo).add_argument("bar")
    container.add("bar", Bar)

    first = container.resolve("foo")
    second = container.resolve("foo")

    assert isinstance(first.bar, Bar)
    assert first is not second

    container.add_shared("foo", Foo).add_argument("bar")

    assert container.resolve("foo") is container.resolve("foo")


def test_resolve_unknown_identifier_raises_not_found(container: Container) -> None:
    with pytest.raises(DIRegistryNotFoundError, match="nonexistent"):
        container.resolve("nonexistent")


def test_get_unknown_identifier_raises_not_found(container: Container) -> None:
    with pytest.raises(DIRegistryNotFoundError):
        container.get(Foo)


def test_empty_identifier_is_rejected(container: Container) -> None:
    with pytest.raises(DIRegistryInvalidArgumentError):
        container.add("")


def test_provider_registers_lazily_once() -> None:
    container = Container()
    provider = FooBarProvider()
    container.add_provider(provider)

    assert container.has("foo")
    assert container.has("foo_bar")
    assert provider.register_calls == 0

    assert isinstance(container.resolve("foo_bar"), FooBar)
    assert isinstance(container.resolve("foo"), Foo)
    assert isinstance(container.resolve("foo"), Foo)
    assert provider.register_calls == 1


def test_provider_that_lies_raises_container_error() -> None:
    container = Container()
    container.add_provider(LyingProvider())

    assert container.has("foo")
    with pytest.raises(DIRegistryProviderLiedError):
        container.resolve("foo")
    with pytest.raises(DIRegistryContainerError):
        container.resolve("bar")


def test_provider_partial_registration_is_detected() -> None:
    container = Container()
    container.add_provider(FooBarProvider())

    with pytest.raises(DIRegistryProviderLiedError, match="bar"):
        container.resolve("bar")
    # Definitions registered before the lie was detected stay available.
    assert isinstance(container.resolve("foo"), Foo)


def test_resolve_with_parameter_delegate(container: Container) -> None:
    container.add_delegate(ParameterResolver().add_parameter("app.name", "Billing"))

    assert container.has("app.name")
    assert container.get("app.name") == "Billing"
    assert container.resolve("app.name") == "Billing"


def test_delegate_values_pass_through_unchanged(container: Container) -> None:
    value = object()
    container.add_delegate(StaticDelegate({"value": value}))

    assert container.resolve("value") is value


def test_first_registered_delegate_wins(container: Container) -> None:
    container.add_delegate(StaticDelegate({"key": "first"}))
    container.add_delegate(StaticDelegate({"key": "second", "other": "second"}))

    assert container.resolve("key") == "first"
    assert container.resolve("other") == "second"


def test_definitions_take_precedence_over_providers_and_delegates(container: Container) -> None:
    container.add_delegate(StaticDelegate({"foo": "delegate"}))
    provider = FooBarProvider()
    container.add_provider(provider)
    container.add("foo", "definition")

    assert container.resolve("foo") == "definition"
    assert provider.register_calls == 0


def test_providers_take_precedence_over_delegates(container: Container) -> None:
    container.add_delegate(StaticDelegate({"foo_bar": "delegate"}))
    container.add_provider(FooBarProvider())

    assert isinstance(container.resolve("foo_bar"), FooBar)


def test_autowire_delegate_resolves_unregistered_class() -> None:
    container = Container()

    assert not container.has(Foo)
    container.add_delegate(AutowireResolver())
    assert container.has(Foo)
    assert isinstance(container.resolve(Foo), Foo)


def test_modify_existing_definition(container: Container) -> None:
    container.add(FooBar)

    assert container.resolve(FooBar) is not container.resolve(FooBar)

    container.modify(FooBar).set_shared()

    assert container.resolve(FooBar) is container.resolve(FooBar)


def test_modify_unknown_definition_raises_not_found(container: Container) -> None:
    container.add_provider(FooBarProvider())

    with pytest.raises(DIRegistryNotFoundError, match="can not be modified"):
        container.modify("foo")


def test_add_delegate_rejects_objects_without_has_and_get(container: Container) -> None:
    with pytest.raises(DIRegistryInvalidArgumentError):
        container.add_delegate(object())  # type: ignore[arg-type]


def test_add_provider_rejects_non_providers(container: Container) -> None:
    with pytest.raises(DIRegistryInvalidArgumentError):
        container.add_provider(object())  # type: ignore[arg-type]


def test_unsigned_container_aware_delegate_is_attached(container: Container) -> None:
    delegate = ParameterResolver()

    container.add_delegate(delegate)

    assert delegate.get_container() is container


def test_signed_delegate_is_not_attached(container: Container) -> None:
    delegate = ParameterResolver()

    container.add_delegate(delegate, sign=True)

    assert not delegate.has_container
