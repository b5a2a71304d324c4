"""Tests for pydantic-settings parameters and autowiring."""

from __future__ import annotations

import pytest
from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

from diregistry import Container, DIRegistryInvalidArgumentError, ParameterResolver
from diregistry._internal.integrations.pydantic_settings import (
    is_pydantic_settings_subclass,
    settings_parameters,
)


class DatabaseSettings(BaseModel):
    url: str = "sqlite://"
    pool_size: int = 5


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="BILLING_")

    name: str = "Billing"
    debug: bool = False
    database: DatabaseSettings = DatabaseSettings()


class Repository:
    def __init__(self, settings: AppSettings) -> None:
        self.settings = settings


def test_settings_subclass_detection() -> None:
    assert is_pydantic_settings_subclass(AppSettings)
    assert not is_pydantic_settings_subclass(DatabaseSettings)
    assert not is_pydantic_settings_subclass(AppSettings())
    assert not is_pydantic_settings_subclass(list[int])


def test_settings_are_flattened_into_dotted_keys() -> None:
    parameters = settings_parameters(AppSettings())

    assert parameters["name"] == "Billing"
    assert parameters["debug"] is False
    assert parameters["database.url"] == "sqlite://"
    assert parameters["database.pool_size"] == 5
    assert parameters["database"] == {"url": "sqlite://", "pool_size": 5}


def test_prefix_is_prepended() -> None:
    parameters = settings_parameters(AppSettings(), prefix="app")

    assert parameters["app.name"] == "Billing"
    assert parameters["app.database.url"] == "sqlite://"
    assert "name" not in parameters


def test_non_model_is_rejected() -> None:
    with pytest.raises(DIRegistryInvalidArgumentError, match="pydantic settings"):
        settings_parameters({"name": "Billing"})


def test_add_settings_feeds_the_container(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BILLING_NAME", "Invoices")
    container = Container()
    container.add_delegate(ParameterResolver().add_settings(AppSettings(), prefix="app"))
    container.add("dsn", lambda url, name: f"{name}@{url}").add_arguments(
        ["app.database.url", "app.name"],
    )

    assert container.resolve("dsn") == "Invoices@sqlite://"


def test_settings_classes_are_autowired_from_the_environment(
    autowire_container: Container,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("BILLING_DEBUG", "true")

    repository = autowire_container.resolve(Repository)

    assert repository.settings.debug is True
    assert repository.settings.database.url == "sqlite://"


def test_shared_settings_registration(autowire_container: Container) -> None:
    autowire_container.add_shared(AppSettings)

    first = autowire_container.resolve(Repository)
    second = autowire_container.resolve(Repository)

    assert first.settings is second.settings
