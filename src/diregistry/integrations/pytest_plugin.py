from __future__ import annotations

from typing import Any

import pytest

from diregistry._internal.autowire import AutowireResolver
from diregistry._internal.container import Container
from diregistry._internal.delegates import ParameterResolver

PARAMETERS_MARKER = "diregistry_parameters"


def pytest_configure(config: pytest.Config) -> None:
    """Register the parameters marker so ``--strict-markers`` accepts it."""
    config.addinivalue_line(
        "markers",
        f"{PARAMETERS_MARKER}(mapping=None, **parameters): parameters served by the "
        "diregistry_container fixture",
    )


@pytest.fixture()
def diregistry_container(request: pytest.FixtureRequest) -> Container:
    """Create a per-test container.

    The container has two delegates: a ``ParameterResolver`` filled from the
    ``diregistry_parameters`` markers on the test (closest marker wins), then
    an ``AutowireResolver``. The fixture is function-scoped, so registrations
    are isolated between tests.

    .. code-block:: python

        @pytest.mark.diregistry_parameters({"app.name": "Billing"})
        def test_name(diregistry_container: Container) -> None:
            assert diregistry_container.resolve("app.name") == "Billing"

    Returns:
        A new ``Container`` instance.

    """
    parameters: dict[str, Any] = {}
    for marker in reversed(list(request.node.iter_markers(PARAMETERS_MARKER))):
        for mapping in marker.args:
            parameters.update(mapping)
        parameters.update(marker.kwargs)

    container = Container()
    container.add_delegate(ParameterResolver(parameters))
    container.add_delegate(AutowireResolver())
    return container
