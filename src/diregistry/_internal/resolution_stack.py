from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

from diregistry.exceptions import DIRegistryCircularDependencyError

# Entries are (owner id, identifier) so separate containers never see each other's builds.
_resolution_stack: ContextVar[tuple[tuple[int, str], ...]] = ContextVar(
    "diregistry_resolution_stack",
    default=(),
)


@contextmanager
def tracking(owner: object, identifier: str) -> Iterator[None]:
    """Mark ``identifier`` as being built by ``owner`` for the duration of the block.

    Raises:
        DIRegistryCircularDependencyError: If ``identifier`` is already being
            built by the same owner in the current context.

    """
    stack = _resolution_stack.get()
    entry = (id(owner), identifier)
    if entry in stack:
        chain = tuple(name for _, name in stack[stack.index(entry) :])
        raise DIRegistryCircularDependencyError((*chain, identifier))

    token = _resolution_stack.set((*stack, entry))
    try:
        yield
    finally:
        _resolution_stack.reset(token)


def current_stack() -> tuple[tuple[int, str], ...]:
    """Return the identifiers currently being built in this context."""
    return _resolution_stack.get()
