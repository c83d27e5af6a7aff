"""Already-finished awaitable for synchronous operations."""

from typing import Any, Generator


class Completed:
    """
    Awaitable that finishes without suspending.

    Returned by operations that do all of their work synchronously but may be
    awaited by callers. The state is fully updated before the object is
    returned, so awaiting it is optional.

    Usage:
        form.clear_fields()          # state already reset
        await form.clear_fields()    # same, from a coroutine
    """

    __slots__ = ("result",)

    def __init__(self, result: Any = None):
        self.result = result

    def __await__(self) -> Generator[Any, None, Any]:
        return self.result
        yield  # makes __await__ a generator

    def __repr__(self) -> str:
        return f"Completed({self.result!r})"
