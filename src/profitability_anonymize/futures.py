"""
Executor helpers for evaluating many equivalence classes.

Privacy models are immutable and can be evaluated from several workers at
once. These helpers submit work to a concurrent.futures executor when one is
given and fall back to deferred, in-process evaluation otherwise, so that
callers handle both cases through the same Future-like interface.
"""

from concurrent.futures import Executor, Future
from typing import Any, Callable, Iterable, Optional, Union


class InProcessResult:
    """
    Minimal stand-in for concurrent.futures.Future.

    The function runs in the calling thread when result() is called.

    Parameters
    ----------
    func : callable
        The function to execute
    args : tuple
        Positional arguments to pass to the function
    kwargs : dict
        Keyword arguments to pass to the function
    """

    def __init__(
        self, func: Callable[..., Any], args: tuple[Any, ...], kwargs: dict[str, Any]
    ) -> None:
        self.func = func
        self.args = args
        self.kwargs = kwargs

    def result(self) -> Any:
        """Run the function and return its result; exceptions propagate."""
        return self.func(*self.args, **self.kwargs)

    def cancel(self) -> bool:
        return True


FutureLike = Union[Future, InProcessResult]


def make_future(
    executor: Optional[Executor], func: Callable[..., Any], *args: Any, **kwargs: Any
) -> FutureLike:
    """
    Create a Future-like object for concurrent or deferred execution.

    Parameters
    ----------
    executor : Executor or None
        If not None, the function is submitted to this executor (thread or
        process pool). If None, it runs in the calling thread when
        result() is called.
    func : callable
        The function to execute.
    *args : Any
        Positional arguments to pass to the function.
    **kwargs : Any
        Keyword arguments to pass to the function.

    Returns
    -------
    Union[Future, InProcessResult]
        A Future-like object.
    """
    if executor is not None:
        return executor.submit(func, *args, **kwargs)
    return InProcessResult(func, args, kwargs)


def collect_results(futures: Iterable[FutureLike]) -> list[Any]:
    """
    Wait for every future and return the results in submission order.

    If a future fails, the remaining ones are cancelled and the exception
    is re-raised.
    """
    futures = list(futures)
    results = []
    try:
        for future in futures:
            results.append(future.result())
    except BaseException:
        for future in futures:
            future.cancel()
        raise
    return results
