"""Execution context slot and the propagation rules built on it.

- configure() installs the two raw sinks, exactly once per process
- inherit() / from_scratch() / fork() run a unit of work with a bundle installed
- logger() / metrics() read the installed bundle's emitters
- patch_logger_tags() / patch_metrics_tags() replace an emitter on the installed bundle

The slot is a ContextVar. asyncio tasks and loop callbacks take a copy of the
current contextvars.Context when they are created, and that copy holds a
reference to the same ContextBundle object as their creator. Non-forked
continuations therefore share the bundle: a patch applied after a callback is
scheduled but before it runs IS visible to it. Only fork() gives a
continuation its own bundle.
"""

from __future__ import annotations

import asyncio
import contextvars
import enum
import inspect
import logging
from collections.abc import Generator  # noqa: TC003 -- used at runtime by contextmanager
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from substrate.context.bundle import ContextBundle
from substrate.ports.sinks import LOG_SINK_METHODS, METRICS_SINK_METHODS, missing_methods
from substrate.shared.errors import (
    AlreadyConfiguredError,
    NoActiveContextError,
    NotConfiguredError,
    SinkContractError,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine

    from substrate.context.emitters import TaggedLogger, TaggedMetrics
    from substrate.ports.sinks import LogSink, MetricsSink
    from substrate.shared.types import TagPatch

_log = logging.getLogger(__name__)

# Bundle installed for the current execution context; None means idle.
_current_bundle: ContextVar[ContextBundle | None] = ContextVar("substrate_bundle", default=None)

# Tasks started by fork_timeout()/fork_immediate() are held here until done.
_background_tasks: set[asyncio.Task[Any]] = set()


class Propagation(enum.Enum):
    """How a new unit of work obtains its bundle."""

    INHERIT = "inherit"  # share the current bundle, or start fresh
    FROM_SCRATCH = "from_scratch"  # always a brand-new bundle
    FORK = "fork"  # independent copy of the current bundle, or fresh


@dataclass(frozen=True)
class _StaticState:
    log_sink: LogSink
    metrics_sink: MetricsSink


_state: _StaticState | None = None


# -- Configuration --


def configure(*, logger: LogSink, metrics: MetricsSink) -> None:
    """Plug the raw log and metrics sinks in. Must be called exactly once.

    Raises:
        AlreadyConfiguredError: On any call after the first; the sinks
            installed first stay in place.
        SinkContractError: A sink lacks one of its emission methods.
    """
    global _state
    if _state is not None:
        raise AlreadyConfiguredError()

    for sink_name, sink, required in (
        ("logger", logger, LOG_SINK_METHODS),
        ("metrics", metrics, METRICS_SINK_METHODS),
    ):
        missing = missing_methods(sink, required)
        if missing:
            raise SinkContractError(sink_name, missing)

    _state = _StaticState(log_sink=logger, metrics_sink=metrics)
    _log.info(
        "Substrate configured (logger=%s, metrics=%s)",
        type(logger).__name__,
        type(metrics).__name__,
    )


def is_configured() -> bool:
    return _state is not None


def _require_state() -> _StaticState:
    if _state is None:
        raise NotConfiguredError()
    return _state


# -- Bundle selection --


def current_bundle() -> ContextBundle | None:
    """Return the bundle installed for this context, or None when idle."""
    _require_state()
    return _current_bundle.get()


def _select_bundle(rule: Propagation) -> ContextBundle:
    state = _require_state()
    current = _current_bundle.get()
    if rule is Propagation.FROM_SCRATCH or current is None:
        return ContextBundle(state.log_sink, state.metrics_sink)
    if rule is Propagation.FORK:
        return current.fork()
    return current


def _install_and_call(
    bundle: ContextBundle,
    work: Callable[..., Any],
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
) -> Any:
    _current_bundle.set(bundle)
    return work(*args, **kwargs)


async def _await_with_bundle(bundle: ContextBundle, coro: Coroutine[Any, Any, Any]) -> Any:
    token = _current_bundle.set(bundle)
    try:
        return await coro
    finally:
        _current_bundle.reset(token)


def _run(
    rule: Propagation,
    work: Callable[..., Any],
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
) -> Any:
    """Run work under the bundle picked by rule.

    The bundle is picked now, at call time. Synchronous work runs inside a
    copy of the caller's context, so the caller's slot is untouched when this
    returns. A coroutine returned by work has not started yet; it is wrapped
    so that it runs with the same bundle installed once awaited.
    """
    bundle = _select_bundle(rule)
    result = contextvars.copy_context().run(_install_and_call, bundle, work, args, kwargs)
    if inspect.iscoroutine(result):
        return _await_with_bundle(bundle, result)
    return result


def inherit(work: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Any:
    """Run work sharing the current bundle, or a brand-new one if none.

    In-place tag patches made by work are visible to the caller and the
    other way round.
    """
    return _run(Propagation.INHERIT, work, args, kwargs)


def from_scratch(work: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Any:
    """Run work in a brand-new bundle, disregarding any bundle in place."""
    return _run(Propagation.FROM_SCRATCH, work, args, kwargs)


def fork(work: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Any:
    """Run work in an independent copy of the current bundle.

    The copy starts with the same tags as the bundle in place. From then on,
    patches on either side never reach the other. With no bundle in place
    this is equivalent to from_scratch().
    """
    return _run(Propagation.FORK, work, args, kwargs)


# -- Deferred execution --


def _dispatch(work: Callable[..., Any], args: tuple[Any, ...]) -> None:
    result = work(*args)
    if inspect.iscoroutine(result):
        # ensure_future copies the callback's context, i.e. the forked one
        task = asyncio.ensure_future(result)
        _background_tasks.add(task)
        task.add_done_callback(_background_tasks.discard)


def _call_later(delay: float, work: Callable[..., Any], args: tuple[Any, ...]) -> asyncio.TimerHandle:
    return asyncio.get_running_loop().call_later(delay, _dispatch, work, args)


def _call_soon(work: Callable[..., Any], args: tuple[Any, ...]) -> asyncio.Handle:
    return asyncio.get_running_loop().call_soon(_dispatch, work, args)


def fork_timeout(work: Callable[..., Any], delay: float, /, *args: Any) -> asyncio.TimerHandle:
    """Fork the current bundle and run work after delay seconds inside the fork.

    Equivalent to ``fork(lambda: loop.call_later(delay, work, *args))``.
    Must be called with a running event loop.
    """
    return fork(_call_later, delay, work, args)


def fork_immediate(work: Callable[..., Any], /, *args: Any) -> asyncio.Handle:
    """Fork the current bundle and run work on the next loop iteration inside the fork.

    Equivalent to ``fork(lambda: loop.call_soon(work, *args))``.
    Must be called with a running event loop.
    """
    return fork(_call_soon, work, args)


@contextmanager
def scope(rule: Propagation = Propagation.INHERIT) -> Generator[ContextBundle, None, None]:
    """Install a bundle chosen by rule for the duration of a ``with`` block.

    The previous occupant of the slot is restored on exit. Works in plain
    code and inside a coroutine, as long as the block is entered and exited
    in the same task.

    Usage::

        with scope(Propagation.FORK) as bundle:
            patch_logger_tags({"step": "retry"})
            logger().info("retrying")
    """
    bundle = _select_bundle(rule)
    token = _current_bundle.set(bundle)
    try:
        yield bundle
    finally:
        _current_bundle.reset(token)


# -- Accessors --


def _active_bundle(operation: str) -> ContextBundle:
    _require_state()
    bundle = _current_bundle.get()
    if bundle is None:
        raise NoActiveContextError(operation)
    return bundle


def logger() -> TaggedLogger:
    """Return the tagged logger of the active bundle."""
    return _active_bundle("logger").logger


def metrics() -> TaggedMetrics:
    """Return the tagged metrics emitter of the active bundle."""
    return _active_bundle("metrics").metrics


def patch_logger_tags(patch: TagPatch) -> ContextBundle:
    """Update the logger tags of the active bundle from this point on.

    Pass a mapping overlaid on the existing tags, or a callable receiving the
    existing tags and returning the new full set.
    """
    return _active_bundle("patch_logger_tags").fork_logger(patch)


def patch_metrics_tags(patch: TagPatch) -> ContextBundle:
    """Update the metrics tags of the active bundle from this point on."""
    return _active_bundle("patch_metrics_tags").fork_metrics(patch)
