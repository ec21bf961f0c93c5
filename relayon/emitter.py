"""Event emitter with synchronous and asynchronous dispatch."""

import asyncio
import inspect
from collections.abc import Awaitable
from typing import Any, Self

from loguru import logger

from relayon._types import EventName
from relayon.base_emitter import BaseEmitter
from relayon.bindings import ListenerBinding, QueuedEmission
from relayon.utils import append_to_tuple, callable_name

log = logger.bind(source=__name__)


class EventEmitter(BaseEmitter):
    """Named-event emitter with one-shot listeners and a pause/resume gate.

    Emission snapshots the event's listener set and spends its one-shot
    bindings before the first listener runs; registrations made by a
    listener only affect later emissions.

    While paused, ``emit``/``emit_async`` are recorded instead of dispatched
    and ``resume()`` replays them in arrival order.

    Warning:
        Listeners can recursively call emit(). The emitter does not detect
        cycles; an infinite chain (e.g., A->B->A) ends in RecursionError.
    """

    _paused: bool
    _emit_queue: tuple[QueuedEmission, ...]
    _replay_tasks: set[asyncio.Task[None]]  # strong refs until done

    def __init__(self) -> None:
        super().__init__()
        self._paused = False
        self._emit_queue = ()
        self._replay_tasks = set()

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def emit_queue(self) -> tuple[QueuedEmission, ...]:
        """Emissions recorded while paused, oldest first."""
        return self._emit_queue

    def emit(self, event_name: EventName, /, *args: Any, **kwargs: Any) -> bool:
        """Synchronously dispatch an event.

        Listeners run in order: persistent bindings, then one-shot bindings.
        A listener raising an exception propagates out of ``emit`` and the
        remaining listeners of this emission are not called.

        Args:
            event_name: Event to dispatch.
            *args: Positional arguments for every listener.
            **kwargs: Keyword arguments for every listener.

        Returns:
            False if the event has no entry. True otherwise, including when
            the emission was queued because the emitter is paused.

        Raises:
            Exception: Whatever the first failing listener raised.
        """
        accepted, bindings = self._capture(False, event_name, args, kwargs)
        for binding in bindings:
            result = binding.invoke(args, kwargs)
            if inspect.isawaitable(result):
                self._discard_awaitable(event_name, binding, result)
        return accepted

    async def emit_async(
        self, event_name: EventName, /, *args: Any, **kwargs: Any
    ) -> bool:
        """Asynchronously dispatch an event.

        Every captured binding is called right away, in binding order, and
        the awaitables they return run concurrently in their own tasks. A
        failing listener does not stop or cancel the others; once every
        task has settled, failures are raised together.

        Both coroutine functions and plain callables are accepted; awaitable
        results are awaited.

        Args:
            event_name: Event to dispatch.
            *args: Positional arguments for every listener.
            **kwargs: Keyword arguments for every listener.

        Returns:
            False if the event has no entry, else True.

        Raises:
            ExceptionGroup: If one or more listeners failed.
        """
        accepted, bindings = self._capture(True, event_name, args, kwargs)
        if bindings:
            await self._gather(event_name, self._start(bindings, args, kwargs))
        return accepted

    def pause(self) -> Self:
        """Queue future emissions instead of dispatching them.

        Emissions already in progress are unaffected.
        """
        self._paused = True
        log.debug("Paused")
        return self

    def resume(self) -> list[asyncio.Task[None]]:
        """Leave the paused state and replay queued emissions in order.

        Every queued emission has its listeners called inline, in arrival
        order. For asynchronous emissions only the awaiting is deferred: it
        is scheduled as a task on the running event loop, or run to
        completion with ``asyncio.run`` when no loop is running.

        A failing replayed emission does not stop the replay of the following
        ones. Failures of inline replays are raised once the whole queue has
        been processed. A scheduled task that fails is passed to the loop's
        exception handler and also surfaces to whoever awaits it.

        Emissions made during the replay are dispatched immediately. If a
        listener pauses the emitter again, later emissions go to a fresh
        queue for the next ``resume()``.

        Returns:
            Tasks scheduled for asynchronous replays (empty if none, or if
            the emitter was not paused).

        Raises:
            Exception: The only inline replay failure.
            ExceptionGroup: If several inline replays failed.
        """
        if not self._paused:
            return []

        self._paused = False
        queued, self._emit_queue = self._emit_queue, ()
        log.debug("Resumed, replaying {} queued emission(s)", len(queued))

        scheduled: list[asyncio.Task[None]] = []
        failures: list[Exception] = []
        for item in queued:
            try:
                if item.is_async:
                    task = self._replay_async(item)
                    if task is not None:
                        scheduled.append(task)
                else:
                    self.emit(item.event_name, *item.args, **item.kwargs)
            except Exception as exc:
                log.debug("Replay of {!r} failed: {!r}", item.event_name, exc)
                failures.append(exc)

        if len(failures) == 1:
            raise failures[0]
        if failures:
            raise ExceptionGroup(
                f"{len(failures)} replayed emission(s) failed", failures
            )
        return scheduled

    # -- internals ------------------------------------------------------------

    def _capture(
        self,
        is_async: bool,
        event_name: EventName,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> tuple[bool, tuple[ListenerBinding, ...]]:
        """Resolve what an emission should invoke.

        Returns:
            ``(accepted, bindings)``. Unknown events give ``(False, ())``;
            queued emissions give ``(True, ())``.
        """
        if event_name not in self._registry:
            return False, ()

        if self._paused:
            self._emit_queue = append_to_tuple(
                self._emit_queue,
                QueuedEmission(
                    is_async=is_async, event_name=event_name, args=args, kwargs=kwargs
                ),
            )
            log.debug("Queued {!r} (async={}) while paused", event_name, is_async)
            return True, ()

        listener_set = self._registry.take(event_name)
        if listener_set is None:
            return False, ()
        log.debug(
            "Emit {!r} to {} listener(s) (async={})",
            event_name,
            len(listener_set),
            is_async,
        )
        return True, listener_set.bindings()

    async def _gather(
        self, event_name: EventName, outcomes: list[Exception | Awaitable[Any] | None]
    ) -> None:
        """Await the started listeners concurrently and raise failures together.

        Failures are reported in binding order, whether the listener raised
        while being called or while its awaitable ran.
        """
        async with asyncio.TaskGroup() as group:
            pending = {
                index: group.create_task(self._settle(outcome))
                for index, outcome in enumerate(outcomes)
                if inspect.isawaitable(outcome)
            }
        failures = []
        for index, outcome in enumerate(outcomes):
            if index in pending:
                outcome = pending[index].result()
            if outcome is not None:
                failures.append(outcome)
        if failures:
            raise ExceptionGroup(
                f"{len(failures)} listener(s) failed for event {event_name!r}",
                failures,
            )

    @staticmethod
    def _start(
        bindings: tuple[ListenerBinding, ...],
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> list[Exception | Awaitable[Any] | None]:
        """Call every binding now, in order, without awaiting anything.

        Returns one outcome per binding: the exception it raised, the
        awaitable it returned, or None.
        """
        outcomes: list[Exception | Awaitable[Any] | None] = []
        for binding in bindings:
            try:
                result = binding.invoke(args, kwargs)
            except Exception as exc:
                log.debug(
                    "Listener {} failed: {!r}", callable_name(binding.listener), exc
                )
                outcomes.append(exc)
            else:
                outcomes.append(result if inspect.isawaitable(result) else None)
        return outcomes

    @staticmethod
    async def _settle(awaitable: Awaitable[Any]) -> Exception | None:
        """Await one listener result, returning its exception instead of raising.

        Keeps a failing listener from cancelling its siblings in the
        TaskGroup.
        """
        try:
            await awaitable
        except Exception as exc:
            log.debug("Awaited listener failed: {!r}", exc)
            return exc
        return None

    def _replay_async(self, item: QueuedEmission) -> asyncio.Task[None] | None:
        """Replay one queued asynchronous emission.

        The listeners are called now, during ``resume()``, so they run in
        queue order with the synchronous replays around them. Only their
        awaitable results are left to the scheduled task.
        """
        _, bindings = self._capture(True, item.event_name, item.args, item.kwargs)
        if not bindings:
            return None

        coro = self._gather(
            item.event_name, self._start(bindings, item.args, item.kwargs)
        )
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(coro)
            return None

        task = loop.create_task(coro)
        self._replay_tasks.add(task)
        task.add_done_callback(self._on_replay_done)
        return task

    def _on_replay_done(self, task: asyncio.Task[None]) -> None:
        """Report a failed replay task to the loop's exception handler."""
        self._replay_tasks.discard(task)
        if task.cancelled() or (exc := task.exception()) is None:
            return
        log.opt(exception=exc).error("Replayed async emission failed")
        task.get_loop().call_exception_handler(
            {
                "message": "Replayed async emission failed",
                "exception": exc,
                "task": task,
            }
        )

    @staticmethod
    def _discard_awaitable(
        event_name: EventName, binding: ListenerBinding, result: Any
    ) -> None:
        """Drop an awaitable returned to the synchronous path.

        ``emit`` never awaits. Coroutines are closed so they are not reported
        as never awaited; use ``emit_async`` for async listeners.
        """
        log.warning(
            "Listener {} returned an awaitable from synchronous emit of {!r}; "
            "it was not awaited",
            callable_name(binding.listener),
            event_name,
        )
        if inspect.iscoroutine(result):
            result.close()
