"""
Hook registry: one slot per hook identifier, each bound to a composition
strategy at construction time.

The registry is built once at process start, frozen, and then shared
read-only by every concurrent request flow.
"""

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from ..core.exceptions import RegistryFrozenError, UnknownHookError
from .names import HOOK_STRATEGIES, HookId, HookName, HookStrategy, InnerHookName

logger = logging.getLogger(__name__)

HookCallback = Callable[..., Union[Any, Awaitable[Any]]]


def resolve_hook_id(name: Union[str, HookId]) -> HookId:
    """
    Normalize a hook identifier given as an enum member or its string value.

    Raises:
        UnknownHookError: Name is in neither namespace
    """
    if isinstance(name, (HookName, InnerHookName)):
        return name
    for namespace in (HookName, InnerHookName):
        try:
            return namespace(name)
        except ValueError:
            continue
    raise UnknownHookError(str(name))


async def call_hook_callback(callback: HookCallback, args: Sequence[Any]) -> Any:
    """Call a sync or async callback and await its result if needed."""
    result = callback(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


def _log_late_failure(task: 'asyncio.Future[Any]') -> None:
    # Retrieves the exception so asyncio never reports it as unhandled
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.warning(
            "Callback failed after the bail result was taken",
            exc_info=(type(exc), exc, exc.__traceback__),
        )


@dataclass
class HookSlot:
    """
    Ordered callbacks of one hook plus its composition strategy.

    Attributes:
        hook_id: Identifier the slot is registered under
        strategy: Composition strategy used by invoke()
        callbacks: Callbacks in tap order
    """

    hook_id: HookId
    strategy: HookStrategy
    callbacks: List[HookCallback] = field(default_factory=list)

    async def invoke(self, *args: Any) -> Any:
        if self.strategy is HookStrategy.PARALLEL_BAIL:
            return await self._parallel_bail(args)
        if self.strategy is HookStrategy.SERIES_WATERFALL:
            return await self._series_waterfall(args)
        await self._parallel_settle_all(args)
        return None

    async def _parallel_bail(self, args: Sequence[Any]) -> Any:
        """
        Start every callback concurrently; return the first non-None result
        in registration order.

        Callbacks still running when the result is taken are not cancelled.
        An exception from a callback earlier in the order than the first
        defined result propagates.
        """
        if not self.callbacks:
            return None

        tasks = [
            asyncio.ensure_future(call_hook_callback(callback, args))
            for callback in self.callbacks
        ]
        for index, task in enumerate(tasks):
            try:
                result = await task
            except BaseException:
                self._detach(tasks[index + 1:])
                raise
            if result is not None:
                self._detach(tasks[index + 1:])
                return result
        return None

    @staticmethod
    def _detach(tasks: Iterable['asyncio.Future[Any]']) -> None:
        for task in tasks:
            task.add_done_callback(_log_late_failure)

    async def _series_waterfall(self, args: Sequence[Any]) -> Any:
        """
        Run callbacks one after another, piping each output into the next.

        A callback returning None passes its input through unchanged.
        """
        if not args:
            raise TypeError(f"waterfall hook '{self.hook_id.value}' needs an initial value")

        value, rest = args[0], tuple(args[1:])
        for callback in self.callbacks:
            result = await call_hook_callback(callback, (value, *rest))
            if result is not None:
                value = result
        return value

    async def _parallel_settle_all(self, args: Sequence[Any]) -> None:
        if self.callbacks:
            await asyncio.gather(
                *(call_hook_callback(callback, args) for callback in self.callbacks)
            )


class HookRegistry:
    """
    Реестр хуков с явной стратегией композиции для каждого слота.

    Example:
        >>> registry = HookRegistry()
        >>> registry.tap(HookName.RENDER, my_render)
        >>> registry.freeze()
        >>> result = await registry.invoke(HookName.RENDER, context)
    """

    def __init__(self, strategies: Optional[Mapping[HookId, HookStrategy]] = None):
        strategies = HOOK_STRATEGIES if strategies is None else strategies
        self._slots: Dict[HookId, HookSlot] = {
            hook_id: HookSlot(hook_id=hook_id, strategy=strategy)
            for hook_id, strategy in strategies.items()
        }
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _slot(self, hook_id: Union[str, HookId]) -> HookSlot:
        resolved = resolve_hook_id(hook_id)
        slot = self._slots.get(resolved)
        if slot is None:
            # e.g. the public name of a hook that is dispatched under its inner id
            raise UnknownHookError(resolved.value)
        return slot

    def __contains__(self, hook_id: object) -> bool:
        try:
            self._slot(hook_id)  # type: ignore[arg-type]
        except UnknownHookError:
            return False
        return True

    def tap(self, hook_id: Union[str, HookId], callback: HookCallback) -> None:
        """
        Append a callback to a hook's ordered list.

        Raises:
            RegistryFrozenError: Registry was frozen
            UnknownHookError: No such slot
        """
        slot = self._slot(hook_id)
        if self._frozen:
            raise RegistryFrozenError(slot.hook_id.value)
        slot.callbacks.append(callback)
        logger.debug("Tapped hook", extra={"hook": slot.hook_id.value, "callbacks": len(slot.callbacks)})

    def freeze(self) -> 'HookRegistry':
        """Make the registry read-only. Idempotent."""
        self._frozen = True
        return self

    def strategy_of(self, hook_id: Union[str, HookId]) -> HookStrategy:
        return self._slot(hook_id).strategy

    def callbacks(self, hook_id: Union[str, HookId]) -> tuple:
        """Snapshot of a hook's callbacks in invocation order."""
        return tuple(self._slot(hook_id).callbacks)

    async def invoke(self, hook_id: Union[str, HookId], *args: Any) -> Any:
        """
        Run a hook with its bound strategy.

        Returns:
            Parallel-Bail: first non-None result or None.
            Series-Waterfall: output of the last callback (the input if empty).
            Parallel-Settle-All: None.
        """
        return await self._slot(hook_id).invoke(*args)
