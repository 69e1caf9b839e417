"""

# Gates

A Gate is a concurrency primitive that is used to manage access between
a pool of resources and a pool of workers. The Gate is used to control
the flow of access to the resources.

The Coordinator is a Gate guarding some externally stored state (a token, a
session, a connection) shared by many concurrent Actions:

- An Action that finds the state stale returns the Coordinator's stale signal
  instead of a result.
- The first stale signal starts the Refresh Operation; any stale signal observed
  while it is in flight attaches to it instead of starting another.
- Every Invocation waits out an in-flight Refresh before running its Action.
  If the Refresh fails, every waiting Invocation fails with that same exception.
  If it succeeds, each stale Action is replayed from scratch with its original
  arguments.

```python
coordinator = create_coordinator(session.reauthenticate)

async def fetch(url: str):
  resp = await session.get(url)
  if resp.status == 401: return coordinator.stale_signal()
  return resp

resp = await coordinator.invoke(fetch, "https://example.com/api")
```

"""
from __future__ import annotations
from typing import Protocol, Any, runtime_checkable
from collections.abc import Callable
from abc import abstractmethod
from dataclasses import dataclass, field, KW_ONLY
from types import MethodType
from loguru import logger
import asyncio, functools, inspect

from .errors import MISSING, InvalidArgument, ReplayLimitExceeded

__all__ = [
  'Gate',
  'Coordinator',
  'create_coordinator',
  'create_coordinator_ctx',
]

@runtime_checkable
class Gate(Protocol):
  """A Gate to manage concurrent access to some singular or pool of resources"""

  async def __aenter__(self) -> Gate:
    """Acquire the Gate"""
    await self.acquire()
    return self

  async def __aexit__(self, exc_type: Any, exc_value: Any, traceback: Any) -> None:
    """Release the Gate"""
    await self.release()

  @abstractmethod
  async def acquire(self) -> None: ...

  @abstractmethod
  async def release(self) -> None: ...

### Concrete Implementations ###

STALE_T = type('STALE', (), {})
"""Sentinel Type of the stale signal; every Coordinator holds its own instance"""

async def _settle(result: Any) -> Any:
  """Await the result of a call if it is awaitable, otherwise pass it through"""
  if inspect.isawaitable(result): return await result
  return result

def _consume_exception(task: asyncio.Task) -> None:
  """Mark the Refresh's exception as retrieved; its waiters may all have been cancelled"""
  if not task.cancelled(): task.exception()

def _bind(fn: Callable[..., Any], ctx: Any) -> Callable[..., Any]:
  """Bind a plain function to the Context so the Context is passed as `self`.

  Bound methods, lambdas, partials, builtins & callable objects already carry their own
  `self` (or have none); they are returned unchanged so the Context never becomes an extra argument.
  """
  if ctx is MISSING: return fn
  if not inspect.isfunction(fn) or fn.__name__ == "<lambda>": return fn
  return MethodType(fn, ctx)

@dataclass
class _CoordinatorCtx:
  marker: STALE_T = field(default_factory=STALE_T)
  """The stale signal; compared by identity only"""
  pending: asyncio.Task | None = None
  """The in-flight Refresh Task (None if no Refresh is in flight)"""

@dataclass(eq=False)
class Coordinator(Gate):
  """Run Actions against shared state, refreshing that state at most once at a time.

  Build one with `create_coordinator` or `create_coordinator_ctx`.
  """

  refresh: Callable[[], Any]
  """The Refresh Operation; already bound to its Context & fixed Arguments"""

  _: KW_ONLY

  max_replays: int | None = None
  """How many times a single Invocation may replay its Action after a Refresh (None is unbounded)"""
  _ctx: _CoordinatorCtx = field(default_factory=_CoordinatorCtx, init=False, repr=False)

  def __post_init__(self):
    InvalidArgument.check_callable(self.refresh, "refresh")
    InvalidArgument.check_limit(self.max_replays)

  @classmethod
  def factory(cls, refresh: Callable[..., Any] = MISSING, *args: Any, max_replays: int | None = None) -> Coordinator:
    """Build a Coordinator whose Refresh Operation is called with no Context & the fixed Arguments prepended."""
    InvalidArgument.check_callable(refresh, "refresh")
    return cls(functools.partial(refresh, *args), max_replays=max_replays)

  @classmethod
  def factory_ctx(cls, refresh: Callable[..., Any] = MISSING, ctx: Any = MISSING, *args: Any, max_replays: int | None = None) -> Coordinator:
    """Build a Coordinator whose Refresh Operation is bound to the Context (passed as `self`) & called with the fixed Arguments prepended."""
    InvalidArgument.check_callable(refresh, "refresh")
    InvalidArgument.check_context(ctx)
    return cls(functools.partial(_bind(refresh, ctx), *args), max_replays=max_replays)

  @property
  def refreshing(self) -> bool:
    """Check if a Refresh is currently in flight."""
    return self._ctx.pending is not None

  def stale_signal(self) -> Any:
    """The value an Action returns to request a Refresh"""
    return self._ctx.marker

  async def acquire(self) -> None:
    """Wait out the in-flight Refresh (if any); raises the Refresh's exception if it failed."""
    pending = self._ctx.pending
    if pending is None: return
    logger.trace("Waiting on the in-flight Refresh")
    await asyncio.shield(pending) # Waiters must never cancel the shared Refresh

  async def release(self) -> None: pass

  def invoke(self, action: Callable[..., Any] = MISSING, /, *args: Any) -> asyncio.Task:
    """Schedule the Action with no Context; returns the Task producing the Action's final result."""
    InvalidArgument.check_callable(action, "action")
    loop = asyncio.get_running_loop()
    return loop.create_task(self._invoke(action, MISSING, args))

  def invoke_with_context(self, action: Callable[..., Any] = MISSING, ctx: Any = MISSING, /, *args: Any) -> asyncio.Task:
    """Schedule the Action bound to the Context (passed as `self`); returns the Task producing the Action's final result."""
    InvalidArgument.check_callable(action, "action")
    InvalidArgument.check_context(ctx)
    loop = asyncio.get_running_loop()
    return loop.create_task(self._invoke(action, ctx, args))

  async def _invoke(self, action: Callable[..., Any], ctx: Any, args: tuple[Any, ...]) -> Any:
    fn = _bind(action, ctx)
    replays = 0
    while True:
      await self.acquire()
      result = await _settle(fn(*args))
      if result is not self._ctx.marker: return result
      if self.max_replays is not None and replays >= self.max_replays: raise ReplayLimitExceeded(self.max_replays)
      replays += 1
      logger.trace(f"{getattr(action, '__qualname__', type(action).__qualname__)} signaled stale state; replay #{replays}")
      if self._ctx.pending is None:
        self._ctx.pending = asyncio.get_running_loop().create_task(self._refresh())
        self._ctx.pending.add_done_callback(_consume_exception)

  async def _refresh(self) -> None:
    logger.debug("Starting a Refresh")
    try:
      await _settle(self.refresh())
    except Exception as e:
      logger.debug(f"Refresh failed: {type(e).__name__}")
      raise
    finally:
      self._ctx.pending = None # Cleared before any waiter resumes
    logger.debug("Refresh completed")

def create_coordinator(refresh: Callable[..., Any] = MISSING, *args: Any, max_replays: int | None = None) -> Coordinator:
  """Create a Coordinator whose Refresh Operation is called with no Context & the fixed Arguments prepended."""
  return Coordinator.factory(refresh, *args, max_replays=max_replays)

def create_coordinator_ctx(refresh: Callable[..., Any] = MISSING, ctx: Any = MISSING, *args: Any, max_replays: int | None = None) -> Coordinator:
  """Create a Coordinator whose Refresh Operation is bound to the Context (passed as `self`) & called with the fixed Arguments prepended."""
  return Coordinator.factory_ctx(refresh, ctx, *args, max_replays=max_replays)
