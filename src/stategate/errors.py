"""Errors raised by the Coordinator"""
from __future__ import annotations
import enum

__all__ = [
  'MISSING_T', 'MISSING',
  'ArgumentReason', 'InvalidArgument', 'ReplayLimitExceeded',
]

MISSING_T = type('MISSING', (), {})
MISSING = MISSING_T()
"""Marks an argument the caller didn't pass; distinct from an explicit `None`"""

class ArgumentReason(enum.IntEnum):
  NOT_CALLABLE = 1
  """The Action or Refresh Operation is not callable."""
  CONTEXT_MISSING = 2
  """A mandatory Context was not passed."""
  CONTEXT_NULL = 3
  """A mandatory Context was passed as None."""
  INVALID_LIMIT = 4
  """The Replay Limit is neither None nor a non-negative integer."""

class InvalidArgument(TypeError):
  """A malformed argument was passed; raised before any asynchronous work starts."""
  def __init__(self, reason: ArgumentReason, msg: str):
    super().__init__(msg)
    self.reason = reason
    self.msg = msg

  def __str__(self) -> str:
    return f"{self.reason.name}: {self.msg}"

  @classmethod
  def check_callable(cls, fn: object, name: str) -> None:
    if fn is MISSING or not callable(fn): raise cls(ArgumentReason.NOT_CALLABLE, f"{name} must be callable")

  @classmethod
  def check_context(cls, ctx: object) -> None:
    if ctx is MISSING: raise cls(ArgumentReason.CONTEXT_MISSING, "context is required")
    elif ctx is None: raise cls(ArgumentReason.CONTEXT_NULL, "context cannot be null")

  @classmethod
  def check_limit(cls, limit: object) -> None:
    if limit is None: return
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
      raise cls(ArgumentReason.INVALID_LIMIT, f"max_replays must be None or a non-negative integer; got {limit!r}")

class ReplayLimitExceeded(RuntimeError):
  """An Action kept signaling stale state past the configured replay limit."""
  def __init__(self, limit: int):
    super().__init__(limit)
    self.limit = limit

  def __str__(self) -> str:
    return f"action signaled stale state after {self.limit} replay(s)"
