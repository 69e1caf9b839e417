from stategate.testing import test_registry

from .tests import construction, coordinator

test_registry.register_all("stategate.construction", {
  "create.without_refresh": construction.test_create_without_refresh,
  "create.non_callable_refresh": construction.test_create_non_callable_refresh,
  "create.with_params": construction.test_create_with_params,
  "create_ctx.without_refresh": construction.test_create_ctx_without_refresh,
  "create_ctx.non_callable_refresh": construction.test_create_ctx_non_callable_refresh,
  "create_ctx.without_context": construction.test_create_ctx_without_context,
  "create_ctx.null_context": construction.test_create_ctx_null_context,
  "create_ctx.with_params": construction.test_create_ctx_with_params,
  "create.invalid_replay_limit": construction.test_create_invalid_replay_limit,
  "Coordinator.factory": construction.test_factory_aliases,
  "invoke.without_action": construction.test_invoke_without_action,
  "invoke_with_context.without_action": construction.test_invoke_ctx_without_action,
  "invoke_with_context.without_context": construction.test_invoke_ctx_without_context,
  "invoke_with_context.null_context": construction.test_invoke_ctx_null_context,
  "Coordinator.factory.subclass": construction.test_factory_subclass,
  "Coordinator.runtime_state": construction.test_runtime_state_not_injectable,
  "invoke.without_running_loop": construction.test_invoke_without_running_loop,
})
test_registry.register_all("stategate.gates", {
  "invoke.without_stale_state": coordinator.test_invoke_without_stale_state,
  "invoke.with_params": coordinator.test_invoke_with_params,
  "invoke.sync_callables": coordinator.test_invoke_sync_callables,
  "refresh.without_context": coordinator.test_refresh_without_context,
  "refresh.with_context": coordinator.test_refresh_with_context,
  "invoke_with_context.binds_self": coordinator.test_invoke_with_context_binds_self,
  "invoke_with_context.callables": coordinator.test_invoke_with_context_callables,
  "refresh.with_context_callables": coordinator.test_refresh_with_context_callables,
  "replay.after_refresh": coordinator.test_replay_after_refresh,
  "replay.unbounded": coordinator.test_unbounded_replay,
  "replay.limit": coordinator.test_replay_limit,
  "refresh.single_flight": coordinator.test_single_flight,
  "refresh.failure_fan_out": coordinator.test_refresh_failure_fan_out,
  "refresh.blocks_invocations": coordinator.test_blocked_behind_refresh,
  "refresh.failure_blocks_invocations": coordinator.test_blocked_behind_failed_refresh,
  "refresh.cleared_before_waiters_resume": coordinator.test_slot_cleared_before_waiters_resume,
  "refresh.survives_cancelled_waiter": coordinator.test_cancelled_waiter,
  "stale_signal.identity": coordinator.test_stale_signal_identity,
  "stale_signal.identity_not_equality": coordinator.test_identity_not_equality,
  "action.failure": coordinator.test_action_failure,
  "Gate": coordinator.test_gate,
})
