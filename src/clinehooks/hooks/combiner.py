"""Result combination: fold per-script responses into one AggregateResult."""

from __future__ import annotations

from collections.abc import Sequence

from .models import AggregateResult, HookResponse, policy_for

CONTEXT_SEPARATOR = "\n"


def combine_results(hook_name: str, responses: Sequence[HookResponse]) -> AggregateResult:
    """Combine responses in descriptor order (global before workspace).

    Any ``shouldContinue = false`` clears the aggregate flag whatever the
    policy; the policy is recorded so the caller can tell a veto from a
    fire-and-forget report. The first vetoing response's error message wins,
    otherwise the first non-empty one.
    """
    result = AggregateResult(policy=policy_for(hook_name))
    if not responses:
        return result

    result.should_continue = all(r.should_continue for r in responses)

    vetoes = [r.error_message for r in responses if not r.should_continue and r.error_message]
    errors = [r.error_message for r in responses if r.error_message]
    if vetoes:
        result.error_message = vetoes[0]
    elif errors:
        result.error_message = errors[0]

    result.context_modification = CONTEXT_SEPARATOR.join(
        r.context_modification for r in responses if r.context_modification
    )
    return result
