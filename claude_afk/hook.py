"""Claude Code hook entry point.

Handles two events delivered as JSON (argv or stdin):

  Notification       idle_prompt only; pushes "Claude is waiting" and exits
  PermissionRequest  (or PreToolUse) pushes the tool call to the phone and
                     blocks until allow/deny/dismiss, timeout, or failure

Output format:
  Allow:  {"hookSpecificOutput":{"hookEventName":"PreToolUse","permissionDecision":"allow"},"suppressOutput":true}
  Deny:   {"hookSpecificOutput":{...,"permissionDecision":"deny","permissionDecisionReason":"..."}}
  Other:  {"hookSpecificOutput":{...,"permissionDecision":"ask","permissionDecisionReason":"..."}}
  Not paired / inactive / non-permission event: exit 0, no output
  Unparseable input or unknown event: exit 1, no output
"""

import logging
import secrets
from dataclasses import dataclass
from typing import Callable, Optional

from pydantic import ValidationError

from claude_afk.client import BackendClient
from claude_afk.config import AfkConfig, get_backend_url
from claude_afk.constants import IDLE_NOTIFICATION_TITLE, IDLE_NOTIFICATION_TYPE
from claude_afk.errors import AfkError
from claude_afk.models import (
    GenericHookInput,
    HookOutput,
    NotificationInput,
    NotifyPayload,
    PermissionRequestInput,
    SimpleNotifyPayload,
)
from claude_afk.poller import Decision, DecisionOutcome, DecisionPoller
from claude_afk.tools import describe, format_for_notification

logger = logging.getLogger(__name__)

PERMISSION_EVENTS = ("PermissionRequest", "PreToolUse")

DENY_REASON = "Denied from mobile device"
DISMISS_REASON = "Dismissed on mobile device"


@dataclass(frozen=True)
class HookResult:
    exit_code: int
    output: Optional[HookOutput] = None


def new_tool_use_id() -> str:
    """Random 21-char URL-safe id for inputs that carry none.

    >>> len(new_tool_use_id())
    21
    """
    return secrets.token_urlsafe(16)[:21]


def to_hook_response(outcome: DecisionOutcome) -> HookOutput:
    """Translate a poll outcome into the hook response. Only ALLOW allows.

    >>> to_hook_response(DecisionOutcome.dismiss()).to_json()
    '{"hookSpecificOutput":{"hookEventName":"PreToolUse","permissionDecision":"ask","permissionDecisionReason":"Dismissed on mobile device"}}'
    """
    if outcome.decision is Decision.ALLOW:
        return HookOutput.allow(outcome.reason)
    if outcome.decision is Decision.DENY:
        return HookOutput.deny(outcome.reason or DENY_REASON)
    if outcome.decision is Decision.DISMISS:
        return HookOutput.ask(outcome.reason or DISMISS_REASON)
    return HookOutput.ask(outcome.reason)


def build_permission_request(hook_input: PermissionRequestInput) -> NotifyPayload:
    descriptor = describe(hook_input.tool_name, hook_input.tool_input)
    title, message = format_for_notification(descriptor)
    return NotifyPayload(
        title=title,
        message=message,
        tool_use_id=hook_input.tool_use_id or new_tool_use_id(),
        session_id=hook_input.session_id,
    )


def handle_notification(raw: str, client: BackendClient) -> HookResult:
    try:
        notification = NotificationInput.model_validate_json(raw)
    except ValidationError as e:
        logger.error("Failed to parse Notification input: %s", e)
        return HookResult(1)

    if notification.notification_type != IDLE_NOTIFICATION_TYPE:
        logger.debug("Ignoring %r notification", notification.notification_type)
        return HookResult(0)

    try:
        client.notify_simple(SimpleNotifyPayload(
            title=IDLE_NOTIFICATION_TITLE,
            message=notification.message,
        ))
        logger.debug("Notification sent successfully")
    except AfkError as e:
        logger.warning("Failed to send notification: %s", e)
    return HookResult(0)


def handle_permission_request(raw: str, poller: DecisionPoller) -> HookResult:
    try:
        hook_input = PermissionRequestInput.model_validate_json(raw)
    except ValidationError as e:
        logger.error("Failed to parse PermissionRequest input: %s", e)
        return HookResult(1)

    payload = build_permission_request(hook_input)
    logger.debug("Requesting decision for %s (%s)", hook_input.tool_name, payload.tool_use_id)
    outcome = poller.request_decision(payload)
    logger.debug("Outcome for %s: %s", payload.tool_use_id, outcome.decision.value)
    return HookResult(0, to_hook_response(outcome))


def run_hook(
    raw: str,
    config: AfkConfig,
    *,
    client_factory: Callable[[str, str], BackendClient] = BackendClient,
    poller_factory: Callable[[BackendClient], DecisionPoller] = DecisionPoller,
) -> HookResult:
    """Dispatch one hook invocation. Never raises for backend trouble."""
    if not config.should_notify():
        # Not paired or switched off: let Claude Code ask as usual
        return HookResult(0)

    try:
        event = GenericHookInput.model_validate_json(raw).hook_event_name
    except ValidationError as e:
        logger.error("Failed to parse hook input: %s", e)
        return HookResult(1)

    if event != "Notification" and event not in PERMISSION_EVENTS:
        logger.error("Unknown hook event: %s", event)
        return HookResult(1)

    with client_factory(get_backend_url(config), config.device_token) as client:
        if event == "Notification":
            return handle_notification(raw, client)
        return handle_permission_request(raw, poller_factory(client))
