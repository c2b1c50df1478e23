"""Wire models: backend requests/responses and Claude Code hook I/O.

Backend responses use camelCase keys; hook input uses snake_case and hook
output uses camelCase. Aliases keep Python attribute names snake_case.
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Backend responses
# ---------------------------------------------------------------------------


class PairingInitResponse(BaseModel):
    """PairingSession: transient handle for one setup attempt."""

    model_config = ConfigDict(populate_by_name=True)

    pairing_id: str = Field(alias="pairingId")
    pairing_token: str = Field(alias="pairingToken")


class PairingStatusResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    complete: bool
    device_token: Optional[str] = Field(default=None, alias="deviceToken")


class NotifyResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    decision_id: str = Field(alias="decisionId")


class DecisionStatusResponse(BaseModel):
    """Poll result for one decision.

    status is one of pending/decided/expired; decision is allow/deny/dismiss
    once decided. Both are kept as plain strings so unknown values reach the
    poller instead of failing validation.
    """

    status: str
    decision: Optional[str] = None


# ---------------------------------------------------------------------------
# Backend requests
# ---------------------------------------------------------------------------


class NotifyPayload(BaseModel):
    """PermissionRequest sent to /api/notify."""

    model_config = ConfigDict(frozen=True)

    title: str
    message: str
    tool_use_id: str
    session_id: str


class SimpleNotifyPayload(BaseModel):
    """Idle notification sent to /api/notify/simple (no decision tracking)."""

    title: str
    message: str


# ---------------------------------------------------------------------------
# Hook input
# ---------------------------------------------------------------------------


class GenericHookInput(BaseModel):
    """Just enough of any hook payload to dispatch on the event name."""

    hook_event_name: str


class NotificationInput(BaseModel):
    session_id: str = ""
    hook_event_name: str = "Notification"
    message: str = ""
    notification_type: str = ""


class PermissionRequestInput(BaseModel):
    """PermissionRequest / PreToolUse hook payload."""

    session_id: str = ""
    transcript_path: Optional[str] = None
    cwd: Optional[str] = None
    permission_mode: Optional[str] = None
    hook_event_name: str = "PreToolUse"
    tool_name: str
    tool_input: Any = None
    tool_use_id: Optional[str] = None


# ---------------------------------------------------------------------------
# Hook output
# ---------------------------------------------------------------------------


class PreToolUseOutput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    hook_event_name: str = Field(default="PreToolUse", alias="hookEventName")
    permission_decision: Literal["allow", "deny", "ask"] = Field(alias="permissionDecision")
    permission_decision_reason: Optional[str] = Field(default=None, alias="permissionDecisionReason")


class HookOutput(BaseModel):
    """Document printed on stdout for Claude Code to act on."""

    model_config = ConfigDict(populate_by_name=True)

    hook_specific_output: Optional[PreToolUseOutput] = Field(default=None, alias="hookSpecificOutput")
    suppress_output: Optional[bool] = Field(default=None, alias="suppressOutput")

    @classmethod
    def allow(cls, reason: Optional[str] = None) -> "HookOutput":
        return cls(
            hook_specific_output=PreToolUseOutput(
                permission_decision="allow",
                permission_decision_reason=reason,
            ),
            suppress_output=True,
        )

    @classmethod
    def deny(cls, reason: str) -> "HookOutput":
        return cls(
            hook_specific_output=PreToolUseOutput(
                permission_decision="deny",
                permission_decision_reason=reason,
            ),
        )

    @classmethod
    def ask(cls, reason: Optional[str] = None) -> "HookOutput":
        return cls(
            hook_specific_output=PreToolUseOutput(
                permission_decision="ask",
                permission_decision_reason=reason,
            ),
        )

    def to_json(self) -> str:
        """Compact JSON with camelCase keys and unset fields omitted.

        >>> HookOutput.allow().to_json()
        '{"hookSpecificOutput":{"hookEventName":"PreToolUse","permissionDecision":"allow"},"suppressOutput":true}'
        """
        return self.model_dump_json(by_alias=True, exclude_none=True)
