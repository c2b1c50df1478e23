"""Tests for wire models: backend documents and hook output."""

import json

from claude_afk.models import (
    DecisionStatusResponse,
    GenericHookInput,
    HookOutput,
    NotificationInput,
    NotifyPayload,
    NotifyResponse,
    PairingInitResponse,
    PairingStatusResponse,
    PermissionRequestInput,
)


class TestBackendResponses:
    """camelCase backend JSON -> snake_case attributes."""

    def test_pairing_init(self):
        r = PairingInitResponse.model_validate({"pairingId": "abc", "pairingToken": "xyz"})
        assert r.pairing_id == "abc"
        assert r.pairing_token == "xyz"

    def test_pairing_status_incomplete(self):
        r = PairingStatusResponse.model_validate({"complete": False, "deviceToken": None})
        assert r.complete is False
        assert r.device_token is None

    def test_pairing_status_complete(self):
        r = PairingStatusResponse.model_validate({"complete": True, "deviceToken": "tok"})
        assert r.device_token == "tok"

    def test_notify_response(self):
        r = NotifyResponse.model_validate({"success": True, "decisionId": "dec-1"})
        assert r.decision_id == "dec-1"

    def test_decision_status_pending(self):
        r = DecisionStatusResponse.model_validate({"status": "pending", "decision": None})
        assert r.status == "pending"
        assert r.decision is None

    def test_decision_status_unknown_values_survive(self):
        r = DecisionStatusResponse.model_validate({"status": "weird", "decision": "maybe"})
        assert (r.status, r.decision) == ("weird", "maybe")


class TestNotifyPayload:

    def test_round_trip(self):
        payload = NotifyPayload(
            title="Edit File",
            message="/f.py\n\n- a\n+ b",
            tool_use_id="toolu_01",
            session_id="sess-1",
        )
        assert NotifyPayload.model_validate_json(payload.model_dump_json()) == payload

    def test_wire_keys_are_snake_case(self):
        payload = NotifyPayload(title="t", message="m", tool_use_id="u", session_id="s")
        assert json.loads(payload.model_dump_json()) == {
            "title": "t", "message": "m", "tool_use_id": "u", "session_id": "s",
        }


class TestHookInput:

    def test_generic_dispatch_field(self):
        raw = '{"session_id": "s", "hook_event_name": "PermissionRequest", "tool_name": "Bash"}'
        assert GenericHookInput.model_validate_json(raw).hook_event_name == "PermissionRequest"

    def test_permission_request_full(self):
        raw = json.dumps({
            "session_id": "abc123",
            "transcript_path": "/tmp/t.jsonl",
            "cwd": "/home/user/project",
            "permission_mode": "default",
            "hook_event_name": "PreToolUse",
            "tool_name": "Bash",
            "tool_input": {"command": "ls -la"},
            "tool_use_id": "toolu_01ABC",
        })
        parsed = PermissionRequestInput.model_validate_json(raw)
        assert parsed.tool_name == "Bash"
        assert parsed.tool_input == {"command": "ls -la"}
        assert parsed.tool_use_id == "toolu_01ABC"

    def test_permission_request_missing_tool_use_id(self):
        raw = '{"session_id": "s", "hook_event_name": "PermissionRequest", "tool_name": "Read", "tool_input": {}}'
        assert PermissionRequestInput.model_validate_json(raw).tool_use_id is None

    def test_notification_idle_prompt(self):
        raw = json.dumps({
            "session_id": "s",
            "hook_event_name": "Notification",
            "message": "Claude is waiting for your input",
            "notification_type": "idle_prompt",
        })
        n = NotificationInput.model_validate_json(raw)
        assert n.notification_type == "idle_prompt"
        assert n.message == "Claude is waiting for your input"


class TestHookOutput:
    """Bit-exact hook response documents."""

    def test_allow(self):
        assert json.loads(HookOutput.allow().to_json()) == {
            "hookSpecificOutput": {"hookEventName": "PreToolUse", "permissionDecision": "allow"},
            "suppressOutput": True,
        }

    def test_deny(self):
        assert json.loads(HookOutput.deny("Denied from mobile device").to_json()) == {
            "hookSpecificOutput": {
                "hookEventName": "PreToolUse",
                "permissionDecision": "deny",
                "permissionDecisionReason": "Denied from mobile device",
            },
        }

    def test_ask_without_reason(self):
        assert json.loads(HookOutput.ask().to_json()) == {
            "hookSpecificOutput": {"hookEventName": "PreToolUse", "permissionDecision": "ask"},
        }
