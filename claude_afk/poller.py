"""Decision and pairing poll loops.

Turns an asynchronous approval on the phone into a synchronous answer for
a blocking hook. Lifecycle of one decision:

    SUBMITTED -> PENDING -> ALLOWED | DENIED | DISMISSED | EXPIRED
                            | TIMED_OUT | TRANSPORT_ERROR | UNRECOGNIZED

Policy:
  - submit failure: no loop, answer "ask" immediately
  - poll transport/decode failure: log and keep polling until the ceiling
  - unknown status or decision value: fail fast to "ask"
  - dismiss/expired/timeout: "ask", never "allow"

Clock and sleep are injectable so tests can run the loop without waiting.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, Optional

from claude_afk.client import BackendClient
from claude_afk.constants import (
    DECISION_POLL_INTERVAL,
    DECISION_TIMEOUT,
    POLL_INTERVAL,
    SETUP_TIMEOUT,
)
from claude_afk.errors import DecodeFailure, PollTimeout, TransportFailure, UnrecognizedBackendState
from claude_afk.models import DecisionStatusResponse, NotifyPayload

logger = logging.getLogger(__name__)


class Decision(str, Enum):
    ALLOW = "allow"
    DENY = "deny"
    ASK = "ask"
    DISMISS = "dismiss"


@dataclass(frozen=True)
class DecisionOutcome:
    """Final answer of one poll loop."""

    decision: Decision
    reason: Optional[str] = None

    @classmethod
    def allow(cls) -> "DecisionOutcome":
        return cls(Decision.ALLOW)

    @classmethod
    def deny(cls, reason: Optional[str] = None) -> "DecisionOutcome":
        return cls(Decision.DENY, reason)

    @classmethod
    def ask(cls, reason: Optional[str] = None) -> "DecisionOutcome":
        return cls(Decision.ASK, reason)

    @classmethod
    def dismiss(cls, reason: Optional[str] = None) -> "DecisionOutcome":
        return cls(Decision.DISMISS, reason)


class PollState(str, Enum):
    SUBMITTED = "submitted"
    PENDING = "pending"
    ALLOWED = "allowed"
    DENIED = "denied"
    DISMISSED = "dismissed"
    EXPIRED = "expired"
    TIMED_OUT = "timed_out"
    TRANSPORT_ERROR = "transport_error"
    UNRECOGNIZED = "unrecognized"


EXPIRED_REASON = "Request expired before a decision was made"


def interpret_status(status: DecisionStatusResponse) -> tuple[PollState, Optional[DecisionOutcome]]:
    """Map one status payload to the next state and, if terminal, an outcome.

    Raises UnrecognizedBackendState for values outside the protocol.

    >>> interpret_status(DecisionStatusResponse(status="pending"))
    (<PollState.PENDING: 'pending'>, None)
    >>> interpret_status(DecisionStatusResponse(status="decided", decision="allow"))[1]
    DecisionOutcome(decision=<Decision.ALLOW: 'allow'>, reason=None)
    """
    if status.status == "pending":
        return PollState.PENDING, None

    if status.status == "decided":
        if status.decision == "allow":
            return PollState.ALLOWED, DecisionOutcome.allow()
        if status.decision == "deny":
            return PollState.DENIED, DecisionOutcome.deny()
        if status.decision == "dismiss":
            return PollState.DISMISSED, DecisionOutcome.dismiss()
        raise UnrecognizedBackendState(f"Decided with unknown decision {status.decision!r}")

    if status.status == "expired":
        return PollState.EXPIRED, DecisionOutcome.dismiss(EXPIRED_REASON)

    raise UnrecognizedBackendState(f"Unknown decision status {status.status!r}")


class _PollLoop:
    """Fixed-interval loop with a wall-clock ceiling.

    Each tick sleeps one interval, then checks the budget; the query that
    would run past the ceiling is never issued.
    """

    def __init__(
        self,
        client: BackendClient,
        *,
        interval: float,
        timeout: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.client = client
        self.interval = interval
        self.timeout = timeout
        self.clock = clock
        self.sleep = sleep
        self.polls = 0

    def _ticks(self) -> Iterator[int]:
        start = self.clock()
        self.polls = 0
        while True:
            self.sleep(self.interval)
            elapsed = self.clock() - start
            if elapsed > self.timeout:
                raise PollTimeout(f"No terminal status after {elapsed:.0f}s")
            self.polls += 1
            yield self.polls


class DecisionPoller(_PollLoop):
    """Submits a permission request and waits for the phone's answer."""

    def __init__(self, client: BackendClient, *, interval: float = DECISION_POLL_INTERVAL,
                 timeout: float = DECISION_TIMEOUT, **kwargs):
        super().__init__(client, interval=interval, timeout=timeout, **kwargs)
        self.state = PollState.SUBMITTED

    def request_decision(self, payload: NotifyPayload) -> DecisionOutcome:
        """Submit, then poll. Always returns; never raises for backend trouble."""
        self.state = PollState.SUBMITTED
        try:
            response = self.client.submit_request(payload)
        except (TransportFailure, DecodeFailure) as e:
            self.state = PollState.TRANSPORT_ERROR
            logger.warning("Failed to send notification: %s", e)
            return DecisionOutcome.ask(f"claude-afk could not reach the backend: {e}")

        logger.debug("Submitted %s as decision %s", payload.tool_use_id, response.decision_id)
        return self.wait_for_decision(response.decision_id)

    def wait_for_decision(self, decision_id: str) -> DecisionOutcome:
        self.state = PollState.PENDING
        try:
            for n in self._ticks():
                try:
                    status = self.client.decision_status(decision_id)
                except (TransportFailure, DecodeFailure) as e:
                    logger.warning("Poll %d for decision %s failed, retrying: %s", n, decision_id, e)
                    continue

                try:
                    self.state, outcome = interpret_status(status)
                except UnrecognizedBackendState as e:
                    self.state = PollState.UNRECOGNIZED
                    logger.error("%s; falling back to asking the user", e)
                    return DecisionOutcome.ask(f"claude-afk received an unexpected response: {e}")

                if outcome is not None:
                    logger.debug("Decision %s resolved as %s after %d polls", decision_id, self.state.value, n)
                    return outcome
                logger.debug("Decision pending, continuing to poll")
        except PollTimeout as e:
            self.state = PollState.TIMED_OUT
            logger.warning("Decision timed out: %s", e)
            return DecisionOutcome.ask("No response from mobile device in time")


class PairingPoller(_PollLoop):
    """Waits for the phone to complete a pairing session."""

    def __init__(self, client: BackendClient, *, interval: float = POLL_INTERVAL,
                 timeout: float = SETUP_TIMEOUT, **kwargs):
        super().__init__(client, interval=interval, timeout=timeout, **kwargs)

    def wait_for_device_token(self, pairing_id: str) -> str:
        """Return the device token once pairing completes.

        Raises PollTimeout at the ceiling, DecodeFailure if the backend
        reports completion without a token.
        """
        for n in self._ticks():
            try:
                status = self.client.pairing_status(pairing_id)
            except (TransportFailure, DecodeFailure) as e:
                logger.warning("Pairing poll %d failed, retrying: %s", n, e)
                continue

            if status.complete:
                if not status.device_token:
                    raise DecodeFailure("Pairing completed but no device token received")
                logger.debug("Pairing %s complete after %d polls", pairing_id, n)
                return status.device_token
