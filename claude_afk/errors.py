"""Error taxonomy shared by the client, poller and hook entry point."""


class AfkError(Exception):
    """Base class for claude-afk failures."""


class ConfigUnavailable(AfkError):
    """Config file could not be read or parsed."""


class TransportFailure(AfkError):
    """Network error, timeout, or non-2xx response from the backend."""


class DecodeFailure(AfkError):
    """Backend response body was not the JSON document we expected."""


class PollTimeout(AfkError):
    """Poll loop hit its wall-clock ceiling without a terminal status."""


class UnrecognizedBackendState(AfkError):
    """Backend reported a status or decision value we do not understand."""
