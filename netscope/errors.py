"""Exception types shared across netscope."""


class NetscopeError(Exception):
    """Base class for netscope errors."""


class PeerGone(NetscopeError):
    """The remote end of a sync channel is gone.

    Fatal for the monitoring session: once raised, the session stops
    processing events and every further send reports the same condition.
    """


class CodecError(NetscopeError, ValueError):
    """A wire frame could not be encoded or decoded."""


class RejectedRequest(NetscopeError):
    """A mutation request violates a topology invariant."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason
