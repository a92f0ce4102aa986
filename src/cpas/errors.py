"""Exception taxonomy for the CPAS client.

Only :class:`ConfigurationError` is ever raised synchronously to callers of the
public API. The remaining errors are captured by the dispatcher and delivered
as the error half of a :class:`cpas.dispatch.CallOutcome`.
"""

from __future__ import annotations


class CpasError(RuntimeError):
    """Base class for every error produced by this package."""


class ConfigurationError(CpasError, ValueError):
    """A connection parameter is missing, blank or was never configured."""


class NetworkError(CpasError):
    """The HTTP request failed or the service answered with a non-2xx status."""


class FetchTimeoutError(CpasError, TimeoutError):
    """The fetch did not complete before the per-call deadline."""


class DecodeError(CpasError, ValueError):
    """The response payload does not match the expected result shape."""


class CallCancelledError(CpasError):
    """The call was cancelled before a worker picked it up."""
