"""Exception hierarchy for the Freebox Munin plugin.

Library code raises these; only :func:`freebox_munin.cli.main` turns them into
an exit status.
"""


class FreeboxError(Exception):
    """Base class for every fatal plugin error."""

    exit_code = 1


class AuthenticationError(FreeboxError):
    """Wrong password, missing password, or a session that cannot be re-established."""


class TransportError(FreeboxError):
    """The router could not be reached or answered with an HTTP error status."""


class UsageError(FreeboxError):
    """Unknown metric name or run mode."""
