"""
core/errors.py -- Exceptions raised by the Synapse client.

Remote failures are NOT exceptions: the transport returns them as failed
ApiResult values (see core/models.py). These classes cover the few places
that do raise -- the login step, before any request is sent.
"""


class SynapseError(Exception):
    """Base class for errors raised by this package."""


class AuthError(SynapseError):
    """The login call failed or returned no session token."""
