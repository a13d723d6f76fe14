"""Errors raised while driving the ZoneEdit control panel."""
from certbot import errors


class ZoneEditError(errors.PluginError):
    """Base class for every failure talking to ZoneEdit."""


class ConfigurationError(ZoneEditError):
    """Missing environment, bad command or unparseable domain."""


class SessionIOFailure(ZoneEditError):
    """The session cache could not be read or written."""


class RequestFailed(ZoneEditError):
    """Transport level failure (connection reset, TLS, timeout)."""


class UnexpectedStatus(ZoneEditError):
    """
    The provider answered with a status the current step does not accept.

    :ivar str step: The step that received the response.
    :ivar int status: The HTTP status code received.
    """

    def __init__(self, step, status, message=None):
        self.step = step
        self.status = status
        super(UnexpectedStatus, self).__init__(
            message or 'Unexpected HTTP status {0} during {1}'.format(status, step))


class RecordsFetchFailed(UnexpectedStatus):
    """The TXT record edit page could not be loaded."""


class PageParseError(ZoneEditError):
    """A page returned by the panel could not be parsed as HTML."""


class FormFieldMissing(ZoneEditError):
    """An expected ``<input>`` was not present in the rendered page."""

    def __init__(self, field, page):
        self.field = field
        self.page = page
        super(FormFieldMissing, self).__init__(
            'Form field {0!r} missing from {1}'.format(field, page))


class AuthenticationFailed(ZoneEditError):
    """
    The login state machine ended in its failed state.

    :ivar str step: Name of the state the flow was in when it failed.
    :ivar str reason: One of the ``login.*`` failure reasons.
    """

    def __init__(self, step, reason, cause=None):
        self.step = step
        self.reason = reason
        self.cause = cause
        message = 'Authentication failed at {0}: {1}'.format(step, reason)
        if cause is not None:
            message += ' ({0})'.format(cause)
        super(AuthenticationFailed, self).__init__(message)


class RecordMutationFailed(ZoneEditError):
    """
    The edit or confirm phase of a record change was rejected.

    :ivar str phase: ``edit`` or ``confirm``.
    :ivar int status: The HTTP status code received.
    """

    def __init__(self, phase, status, message=None):
        self.phase = phase
        self.status = status
        super(RecordMutationFailed, self).__init__(
            message or 'Record {0} failed with status code {1}'.format(phase, status))


class ConfirmFailed(RecordMutationFailed):
    """The provider refused to confirm the staged change."""

    def __init__(self, status):
        super(ConfirmFailed, self).__init__('confirm', status)
