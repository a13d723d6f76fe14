"""Login to the ZoneEdit control panel, including the second factor step."""
import enum
import hashlib
import logging

from certbot_dns_zoneedit import forms
from certbot_dns_zoneedit.errors import AuthenticationFailed
from certbot_dns_zoneedit.errors import FormFieldMissing
from certbot_dns_zoneedit.errors import UnexpectedStatus
from certbot_dns_zoneedit.errors import ZoneEditError
from certbot_dns_zoneedit.web import REDIRECT_STATUSES

logger = logging.getLogger(__name__)

LOGIN_PATH = '/login.php'
LOGIN_SUBMIT_PATH = '/home/'
SECOND_FACTOR_PATH = '/tfa.php'

LOGIN_FORM_UNAVAILABLE = 'LoginFormUnavailable'
LOGIN_REJECTED = 'LoginRejected'
SECOND_FACTOR_FORM_UNAVAILABLE = 'SecondFactorFormUnavailable'
SECOND_FACTOR_REJECTED = 'SecondFactorRejected'


class AuthState(enum.Enum):
    UNAUTHENTICATED = 'unauthenticated'
    LOGIN_FORM_FETCHED = 'login_form_fetched'
    CREDENTIALED = 'credentialed'
    AWAITING_SECOND_FACTOR = 'awaiting_second_factor'
    AUTHENTICATED = 'authenticated'
    FAILED = 'failed'


def md5_hex(text):
    return hashlib.md5(text.encode('utf-8')).hexdigest()


def login_hash(user, password, challenge):
    """The value the login page's script computes before submitting."""
    return md5_hex(user + md5_hex(password) + challenge)


class LoginFlow(object):
    """
    Drives a :class:`~.web.ZoneEditSession` from anonymous to authenticated.

    Each non-terminal state has exactly one handler which either returns the
    next state or raises. A raised error moves the flow to ``FAILED`` and is
    reported once as :class:`~.errors.AuthenticationFailed`.
    """

    def __init__(self, session, credentials):
        self.session = session
        self.credentials = credentials
        self.state = AuthState.UNAUTHENTICATED
        self.login_challenge = None
        self.csrf_token = None
        self._transitions = {
            AuthState.UNAUTHENTICATED: (self._fetch_login_form, LOGIN_FORM_UNAVAILABLE),
            AuthState.LOGIN_FORM_FETCHED: (self._submit_credentials, LOGIN_REJECTED),
            AuthState.CREDENTIALED: (self._fetch_second_factor_form, SECOND_FACTOR_FORM_UNAVAILABLE),
            AuthState.AWAITING_SECOND_FACTOR: (self._submit_second_factor, SECOND_FACTOR_REJECTED),
        }

    def run(self):
        """
        Step through every state until ``AUTHENTICATED``.

        :returns: The now authenticated session.
        :raises .AuthenticationFailed: if any step fails; nothing is retried.
        """
        while self.state is not AuthState.AUTHENTICATED:
            self.state = self.step()
        self.session.authenticated = True
        logger.info('Logged in to ZoneEdit as %s', self.credentials.user)
        return self.session

    def step(self):
        """Run the handler of the current state and return the next state."""
        if self.state not in self._transitions:
            raise AuthenticationFailed(self.state.name, 'NoTransition')

        handler, reason = self._transitions[self.state]
        failed_at = self.state
        try:
            return handler()
        except ZoneEditError as e:
            self.state = AuthState.FAILED
            logger.debug('Login failed in state %s: %s', failed_at.name, e)
            raise AuthenticationFailed(failed_at.name, reason, e) from e

    def _fetch_login_form(self):
        resp = self.session.send('GET', LOGIN_PATH)
        if resp.status_code != 200:
            raise UnexpectedStatus('login form', resp.status_code)

        fields = forms.extract_form(resp.content, forms.SCOPE_FORM)
        self.login_challenge = _require(fields, 'login_chal', LOGIN_PATH)
        self.csrf_token = _require(fields, 'csrf_token', LOGIN_PATH)
        return AuthState.LOGIN_FORM_FETCHED

    def _submit_credentials(self):
        user = self.credentials.user
        data = {
            'login_user': user,
            'login_pass': '',
            'login_hash': login_hash(user, self.credentials.password, self.login_challenge),
            'login_chal': self.login_challenge,
            'csrf_token': self.csrf_token,
        }
        resp = self.session.send('POST', LOGIN_SUBMIT_PATH, data=data)
        if resp.status_code not in REDIRECT_STATUSES:
            raise UnexpectedStatus('login', resp.status_code)
        return AuthState.CREDENTIALED

    def _fetch_second_factor_form(self):
        # The panel sends every login through this page, even for accounts
        # authenticating with a static token. Not verified as permanent.
        resp = self.session.send('GET', SECOND_FACTOR_PATH)
        if resp.status_code != 200:
            raise UnexpectedStatus('second factor form', resp.status_code)

        fields = forms.extract_form(resp.content, forms.SCOPE_FORM)
        self.csrf_token = _require(fields, 'csrf_token', SECOND_FACTOR_PATH)
        return AuthState.AWAITING_SECOND_FACTOR

    def _submit_second_factor(self):
        data = {
            'tfa_mode': 'token',
            'tfa_autosubmit': '1',
            'tfa_token': self.credentials.token,
            'csrf_token': self.csrf_token,
        }
        resp = self.session.send('POST', SECOND_FACTOR_PATH, data=data)
        if resp.status_code not in (200, 302):
            raise UnexpectedStatus('second factor', resp.status_code)
        return AuthState.AUTHENTICATED


def _require(fields, name, page):
    value = fields.get(name)
    if not value:
        raise FormFieldMissing(name, page)
    return value
