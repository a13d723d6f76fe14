"""Immutable run configuration built once from the environment and arguments."""
import collections
import os

from certbot_dns_zoneedit.errors import ConfigurationError

ENV_USER = 'ZONEEDIT_USER'
ENV_PASS = 'ZONEEDIT_PASS'
ENV_TOKEN = 'ZONEEDIT_TOKEN'
ENV_SESSION_FILE = 'ZONEEDIT_SESSION_FILE'
ENV_TIMEOUT = 'ZONEEDIT_TIMEOUT'

ACTION_ADD = 'add'
ACTION_DELETE = 'del'
ACTIONS = (ACTION_ADD, ACTION_DELETE)

CHALLENGE_LABEL = '_acme-challenge'

DEFAULT_SESSION_FILE = os.path.join(
    os.path.expanduser('~'), '.certbot-dns-zoneedit', 'session.json')
DEFAULT_TIMEOUT = 30


class Credentials(collections.namedtuple('Credentials', ['user', 'password', 'token'])):
    """ZoneEdit account login name, password and static second factor token."""

    __slots__ = ()

    def __repr__(self):
        return 'Credentials(user={0!r}, password=***, token=***)'.format(self.user)

    @classmethod
    def from_environ(cls, environ=None):
        """
        Read the credentials from ``ZONEEDIT_USER``, ``ZONEEDIT_PASS`` and ``ZONEEDIT_TOKEN``.

        :param dict environ: Mapping to read from, defaults to ``os.environ``.
        :raises .ConfigurationError: if any of the variables is unset or empty.
        """
        if environ is None:
            environ = os.environ
        missing = [name for name in (ENV_USER, ENV_PASS, ENV_TOKEN) if not environ.get(name)]
        if missing:
            raise ConfigurationError(
                'Missing required environment variable(s): {0}'.format(', '.join(missing)))
        return cls(environ[ENV_USER], environ[ENV_PASS], environ[ENV_TOKEN])


Intent = collections.namedtuple('Intent', ['action', 'domain', 'base_domain', 'txt_host', 'txt_value'])


def split_domain(domain):
    """
    Split a fully qualified name into the zone and the challenge host label.

    ``foo.bar.example.com`` gives ``('example.com', '_acme-challenge.foo.bar')``
    and ``example.com`` gives ``('example.com', '_acme-challenge')``.

    :param str domain: The fully qualified domain name.
    :returns: ``(base_domain, txt_host)``
    :rtype: tuple
    :raises .ConfigurationError: if the name has fewer than two labels.
    """
    labels = normalize_domain(domain).split('.')
    base_domain = '.'.join(labels[-2:])
    txt_host = '.'.join([CHALLENGE_LABEL] + labels[:-2])
    return base_domain, txt_host


def normalize_domain(domain):
    """
    Lower-case ``domain``, drop a trailing dot and a leading ``*.`` wildcard
    label, then check it has at least two labels.
    """
    name = (domain or '').strip().lower()
    if name.endswith('.'):
        name = name[:-1]
    if name.startswith('*.'):
        name = name[2:]

    labels = name.split('.')
    if len(labels) < 2 or not all(labels):
        raise ConfigurationError('Unable to parse domain {0!r}'.format(domain))
    return name


def build_intent(action, domain, txt_value=None):
    """
    Validate the requested action and derive the operation intent.

    :param str action: ``add`` or ``del``.
    :param str domain: The domain being validated.
    :param str txt_value: The challenge validation, required for ``add``.
    :rtype: Intent
    :raises .ConfigurationError: on an unknown action, a bad domain or a missing value.
    """
    if action not in ACTIONS:
        raise ConfigurationError('Unknown command {0!r}, expected one of: {1}'.format(
            action, ', '.join(ACTIONS)))
    if action == ACTION_ADD and not txt_value:
        raise ConfigurationError('A non-empty TXT value is required for add')

    base_domain, txt_host = split_domain(domain)
    return Intent(action, normalize_domain(domain), base_domain, txt_host, txt_value or '')


def session_file(environ=None):
    """Location of the session cache, ``ZONEEDIT_SESSION_FILE`` or the default."""
    if environ is None:
        environ = os.environ
    return environ.get(ENV_SESSION_FILE) or DEFAULT_SESSION_FILE


def timeout(environ=None):
    """Network timeout in seconds, ``ZONEEDIT_TIMEOUT`` or the default."""
    if environ is None:
        environ = os.environ
    value = environ.get(ENV_TIMEOUT)
    if not value:
        return DEFAULT_TIMEOUT
    try:
        return float(value)
    except ValueError:
        raise ConfigurationError('{0} must be a number, got {1!r}'.format(ENV_TIMEOUT, value))
