"""Command line entry point: ``certbot-zoneedit <add|del> <fqdn> [txtValue]``."""
import argparse
import logging
import os
import sys

from certbot_dns_zoneedit import config
from certbot_dns_zoneedit.client import ZoneEditClient
from certbot_dns_zoneedit.errors import ConfigurationError
from certbot_dns_zoneedit.errors import ZoneEditError
from certbot_dns_zoneedit.session_store import SessionStore

logger = logging.getLogger(__name__)


def create_parser():
    parser = argparse.ArgumentParser(
        prog='certbot-zoneedit',
        description='Add or delete the _acme-challenge TXT record of a ZoneEdit hosted domain.',
        epilog='Credentials are read from ZONEEDIT_USER, ZONEEDIT_PASS and ZONEEDIT_TOKEN. '
               'Without a domain, CERTBOT_DOMAIN and CERTBOT_VALIDATION are used so the '
               'command can serve as a certbot manual hook.')
    parser.add_argument('command', choices=config.ACTIONS, help='add or delete the record')
    parser.add_argument('domain', nargs='?', help='fully qualified domain being validated')
    parser.add_argument('txt_value', nargs='?', help='TXT record value, required for add')
    parser.add_argument('--session-file', help='session cache location (default: %s)' %
                        config.DEFAULT_SESSION_FILE)
    parser.add_argument('-v', '--verbose', action='store_true', help='log debug output')
    return parser


def resolve_intent(args, environ):
    """Build the intent from the arguments, falling back to certbot's hook variables."""
    domain = args.domain or environ.get('CERTBOT_DOMAIN')
    txt_value = args.txt_value
    if txt_value is None and not args.domain:
        txt_value = environ.get('CERTBOT_VALIDATION')
    if not domain:
        raise ConfigurationError('A domain is required')
    return config.build_intent(args.command, domain, txt_value)


def main(argv=None, environ=None):
    """
    Run one add or delete and return the process exit status.

    Configuration is validated before any network request is made.
    """
    if environ is None:
        environ = os.environ
    args = create_parser().parse_args(argv)

    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    try:
        intent = resolve_intent(args, environ)
        credentials = config.Credentials.from_environ(environ)
        store = SessionStore(args.session_file or config.session_file(environ))
        client = ZoneEditClient(credentials, store, timeout=config.timeout(environ))
    except ConfigurationError as e:
        logger.error('%s', e)
        return 2

    try:
        client.perform(intent)
    except ZoneEditError as e:
        logger.error('%s %s failed: %s', intent.action, intent.domain, e)
        return 1
    finally:
        client.close()
    return 0


if __name__ == '__main__':
    sys.exit(main())
