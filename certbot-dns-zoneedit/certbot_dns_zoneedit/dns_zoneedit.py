"""DNS Authenticator for ZoneEdit."""
import logging
import os

from certbot import errors
from certbot.plugins import dns_common

from certbot_dns_zoneedit import config
from certbot_dns_zoneedit.client import ZoneEditClient
from certbot_dns_zoneedit.session_store import SessionStore

logger = logging.getLogger(__name__)

ACCOUNT_URL = 'https://cp.zoneedit.com/login.php'
SESSION_FILE_NAME = 'zoneedit-session.json'


class Authenticator(dns_common.DNSAuthenticator):
    """DNS Authenticator for ZoneEdit

    This Authenticator scripts the ZoneEdit control panel to fulfill a dns-01 challenge.
    """

    description = ('Obtain certificates using a DNS TXT record (if you are using ZoneEdit for '
                   'DNS).')

    def __init__(self, *args, **kwargs):
        super(Authenticator, self).__init__(*args, **kwargs)
        self.credentials = None
        self.zoneedit_client = None

    @classmethod
    def add_parser_arguments(cls, add):  # pylint: disable=arguments-differ
        super(Authenticator, cls).add_parser_arguments(add, default_propagation_seconds=120)
        add('credentials', help='ZoneEdit credentials INI file.')

    def more_info(self):  # pylint: disable=missing-docstring,no-self-use
        return 'This plugin configures a DNS TXT record to respond to a dns-01 challenge using ' + \
               'the ZoneEdit control panel.'

    def _setup_credentials(self):
        self.credentials = self._configure_credentials(
            'credentials',
            'ZoneEdit credentials INI file',
            {
                'user': 'login name of your ZoneEdit account, see {0}'.format(ACCOUNT_URL),
                'password': 'password of your ZoneEdit account',
                'token': 'static second factor token of your ZoneEdit account',
            }
        )

    def _perform(self, domain, validation_name, validation):
        intent = config.build_intent(config.ACTION_ADD, domain, validation)
        logger.debug('Adding %s to %s', intent.txt_host, intent.base_domain)
        self._get_zoneedit_client().add_txt_record(intent)

    def _cleanup(self, domain, validation_name, validation):
        intent = config.build_intent(config.ACTION_DELETE, domain, validation)
        logger.debug('Removing %s from %s', intent.txt_host, intent.base_domain)
        self._get_zoneedit_client().del_txt_record(intent)

    def _get_zoneedit_client(self):
        if self.credentials is None:
            raise errors.PluginError('Plugin has not been prepared.')
        if self.zoneedit_client is None:
            credentials = config.Credentials(
                self.credentials.conf('user'),
                self.credentials.conf('password'),
                self.credentials.conf('token'),
            )
            store = SessionStore(os.path.join(self.config.work_dir, SESSION_FILE_NAME))
            self.zoneedit_client = ZoneEditClient(credentials, store)
        return self.zoneedit_client
