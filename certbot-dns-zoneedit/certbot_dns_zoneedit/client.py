"""Sequences login, domain selection and the TXT record change."""
import logging

from certbot_dns_zoneedit import forms
from certbot_dns_zoneedit import records
from certbot_dns_zoneedit.config import ACTION_ADD
from certbot_dns_zoneedit.config import ACTION_DELETE
from certbot_dns_zoneedit.login import LoginFlow
from certbot_dns_zoneedit.web import ZoneEditSession

logger = logging.getLogger(__name__)


class ZoneEditClient(object):
    """
    Encapsulates all communication with the ZoneEdit control panel.

    A cached session is reused while the store reports it fresh; otherwise
    the client logs in and saves the new cookies before making any change.
    """

    def __init__(self, credentials, store, timeout=30, session_factory=ZoneEditSession):
        self.credentials = credentials
        self.store = store
        self.timeout = timeout
        self.session_factory = session_factory
        self.session = None

    def add_txt_record(self, intent):
        """
        Create or update the ``_acme-challenge`` TXT record of ``intent``.

        :param .config.Intent intent: What to change.
        :raises .errors.ZoneEditError: if any step fails.
        """
        self._mutate(intent, forms.apply_add)
        logger.info('Added TXT record %s for %s', intent.txt_host, intent.base_domain)

    def del_txt_record(self, intent):
        """
        Delete the ``_acme-challenge`` TXT record of ``intent``.

        Deleting a record that does not exist is not an error.

        :param .config.Intent intent: What to change.
        :raises .errors.ZoneEditError: if any step fails.
        """
        self._mutate(intent, forms.apply_delete)
        logger.info('Deleted TXT record %s for %s', intent.txt_host, intent.base_domain)

    def perform(self, intent):
        """Dispatch on ``intent.action``."""
        if intent.action == ACTION_ADD:
            self.add_txt_record(intent)
        elif intent.action == ACTION_DELETE:
            self.del_txt_record(intent)
        else:
            raise ValueError('Unknown action {0!r}'.format(intent.action))

    def get_session(self):
        """
        Return an authenticated session, from the cache when it is fresh.

        :raises .errors.SessionIOFailure: if the cache exists but is unusable.
        :raises .errors.AuthenticationFailed: if logging in fails.
        """
        if self.session is not None and self.session.authenticated:
            return self.session

        if self.store.is_fresh():
            cookies = self.store.load()
            if cookies is not None:
                logger.debug('Reusing cached ZoneEdit session from %s', self.store.path)
                self.session = self.session_factory(cookies=cookies, timeout=self.timeout)
                self.session.authenticated = True
                return self.session

        logger.debug('No fresh cached session, logging in')
        session = self.session_factory(timeout=self.timeout)
        LoginFlow(session, self.credentials).run()
        self.store.save(session.cookies)
        self.session = session
        return self.session

    def close(self):
        """Release the HTTP connections of the current session, if any."""
        if self.session is not None:
            self.session.close()
            self.session = None

    def _mutate(self, intent, transform):
        session = self.get_session()
        records.select_domain(session, intent.base_domain)
        fields = records.fetch_records(session)
        fields = forms.mutate_form(fields, transform, intent.txt_host, intent.txt_value)
        records.submit_records(session, fields)
