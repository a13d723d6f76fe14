"""Edit and confirm exchange of the ZoneEdit TXT record editor."""
import logging
from urllib.parse import urlencode

from certbot_dns_zoneedit import forms
from certbot_dns_zoneedit.errors import ConfirmFailed
from certbot_dns_zoneedit.errors import RecordMutationFailed
from certbot_dns_zoneedit.errors import RecordsFetchFailed
from certbot_dns_zoneedit.errors import UnexpectedStatus
from certbot_dns_zoneedit.web import REDIRECT_STATUSES
from certbot_dns_zoneedit.web import log_response

logger = logging.getLogger(__name__)

DOMAINS_PATH = '/manage/domains/'
TXT_EDIT_PATH = '/manage/domains/txt/edit.php'
TXT_CONFIRM_PATH = '/manage/domains/txt/confirm.php'


def select_domain(session, base_domain):
    """
    Make ``base_domain`` the zone the following editor requests apply to.

    :raises .UnexpectedStatus: if the panel neither renders nor redirects.
    """
    resp = session.send('GET', DOMAINS_PATH + '?' + urlencode({'LOGIN': base_domain}))
    if resp.status_code != 200 and resp.status_code not in REDIRECT_STATUSES:
        log_response(resp)
        raise UnexpectedStatus('domain selection', resp.status_code)
    logger.debug('Selected domain %s', base_domain)


def fetch_records(session):
    """
    Load the TXT editor of the selected zone.

    :returns: The editor form fields.
    :rtype: dict
    :raises .RecordsFetchFailed: if the editor does not load.
    """
    resp = session.send('GET', TXT_EDIT_PATH)
    if resp.status_code != 200:
        log_response(resp)
        raise RecordsFetchFailed('records fetch', resp.status_code)

    fields = forms.extract_form(resp.content, forms.SCOPE_FORM)
    records, _ = forms.extract_record_set(fields)
    logger.debug('Found %d TXT record(s)', len(records))
    return fields


def submit_records(session, fields):
    """
    Stage the edited form, then confirm the pending change.

    :param dict fields: The form produced by :func:`.forms.mutate_form`.
    :raises .RecordMutationFailed: if the edit step is rejected.
    :raises .ConfirmFailed: if the confirmation is rejected.
    """
    resp = session.send('POST', TXT_EDIT_PATH, data=fields)
    if resp.status_code != 200:
        log_response(resp)
        raise RecordMutationFailed('edit', resp.status_code)

    pending = forms.extract_form(resp.content, forms.SCOPE_DOCUMENT)
    pending['confirm'] = ''

    resp = session.send('POST', TXT_CONFIRM_PATH, data=pending)
    if resp.status_code != 200:
        log_response(resp)
        raise ConfirmFailed(resp.status_code)
    logger.debug('Confirmed TXT record change')
