"""
Reading and rewriting the control panel's HTML forms.

A form is kept as an ordered ``dict`` of input name to value. The TXT editor
encodes its rows as ``TXT::<index>::<property>`` fields; those are lifted into
a record set keyed by the provider's index, every other field is passed
through untouched.
"""
import copy
import logging
import re

from lxml import etree

from certbot_dns_zoneedit.errors import PageParseError

logger = logging.getLogger(__name__)

SCOPE_FORM = 'form'
SCOPE_DOCUMENT = 'document'

_SCOPE_XPATH = {
    SCOPE_FORM: '//form//input',
    SCOPE_DOCUMENT: '//input',
}

TXT_KEY = re.compile(r'^TXT::([^:]+)::(.+)$')


def extract_form(html, scope=SCOPE_FORM):
    """
    Collect the ``name``/``value`` pair of every ``<input>`` in ``html``.

    :param html: The page markup, preferably the raw response body so lxml
        honours the page's own encoding declaration.
    :type html: bytes or str
    :param str scope: ``form`` for inputs inside a ``<form>``, ``document`` for all of them.
    :returns: Field name to value, in document order. A later input with an
        already seen name overwrites the earlier value.
    :rtype: dict
    :raises .PageParseError: if lxml cannot parse the markup.
    """
    try:
        xpath = _SCOPE_XPATH[scope]
    except KeyError:
        raise ValueError('Unknown form scope {0!r}'.format(scope))

    fields = {}
    if not html:
        return fields
    parser = None
    if isinstance(html, str):
        # lxml refuses str input carrying an XML encoding declaration
        html = html.encode('utf-8')
        parser = etree.HTMLParser(encoding='utf-8')
    try:
        root = etree.HTML(html, parser)
    except (ValueError, LookupError, etree.LxmlError) as e:
        raise PageParseError('Could not parse page: {0}'.format(e))
    if root is None:
        return fields

    for node in root.xpath(xpath):
        name = node.get('name')
        if not name:
            continue
        fields[name] = node.get('value') or ''
    return fields


def extract_record_set(fields):
    """
    Split the TXT rows out of a form.

    :param dict fields: The form as returned by :func:`extract_form`.
    :returns: ``(records, rest)`` where ``records`` maps the provider index to a
        dict of that row's properties and ``rest`` holds every other field.
    :rtype: tuple
    """
    records = {}
    rest = {}
    for name, value in fields.items():
        m = TXT_KEY.match(name)
        if m is None:
            rest[name] = value
            continue
        index, prop = m.groups()
        records.setdefault(index, {})[prop] = value
    return records, rest


def reencode_record_set(fields, records):
    """
    Write ``records`` back into a copy of ``fields`` under their indexed keys.

    Stale ``TXT::`` keys already present in ``fields`` are dropped first, so a
    property removed from a record does not reappear.
    """
    out = dict((k, v) for k, v in fields.items() if not TXT_KEY.match(k))
    for index, record in records.items():
        for prop, value in record.items():
            out['TXT::{0}::{1}'.format(index, prop)] = value
    return out


def apply_add(records, host, value):
    """
    Set the TXT value of ``host``, appending a row if it has none.

    No row of the result carries a ``del`` marker.
    """
    records = copy.deepcopy(records)
    existing = _find(records, host)
    if existing is not None:
        existing['txt'] = value
    else:
        records[_next_index(records)] = {'host': host, 'txt': value, 'ttl': ''}

    for record in records.values():
        record.pop('del', None)
    return records


def apply_delete(records, host, value):
    """
    Mark the row for ``host`` with ``del=1`` and clear the marker on every other row.

    When no row for ``host`` exists one is appended and marked for deletion
    anyway. The panel has been observed to require this, but the reason is
    unconfirmed; keep it scoped to this transform.
    """
    records = copy.deepcopy(records)
    existing = _find(records, host)
    if existing is not None:
        if value:
            existing['txt'] = value
    else:
        logger.warning('No TXT record for %s found, submitting a synthesized deletion', host)
        records[_next_index(records)] = {'host': host, 'txt': value, 'ttl': ''}

    for record in records.values():
        if record.get('host') == host:
            record['del'] = '1'
        else:
            record.pop('del', None)
    return records


def mutate_form(fields, transform, host, value):
    """
    Apply ``transform`` to the TXT rows of ``fields`` and return the form to submit.

    :param dict fields: The edit form as read from the panel.
    :param callable transform: :func:`apply_add` or :func:`apply_delete`.
    :param str host: Record host label relative to the zone.
    :param str value: TXT record content.
    :rtype: dict
    """
    records, rest = extract_record_set(fields)
    records = transform(records, host, value)
    out = reencode_record_set(rest, records)
    # required by the panel, value is ignored
    out['next'] = ''
    return out


def _find(records, host):
    for record in records.values():
        if record.get('host') == host:
            return record
    return None


def _next_index(records):
    indices = [int(i) for i in records if i.isdigit()]
    if not indices:
        return str(len(records))
    return str(max(indices) + 1)
