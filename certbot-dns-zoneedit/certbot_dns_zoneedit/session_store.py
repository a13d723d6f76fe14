"""Persists the ZoneEdit session cookies between runs."""
import errno
import json
import logging
import os
import time

from requests.cookies import RequestsCookieJar, create_cookie

from certbot_dns_zoneedit.errors import SessionIOFailure

logger = logging.getLogger(__name__)

MAX_AGE_MINUTES = 30


class SessionStore(object):
    """
    Reads and writes a cookie jar to a single JSON file.

    The file's modification time decides whether a stored session may be
    reused. There is no locking between processes; the last save wins.
    """

    def __init__(self, path, max_age_minutes=MAX_AGE_MINUTES):
        self.path = path
        self.max_age_minutes = max_age_minutes

    def is_fresh(self, max_age_minutes=None, now=None):
        """
        Check whether the stored session is younger than ``max_age_minutes``.

        :param int max_age_minutes: Overrides the store's configured age.
        :param float now: Current time as a UNIX timestamp, defaults to ``time.time()``.
        :returns: ``False`` if nothing is stored or the file is too old.
        :rtype: bool
        :raises .SessionIOFailure: if the file exists but cannot be inspected.
        """
        if max_age_minutes is None:
            max_age_minutes = self.max_age_minutes
        if now is None:
            now = time.time()

        try:
            mtime = os.stat(self.path).st_mtime
        except OSError as e:
            if e.errno == errno.ENOENT:
                return False
            raise SessionIOFailure('Unable to stat session file {0}: {1}'.format(self.path, e))

        age = now - mtime
        logger.debug('Session file %s is %.0f seconds old', self.path, age)
        return age < max_age_minutes * 60

    def load(self):
        """
        Read the stored cookie jar.

        :returns: The stored cookies, or ``None`` if nothing was stored yet.
        :rtype: requests.cookies.RequestsCookieJar
        :raises .SessionIOFailure: if the file cannot be read or decoded.
        """
        try:
            with open(self.path, 'r') as f:
                document = json.load(f)
        except OSError as e:
            if e.errno == errno.ENOENT:
                logger.debug('No stored session at %s', self.path)
                return None
            raise SessionIOFailure('Unable to read session file {0}: {1}'.format(self.path, e))
        except ValueError as e:
            raise SessionIOFailure('Session file {0} is corrupt: {1}'.format(self.path, e))

        try:
            jar = _jar_from_document(document)
        except (KeyError, TypeError, AttributeError) as e:
            raise SessionIOFailure('Session file {0} is malformed: {1}'.format(self.path, e))

        logger.debug('Loaded %d cookie(s) from %s', len(jar), self.path)
        return jar

    def save(self, cookies):
        """
        Write ``cookies`` to the session file, readable by the owner only.

        :param http.cookiejar.CookieJar cookies: The jar to persist.
        :raises .SessionIOFailure: if the file cannot be written.
        """
        document = {
            'saved': int(time.time()),
            'cookies': [_cookie_to_dict(c) for c in cookies],
        }

        try:
            directory = os.path.dirname(self.path)
            if directory and not os.path.isdir(directory):
                os.makedirs(directory, 0o700)
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, 'w') as f:
                # O_CREAT only applies the mode to new files
                os.fchmod(f.fileno(), 0o600)
                json.dump(document, f, indent=2, sort_keys=True)
        except OSError as e:
            raise SessionIOFailure('Unable to write session file {0}: {1}'.format(self.path, e))

        logger.debug('Saved %d cookie(s) to %s', len(document['cookies']), self.path)


def _cookie_to_dict(cookie):
    rest = {}
    for attr in ('HttpOnly', 'SameSite'):
        if cookie.has_nonstandard_attr(attr):
            rest[attr] = cookie.get_nonstandard_attr(attr)
    return {
        'name': cookie.name,
        'value': cookie.value,
        'domain': cookie.domain,
        'path': cookie.path,
        'secure': cookie.secure,
        'expires': cookie.expires,
        'rest': rest,
    }


def _jar_from_document(document):
    jar = RequestsCookieJar()
    for item in document['cookies']:
        jar.set_cookie(create_cookie(
            item['name'],
            item['value'],
            domain=item.get('domain', ''),
            path=item.get('path', '/'),
            secure=item.get('secure', False),
            expires=item.get('expires'),
            rest=item.get('rest') or {},
        ))
    return jar
