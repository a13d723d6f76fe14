"""Cookie carrying HTTPS session against the ZoneEdit control panel."""
import logging

import requests

from certbot_dns_zoneedit.errors import RequestFailed

logger = logging.getLogger(__name__)

ZONEEDIT_HOST = 'cp.zoneedit.com'
USER_AGENT = ('Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) '
              'Chrome/92.0.4515.159 Safari/537.36')
FORM_CONTENT_TYPE = 'application/x-www-form-urlencoded'

REDIRECT_STATUSES = (301, 302, 303)


class ZoneEditSession(object):
    """
    Sends requests to the control panel and keeps its cookies.

    Cookies from every ``Set-Cookie`` header are captured by the underlying
    :class:`requests.Session` jar and attached to later requests matching
    their domain and path. Redirects are never followed, since several
    steps of the provider's flow are judged by the redirect itself.
    """

    def __init__(self, cookies=None, host=ZONEEDIT_HOST, timeout=30):
        self.host = host
        self.timeout = timeout
        self.authenticated = False
        self.http_session = requests.Session()
        self.http_session.headers.update({
            'User-Agent': USER_AGENT,
        })
        if cookies is not None:
            self.http_session.cookies.update(cookies)

    @property
    def cookies(self):
        return self.http_session.cookies

    def url(self, path):
        return 'https://{0}{1}'.format(self.host, path)

    def send(self, method, path, data=None, headers=None):
        """
        Perform one request and record the cookies it sets.

        :param str method: ``GET`` or ``POST``.
        :param str path: Absolute path on the control panel host, including any query.
        :param dict data: Form fields, sent url-encoded.
        :param dict headers: Extra request headers.
        :returns: The response, whatever its status.
        :rtype: requests.Response
        :raises .RequestFailed: on any transport level error.
        """
        url = self.url(path)
        request_headers = {}
        if data is not None:
            request_headers['Accept'] = '*/*'
            request_headers['Content-Type'] = FORM_CONTENT_TYPE
        if headers:
            request_headers.update(headers)

        try:
            resp = self.http_session.request(method, url, data=data, headers=request_headers,
                                             allow_redirects=False, timeout=self.timeout)
        except requests.RequestException as e:
            logger.debug('%s %s failed: %s', method, url, e)
            raise RequestFailed('{0} {1} failed: {2}'.format(method, url, e))

        logger.info('%s %s %s', resp.status_code, method, url)
        return resp

    def close(self):
        self.http_session.close()


def log_response(resp, level=logging.ERROR):
    """Dump status, headers and body of ``resp`` for troubleshooting."""
    logger.log(level, 'Response status: %s', resp.status_code)
    logger.log(level, 'Response headers: %s', dict(resp.headers))
    logger.log(level, 'Response body:\n%s', resp.text)
