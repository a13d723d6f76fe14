"""Tests for certbot_dns_zoneedit.client."""
import pytest
from requests.cookies import RequestsCookieJar

from certbot_dns_zoneedit import config
from certbot_dns_zoneedit import forms
from certbot_dns_zoneedit.client import ZoneEditClient
from certbot_dns_zoneedit.errors import AuthenticationFailed
from certbot_dns_zoneedit.errors import SessionIOFailure
from certbot_dns_zoneedit.session_store import SessionStore

from fakes import EMPTY_EDIT_PAGE, FakeResponse, ScriptedSession, login_responses, mutation_responses


class SessionFactory(object):

    def __init__(self, responses):
        self.responses = responses
        self.sessions = []

    def __call__(self, cookies=None, timeout=None):
        session = ScriptedSession(self.responses, cookies=cookies)
        self.sessions.append(session)
        return session


def _submitted_records(session):
    edit_post = [data for method, path, data in session.calls
                 if method == 'POST' and path == '/manage/domains/txt/edit.php'][0]
    records, rest = forms.extract_record_set(edit_post)
    return records, rest


@pytest.fixture
def store(tmp_path):
    return SessionStore(str(tmp_path / 'session.json'))


def test_add_logs_in_and_saves_session(credentials, store):
    factory = SessionFactory(login_responses() + mutation_responses(EMPTY_EDIT_PAGE))
    client = ZoneEditClient(credentials, store, session_factory=factory)
    intent = config.build_intent('add', 'foo.example.com', 'abc123')

    client.add_txt_record(intent)

    session = factory.sessions[0]
    assert session.paths[:5] == [
        ('GET', '/login.php'),
        ('POST', '/home/'),
        ('GET', '/tfa.php'),
        ('POST', '/tfa.php'),
        ('GET', '/manage/domains/?LOGIN=example.com'),
    ]
    records, rest = _submitted_records(session)
    assert records == {'0': {'host': '_acme-challenge.foo', 'txt': 'abc123', 'ttl': ''}}
    assert rest['next'] == ''
    assert store.load() is not None


def test_delete_existing_record(credentials, store):
    factory = SessionFactory(login_responses() + mutation_responses())
    client = ZoneEditClient(credentials, store, session_factory=factory)

    client.perform(config.build_intent('del', 'foo.example.com', 'abc123'))

    records, _ = _submitted_records(factory.sessions[0])
    assert records == {
        '0': {'host': '@', 'txt': 'v=spf1 -all', 'ttl': '3600'},
        '1': {'host': '_acme-challenge.foo', 'txt': 'abc123', 'ttl': '', 'del': '1'},
    }


def test_fresh_cached_session_skips_login(credentials, store):
    jar = RequestsCookieJar()
    jar.set('PHPSESSID', 'cached', domain='cp.zoneedit.com', path='/')
    store.save(jar)
    factory = SessionFactory(mutation_responses())
    client = ZoneEditClient(credentials, store, session_factory=factory)

    client.add_txt_record(config.build_intent('add', 'example.com', 'abc123'))

    session = factory.sessions[0]
    assert session.paths[0] == ('GET', '/manage/domains/?LOGIN=example.com')
    assert session.cookies.get('PHPSESSID') == 'cached'
    assert session.authenticated is True


def test_stale_cached_session_logs_in_again(credentials, store, monkeypatch):
    store.save(RequestsCookieJar())
    monkeypatch.setattr(store, 'is_fresh', lambda: False)
    factory = SessionFactory(login_responses() + mutation_responses())
    client = ZoneEditClient(credentials, store, session_factory=factory)

    client.add_txt_record(config.build_intent('add', 'foo.example.com', 'abc123'))

    assert factory.sessions[0].paths[0] == ('GET', '/login.php')


def test_session_is_reused_within_a_run(credentials, store):
    factory = SessionFactory(login_responses() + mutation_responses() + mutation_responses())
    client = ZoneEditClient(credentials, store, session_factory=factory)

    client.add_txt_record(config.build_intent('add', 'foo.example.com', 'abc123'))
    client.del_txt_record(config.build_intent('del', 'foo.example.com', 'abc123'))

    assert len(factory.sessions) == 1


def test_failed_login_aborts_without_saving(credentials, store):
    factory = SessionFactory([FakeResponse(500)])
    client = ZoneEditClient(credentials, store, session_factory=factory)

    with pytest.raises(AuthenticationFailed):
        client.add_txt_record(config.build_intent('add', 'foo.example.com', 'abc123'))

    assert factory.sessions[0].paths == [('GET', '/login.php')]
    assert store.load() is None


def test_corrupt_cache_is_fatal(credentials, store):
    with open(store.path, 'w') as f:
        f.write('garbage')
    factory = SessionFactory([])
    client = ZoneEditClient(credentials, store, session_factory=factory)

    with pytest.raises(SessionIOFailure):
        client.add_txt_record(config.build_intent('add', 'foo.example.com', 'abc123'))

    assert factory.sessions == []


def test_close_releases_session(credentials, store):
    factory = SessionFactory(login_responses() + mutation_responses())
    client = ZoneEditClient(credentials, store, session_factory=factory)
    client.add_txt_record(config.build_intent('add', 'foo.example.com', 'abc123'))

    client.close()

    assert factory.sessions[0].closed is True
    assert client.session is None
    client.close()


def test_close_without_session(credentials, store):
    client = ZoneEditClient(credentials, store, session_factory=SessionFactory([]))

    client.close()

    assert client.session is None
