"""Tests for certbot_dns_zoneedit.cli."""
from unittest import mock

import pytest

from certbot_dns_zoneedit import cli
from certbot_dns_zoneedit.errors import AuthenticationFailed

ENV = {
    'ZONEEDIT_USER': 'someone',
    'ZONEEDIT_PASS': 's3cret',
    'ZONEEDIT_TOKEN': 'static-token',
}


@pytest.fixture
def env(tmp_path):
    environ = dict(ENV)
    environ['ZONEEDIT_SESSION_FILE'] = str(tmp_path / 'session.json')
    return environ


@pytest.fixture
def client_cls():
    with mock.patch('certbot_dns_zoneedit.cli.ZoneEditClient') as client_cls:
        yield client_cls


def test_add(env, client_cls):
    assert cli.main(['add', 'foo.example.com', 'abc123'], env) == 0

    intent = client_cls.return_value.perform.call_args[0][0]
    assert intent.action == 'add'
    assert intent.base_domain == 'example.com'
    assert intent.txt_host == '_acme-challenge.foo'
    assert intent.txt_value == 'abc123'
    client_cls.return_value.close.assert_called_once_with()
    credentials, store = client_cls.call_args[0]
    assert credentials.user == 'someone'
    assert store.path == env['ZONEEDIT_SESSION_FILE']


def test_del_without_value(env, client_cls):
    assert cli.main(['del', 'example.com'], env) == 0

    intent = client_cls.return_value.perform.call_args[0][0]
    assert intent.action == 'del'
    assert intent.txt_host == '_acme-challenge'


def test_session_file_option(env, client_cls, tmp_path):
    path = str(tmp_path / 'other.json')
    cli.main(['--session-file', path, 'del', 'example.com'], env)

    assert client_cls.call_args[0][1].path == path


def test_certbot_hook_environment(env, client_cls):
    env.update({'CERTBOT_DOMAIN': 'www.example.org', 'CERTBOT_VALIDATION': 'xyz'})

    assert cli.main(['add'], env) == 0

    intent = client_cls.return_value.perform.call_args[0][0]
    assert intent.domain == 'www.example.org'
    assert intent.txt_value == 'xyz'


@pytest.mark.parametrize('missing', ['ZONEEDIT_USER', 'ZONEEDIT_PASS', 'ZONEEDIT_TOKEN'])
def test_missing_environment_aborts_before_network(env, client_cls, missing, caplog):
    del env[missing]

    assert cli.main(['add', 'foo.example.com', 'abc123'], env) != 0

    client_cls.assert_not_called()
    assert missing in caplog.text


def test_add_without_value_aborts(env, client_cls):
    assert cli.main(['add', 'foo.example.com'], env) != 0
    client_cls.assert_not_called()


def test_unparseable_domain_aborts(env, client_cls):
    assert cli.main(['add', 'localhost', 'abc123'], env) != 0
    client_cls.assert_not_called()


def test_missing_domain_aborts(env, client_cls):
    assert cli.main(['del'], env) != 0
    client_cls.assert_not_called()


def test_invalid_command_exits(env, client_cls, capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(['update', 'foo.example.com', 'abc'], env)

    assert excinfo.value.code != 0
    assert 'invalid choice' in capsys.readouterr().err
    client_cls.assert_not_called()


def test_failure_returns_non_zero(env, client_cls, caplog):
    client_cls.return_value.perform.side_effect = AuthenticationFailed(
        'UNAUTHENTICATED', 'LoginFormUnavailable')

    assert cli.main(['add', 'foo.example.com', 'abc123'], env) == 1
    assert 'LoginFormUnavailable' in caplog.text
    client_cls.return_value.close.assert_called_once_with()
