"""
Password hashing and session token tests
"""
from datetime import timedelta

import pytest

from auth import SessionUser, TokenService, extract_token, hash_password, verify_password
from errors import AuthenticationError


def test_hash_and_verify_password():
    hashed = hash_password('correct horse')
    assert hashed != 'correct horse'
    assert verify_password('correct horse', hashed)
    assert not verify_password('wrong', hashed)


def test_verify_password_rejects_unknown_hash_format():
    assert not verify_password('plain', 'plain')
    assert not verify_password('plain', '')


def test_token_roundtrip():
    service = TokenService('secret')
    token = service.create_token({'id': 'abc123', 'role': 'admin', 'name': 'Ada'})
    session = service.verify(token)
    assert session == SessionUser(user_id='abc123', role='admin', name='Ada')
    assert session.is_admin


def test_expired_token_is_rejected():
    service = TokenService('secret')
    token = service.create_token({'id': 'abc', 'role': 'student'}, expires_delta=timedelta(seconds=-5))
    with pytest.raises(AuthenticationError, match='expired'):
        service.verify(token)


def test_token_signed_with_other_secret_is_rejected():
    token = TokenService('one').create_token({'id': 'abc', 'role': 'student'})
    with pytest.raises(AuthenticationError):
        TokenService('two').verify(token)


def test_missing_token_raises_authentication_error():
    with pytest.raises(AuthenticationError) as exc:
        TokenService('secret').verify(None)
    assert exc.value.code == 'UNAUTHENTICATED'


def test_extract_token_prefers_cookie():
    headers = {'authorization': 'Bearer from-header'}
    assert extract_token(headers, {'session': 'from-cookie'}) == 'from-cookie'
    assert extract_token(headers, {}) == 'from-header'
    assert extract_token({}, {}) is None
    assert extract_token({'authorization': 'Basic xyz'}, {}) is None
