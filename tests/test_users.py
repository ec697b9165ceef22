"""
User resolver tests
"""
import pytest

from auth import verify_password
from errors import ConflictError, NotFoundError, ValidationError
from resolvers import users


def test_create_then_get_returns_same_fields(store):
    created = users.create(store, {'name': 'alice', 'email': 'A@X.com', 'password': 'p', 'role': 'student'})
    fetched = users.get_one(store, created['id'])
    assert fetched['name'] == 'alice'
    assert fetched['email'] == 'a@x.com'
    assert fetched['role'] == 'student'
    assert fetched['id'] == created['id']


def test_password_is_stored_hashed(store):
    created = users.create(store, {'name': 'bob', 'email': 'b@x.com', 'password': 'hunter2', 'role': 'admin'})
    assert created['password'] != 'hunter2'
    assert verify_password('hunter2', created['password'])


def test_duplicate_email_conflicts_without_creating(store):
    users.create(store, {'name': 'alice', 'email': 'a@x.com', 'password': 'p', 'role': 'student'})
    with pytest.raises(ConflictError, match='already exists'):
        users.create(store, {'name': 'alice2', 'email': 'a@x.com', 'password': 'p', 'role': 'student'})
    assert len(users.get_all(store)) == 1


def test_duplicate_name_conflicts(store):
    users.create(store, {'name': 'alice', 'email': 'a@x.com', 'password': 'p', 'role': 'student'})
    with pytest.raises(ConflictError):
        users.create(store, {'name': 'alice', 'email': 'other@x.com', 'password': 'p', 'role': 'student'})


def test_invalid_email_reports_field_error(store):
    with pytest.raises(ValidationError) as exc:
        users.create(store, {'name': 'carol', 'email': 'not-an-email', 'password': 'p', 'role': 'student'})
    assert 'email' in exc.value.field_errors
    assert exc.value.message.startswith('Validation error: {')


def test_update_changes_only_given_field(store, make_user):
    user = make_user()
    updated = users.update(store, user['id'], {'name': 'renamed'})
    assert updated['name'] == 'renamed'
    assert updated['email'] == user['email']
    assert updated['password'] == user['password']
    assert updated['role'] == user['role']


def test_update_rejects_role_change(store, make_user):
    user = make_user(role='student')
    with pytest.raises(ValidationError, match='role cannot be changed'):
        users.update(store, user['id'], {'role': 'admin'})


def test_update_with_null_role_keeps_role(store, make_user):
    user = make_user(role='student')
    updated = users.update(store, user['id'], {'role': None, 'name': 'kept-role'})
    assert updated['role'] == 'student'
    assert updated['name'] == 'kept-role'


def test_update_with_null_name_is_validation_error(store, make_user):
    user = make_user()
    with pytest.raises(ValidationError) as exc:
        users.update(store, user['id'], {'name': None})
    assert 'name' in exc.value.field_errors


def test_update_hashes_new_password(store, make_user):
    user = make_user()
    updated = users.update(store, user['id'], {'password': 'new-secret'})
    assert verify_password('new-secret', updated['password'])


def test_update_to_taken_email_conflicts(store, make_user):
    first = make_user()
    second = make_user()
    with pytest.raises(ConflictError):
        users.update(store, second['id'], {'email': first['email']})


def test_update_missing_user_not_found(store):
    with pytest.raises(NotFoundError, match='User not found'):
        users.update(store, '64b7f0000000000000000000', {'name': 'x'})


def test_delete_then_get_not_found(store, make_user):
    user = make_user()
    deleted = users.delete(store, user['id'])
    assert deleted['id'] == user['id']
    with pytest.raises(NotFoundError):
        users.get_one(store, user['id'])


def test_malformed_id_is_validation_error(store):
    with pytest.raises(ValidationError, match='Invalid user ID'):
        users.get_one(store, 'nope')
