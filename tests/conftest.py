"""
Task Board - Test Configuration and Fixtures
"""
import os
from datetime import date, timedelta

import mongomock
import pytest
from faker import Faker
from fastapi.testclient import TestClient

# Set testing environment before the app module reads settings
os.environ['ENVIRONMENT'] = 'testing'
os.environ['JWT_SECRET'] = 'test-jwt-secret-key-for-testing'
os.environ['LOG_LEVEL'] = 'WARNING'

import auth
from config import Settings
from database import DocumentStore
from main import create_app
from resolvers import admins, projects, students, tasks, users

fake = Faker()

# Full-cost bcrypt makes the suite crawl
auth.pwd_context.update(bcrypt__rounds=4)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        JWT_SECRET='test-jwt-secret-key-for-testing',
        DATABASE_NAME='taskboard_test',
        CORS_ORIGINS='http://testserver',
        AUTO_PROVISION_REFERENCES=False,
        LOG_LEVEL='WARNING',
    )


@pytest.fixture
def store():
    """In-process MongoDB, fresh per test"""
    s = DocumentStore(name='taskboard_test', client=mongomock.MongoClient())
    s.connect()
    yield s
    s.close()


@pytest.fixture
def tokens(settings) -> auth.TokenService:
    return auth.TokenService(settings.JWT_SECRET, settings.JWT_ALGORITHM, settings.ACCESS_TOKEN_EXPIRE_MINUTES)


@pytest.fixture
def app(settings, store):
    return create_app(settings=settings, store=store)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def gql(client):
    """POST a GraphQL operation and return the decoded body"""
    def run(query, variables=None, **kwargs):
        response = client.post('/graphql', json={'query': query, 'variables': variables or {}}, **kwargs)
        return response.json()
    return run


# -------------------- Record factories -------------------- #

@pytest.fixture
def make_user(store):
    def factory(role='student', **overrides):
        fields = {
            'name': fake.unique.user_name(),
            'email': fake.unique.email(),
            'password': 'secret-pass',
            'role': role,
        }
        fields.update(overrides)
        return users.create(store, fields)
    return factory


@pytest.fixture
def make_admin(store, make_user):
    def factory(**overrides):
        user = make_user(role='admin')
        return admins.create(store, {'user_id': user['id'], **overrides})
    return factory


@pytest.fixture
def make_student(store, make_user):
    def factory(**overrides):
        user = make_user(role='student')
        fields = {
            'user_id': user['id'],
            'university_id': fake.bothify('U-#####'),
            'major': 'Computer Science',
            'year': '2',
        }
        fields.update(overrides)
        return students.create(store, fields)
    return factory


@pytest.fixture
def make_project(store, make_admin):
    def factory(**overrides):
        fields = {
            'title': fake.unique.catch_phrase(),
            'description': fake.sentence(),
            'start_date': date.today(),
            'end_date': date.today() + timedelta(days=30),
        }
        if 'created_by' not in overrides:
            fields['created_by'] = make_admin()['id']
        fields.update(overrides)
        return projects.create(store, fields)
    return factory


@pytest.fixture
def make_task(store, make_project):
    def factory(project=None, **overrides):
        project = project or make_project()
        fields = {
            'title': fake.unique.bs()[:60],
            'description': fake.sentence(),
            'due_date': date.today() + timedelta(days=7),
            'project_id': project['id'],
            'created_by': project['created_by'],
        }
        fields.update(overrides)
        return tasks.create(store, fields)
    return factory
