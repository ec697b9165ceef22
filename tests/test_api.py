"""
End-to-end GraphQL tests through the FastAPI app
"""
from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from main import create_app
from resolvers import admins, students

MISSING = '64b7f0000000000000000000'

ADD_USER = """
mutation AddUser($input: UserInput!) {
  addUser(input: $input) { id name email role }
}
"""

ADD_PROJECT = """
mutation AddProject($input: ProjectInput!) {
  addProject(input: $input) {
    id title status progress
    createdBy { id user { id name } }
    studentsWorkingOn { id }
  }
}
"""

UPDATE_TASK = """
mutation UpdateTask($id: ID!, $input: TaskUpdateInput!) {
  updateTask(id: $id, input: $input) { id title description dueDate status project { id } }
}
"""


def test_root_and_diagnostics(client):
    assert 'running' in client.get('/').json()['message']
    diag = client.get('/test').json()
    assert diag['connection_status'] == 'Connected'
    assert diag['database_name'] == 'taskboard_test'


def test_request_id_header(client):
    response = client.get('/', headers={'X-Request-ID': 'abc123'})
    assert response.headers['X-Request-ID'] == 'abc123'


# -------------------- Scenario A -------------------- #

def test_add_user_then_duplicate_email(gql):
    variables = {'input': {'name': 'alice', 'email': 'a@x.com', 'password': 'p', 'role': 'STUDENT'}}
    first = gql(ADD_USER, variables)
    assert 'errors' not in first
    assert first['data']['addUser']['id']
    assert first['data']['addUser']['role'] == 'STUDENT'

    variables['input']['name'] = 'alice-again'
    second = gql(ADD_USER, variables)
    error = second['errors'][0]
    assert 'already exists' in error['message']
    assert error['extensions']['code'] == 'CONFLICT'
    assert error['path'] == ['addUser']

    users = gql('{ users { id } }')['data']['users']
    assert len(users) == 1


def test_update_user_with_null_role(gql, make_user):
    user = make_user(role='admin')
    update = 'mutation($id: ID!, $input: UserUpdateInput!) { updateUser(id: $id, input: $input) { name role } }'
    result = gql(update, {'id': user['id'], 'input': {'role': None}})
    assert 'errors' not in result
    assert result['data']['updateUser']['role'] == 'ADMIN'

    result = gql(update, {'id': user['id'], 'input': {'role': 'STUDENT'}})
    assert result['errors'][0]['message'] == 'User role cannot be changed'
    assert result['errors'][0]['extensions']['code'] == 'VALIDATION_ERROR'


def test_password_is_not_exposed(gql):
    result = gql('{ __type(name: "User") { fields { name } } }')
    names = {f['name'] for f in result['data']['__type']['fields']}
    assert 'password' not in names
    assert {'id', 'name', 'email', 'role', 'createdAt', 'updatedAt'} <= names


# -------------------- Scenario B -------------------- #

def test_add_project_with_missing_admin_auto_provisions(settings, store):
    app = create_app(settings=settings.model_copy(update={'AUTO_PROVISION_REFERENCES': True}), store=store)
    with TestClient(app) as client:
        response = client.post('/graphql', json={'query': ADD_PROJECT, 'variables': {'input': {
            'title': 'Demo', 'description': 'Seed data', 'startDate': '2025-01-01',
            'endDate': '2025-03-01', 'createdBy': MISSING,
        }}}).json()
    assert 'errors' not in response
    project = response['data']['addProject']
    assert project['createdBy']['id'] != MISSING
    assert project['createdBy']['user']['name'] == 'Default Admin'
    assert project['status'] == 'PENDING'


def test_add_project_with_missing_admin_rejected_by_default(gql):
    response = gql(ADD_PROJECT, {'input': {
        'title': 'Demo', 'description': 'Seed data', 'startDate': '2025-01-01',
        'endDate': '2025-03-01', 'createdBy': MISSING,
    }})
    error = response['errors'][0]
    assert error['message'].startswith('Reference validation error')
    assert error['extensions']['code'] == 'VALIDATION_ERROR'
    assert error['extensions']['fieldErrors'] == {'createdBy': 'Admin not found'}


# -------------------- Scenario C -------------------- #

def test_update_task_status_keeps_other_fields(gql, make_task):
    task = make_task()
    result = gql(UPDATE_TASK, {'id': task['id'], 'input': {'status': 'COMPLETED'}})
    assert 'errors' not in result
    updated = result['data']['updateTask']
    assert updated['status'] == 'COMPLETED'
    assert updated['title'] == task['title']
    assert updated['description'] == task['description']
    assert updated['dueDate'] == task['due_date'].isoformat()
    assert updated['project']['id'] == task['project_id']


def test_update_unknown_task_fails(gql):
    result = gql(UPDATE_TASK, {'id': MISSING, 'input': {'status': 'COMPLETED'}})
    assert result['data'] is None
    assert 'Task not found' in result['errors'][0]['message']
    assert result['errors'][0]['extensions']['code'] == 'NOT_FOUND'


def test_invalid_id_is_validation_error(gql):
    result = gql('query { project(id: "nope") { id } }')
    assert result['errors'][0]['message'] == 'Invalid project ID'
    assert result['errors'][0]['extensions']['code'] == 'VALIDATION_ERROR'


# -------------------- Type-level validation -------------------- #

@pytest.mark.parametrize('literal', [
    'addUser(input: {name: 1, email: "x@y.z", password: "p", role: STUDENT}) { id }',
    'addUser(input: {name: "x", email: "x@y.z", password: "p", role: WIZARD}) { id }',
    'addUser(input: {name: "x", email: "x@y.z", role: STUDENT}) { id }',
])
def test_bad_argument_types_rejected_before_resolvers(gql, literal):
    result = gql('mutation { %s }' % literal)
    assert result.get('data') is None
    assert result['errors']
    assert gql('{ users { id } }')['data']['users'] == []


def test_malformed_date_rejected(gql, make_admin):
    result = gql(ADD_PROJECT, {'input': {
        'title': 'Bad dates', 'description': 'x', 'startDate': 'tomorrow',
        'endDate': '2025-03-01', 'createdBy': make_admin()['id'],
    }})
    assert result.get('data') is None
    assert gql('{ projects { id } }')['data']['projects'] == []


def test_field_errors_in_extensions(gql, make_project):
    project = make_project()
    result = gql("""
      mutation AddTask($input: TaskInput!) { addTask(input: $input) { id } }
    """, {'input': {
        'title': 'ab', 'description': 'd', 'dueDate': date.today().isoformat(),
        'projectId': project['id'], 'createdBy': project['created_by'],
    }})
    error = result['errors'][0]
    assert 'title' in error['extensions']['fieldErrors']
    assert error['message'].startswith('Validation error: {')


# -------------------- References -------------------- #

def test_deleted_references_resolve_to_null_or_skip(gql, store, make_admin, make_student, make_project):
    admin = make_admin()
    keep, gone = make_student(), make_student()
    project = make_project(created_by=admin['id'], students_working_on=[keep['id'], gone['id']])
    students.delete(store, gone['id'])
    admins.delete(store, admin['id'])

    result = gql('query($id: ID!) { project(id: $id) { createdBy { id } studentsWorkingOn { id } } }',
                 {'id': project['id']})
    data = result['data']['project']
    assert data['createdBy'] is None
    assert data['studentsWorkingOn'] == [{'id': keep['id']}]


def test_delete_returns_entity(gql, make_project):
    project = make_project()
    result = gql('mutation($id: ID!) { deleteProject(id: $id) { id title } }', {'id': project['id']})
    assert result['data']['deleteProject'] == {'id': project['id'], 'title': project['title']}


def test_recent_tasks_default_limit(gql, make_project, make_task):
    project = make_project()
    for i in range(7):
        make_task(project=project, title=f'Task number {i}')
    result = gql('{ recentTasks { id } }')
    assert len(result['data']['recentTasks']) == 5


# -------------------- Session and messages -------------------- #

def test_messages_require_session(gql):
    result = gql('{ messages { id } }')
    assert result['errors'][0]['extensions']['code'] == 'UNAUTHENTICATED'


def test_login_cookie_session_and_messaging(client, gql, make_user):
    sender = make_user(role='admin', name='mentor-one')
    receiver = make_user(role='student')

    assert gql('{ me { id } }')['data']['me'] is None

    login = gql('mutation { login(input: {name: "mentor-one", password: "secret-pass"}) { token user { id } } }')
    assert login['data']['login']['user']['id'] == sender['id']
    assert client.cookies.get('session')

    assert gql('{ me { id name } }')['data']['me'] == {'id': sender['id'], 'name': 'mentor-one'}

    sent = gql('mutation($input: MessageInput!) { createMessage(input: $input) { id sender { id role } receiver { id role user { id } } read } }',
               {'input': {'content': 'Welcome!', 'receiverId': receiver['id']}})
    message = sent['data']['createMessage']
    assert message['sender'] == {'id': sender['id'], 'role': 'ADMIN'}
    assert message['receiver']['role'] == 'STUDENT'
    assert message['receiver']['user']['id'] == receiver['id']
    assert message['read'] is False

    assert len(gql('{ messages { id } }')['data']['messages']) == 1

    gql('mutation { logout }')
    assert gql('{ me { id } }')['data']['me'] is None


def test_wrong_password(gql, make_user):
    make_user(name='someone')
    result = gql('mutation { login(input: {name: "someone", password: "nope"}) { token } }')
    assert result['errors'][0]['message'] == 'Invalid credentials'
    assert result['errors'][0]['extensions']['code'] == 'UNAUTHENTICATED'


def test_bearer_token_session(client, tokens, make_user):
    user = make_user(role='student')
    token = tokens.create_token(user)
    response = client.post('/graphql', json={'query': '{ me { id } }'},
                           headers={'Authorization': f'Bearer {token}'})
    assert response.json()['data']['me']['id'] == user['id']


def test_mark_all_messages_as_read(client, gql, tokens, make_user):
    sender = make_user(role='admin')
    receiver = make_user(role='student')
    as_sender = {'Authorization': f'Bearer {tokens.create_token(sender)}'}
    as_receiver = {'Authorization': f'Bearer {tokens.create_token(receiver)}'}
    for text in ('one', 'two'):
        gql('mutation($input: MessageInput!) { createMessage(input: $input) { id } }',
            {'input': {'content': text, 'receiverId': receiver['id']}}, headers=as_sender)
    result = gql('mutation($id: ID!) { markAllMessagesAsRead(senderId: $id) }', {'id': sender['id']},
                 headers=as_receiver)
    assert result['data']['markAllMessagesAsRead'] == 2
    between = gql('query($id: ID!) { messagesBetweenUsers(userId: $id) { read } }', {'id': sender['id']},
                  headers=as_receiver)
    assert all(m['read'] for m in between['data']['messagesBetweenUsers'])


def test_store_outage_surfaces_query_error(settings):
    from database import DocumentStore

    app = create_app(settings=settings, store=DocumentStore(name='down'))
    # lifespan is not run, so the store never connects
    client = TestClient(app)
    result = client.post('/graphql', json={'query': '{ users { id } }'}).json()
    assert result['errors'][0]['message'] == 'Database not available'
    assert result['errors'][0]['extensions']['code'] == 'QUERY_FAILED'


def test_project_dates_roundtrip(gql, make_admin):
    start = date.today()
    result = gql(ADD_PROJECT.replace('status progress', 'status progress startDate endDate'), {'input': {
        'title': 'Dates', 'description': 'd', 'startDate': start.isoformat(),
        'endDate': (start + timedelta(days=1)).isoformat(), 'createdBy': make_admin()['id'],
        'progress': 10,
    }})
    project = result['data']['addProject']
    assert project['startDate'] == start.isoformat()
    assert project['progress'] == 10
