"""
Project resolver tests
"""
from datetime import date, timedelta

import pytest

from errors import ConflictError, NotFoundError, ValidationError
from resolvers import admins, projects, tasks, users

MISSING = '64b7f0000000000000000000'


def project_fields(admin_id, **overrides):
    fields = {
        'title': 'Capstone',
        'description': 'Final year project',
        'start_date': date(2025, 1, 1),
        'end_date': date(2025, 6, 1),
        'created_by': admin_id,
    }
    fields.update(overrides)
    return fields


def test_create_applies_defaults(store, make_admin):
    admin = make_admin()
    project = projects.create(store, project_fields(admin['id']))
    fetched = projects.get_one(store, project['id'])
    assert fetched['title'] == 'Capstone'
    assert fetched['status'] == 'Pending'
    assert fetched['progress'] == 0
    assert fetched['start_date'] == date(2025, 1, 1)
    assert fetched['end_date'] == date(2025, 6, 1)
    assert fetched['created_by'] == admin['id']
    assert fetched['students_working_on'] == []
    assert fetched['tasks'] == []


def test_end_before_start_is_rejected(store, make_admin):
    with pytest.raises(ValidationError) as exc:
        projects.create(store, project_fields(make_admin()['id'], end_date=date(2024, 12, 1)))
    assert 'endDate' in exc.value.field_errors


def test_progress_out_of_range_is_rejected(store, make_admin):
    with pytest.raises(ValidationError) as exc:
        projects.create(store, project_fields(make_admin()['id'], progress=150))
    assert 'progress' in exc.value.field_errors


def test_duplicate_title_conflicts(store, make_admin):
    admin = make_admin()
    projects.create(store, project_fields(admin['id']))
    with pytest.raises(ConflictError, match='already exists'):
        projects.create(store, project_fields(admin['id']))


def test_missing_creator_is_reference_error(store):
    with pytest.raises(ValidationError, match='Reference validation error') as exc:
        projects.create(store, project_fields(MISSING))
    assert exc.value.field_errors == {'createdBy': 'Admin not found'}
    assert projects.get_all(store) == []


def test_missing_students_and_tasks_are_reported(store, make_admin):
    with pytest.raises(ValidationError) as exc:
        projects.create(store, project_fields(make_admin()['id'], students_working_on=[MISSING], tasks=[MISSING]))
    assert set(exc.value.field_errors) == {'studentsWorkingOn', 'tasks'}


def test_auto_provision_creates_default_admin(store):
    project = projects.create(store, project_fields(MISSING), auto_provision=True)
    admin = admins.get_one(store, project['created_by'])
    assert users.get_one(store, admin['user_id'])['name'] == 'Default Admin'


def test_auto_provision_reuses_placeholder_admin(store):
    first = projects.create(store, project_fields(MISSING), auto_provision=True)
    second = projects.create(store, project_fields(MISSING, title='Another'), auto_provision=True)
    assert first['created_by'] == second['created_by']
    assert len([u for u in users.get_all(store) if u['name'] == 'Default Admin']) == 1


def test_auto_provision_replaces_missing_students_and_tasks(store, make_admin, make_student):
    real = make_student()
    project = projects.create(
        store,
        project_fields(make_admin()['id'], students_working_on=[real['id'], MISSING], tasks=[MISSING]),
        auto_provision=True,
    )
    assert project['students_working_on'][0] == real['id']
    assert len(project['students_working_on']) == 2
    assert len(project['tasks']) == 1
    placeholder = tasks.get_one(store, project['tasks'][0])
    assert placeholder['project_id'] == project['id']


def test_conflicting_create_provisions_nothing(store, make_admin):
    admin = make_admin()
    projects.create(store, project_fields(admin['id']))
    with pytest.raises(ConflictError):
        projects.create(store, project_fields(MISSING, students_working_on=[MISSING]), auto_provision=True)
    assert len(admins.get_all(store)) == 1
    assert [u for u in users.get_all(store) if u['name'].startswith('Default')] == []


def test_missing_task_on_update_provisions_nothing(store, make_project):
    project = make_project()
    with pytest.raises(ValidationError) as exc:
        projects.update(store, project['id'], {'created_by': MISSING, 'tasks': [MISSING]}, auto_provision=True)
    assert exc.value.field_errors == {'tasks': 'Tasks not found: ' + MISSING}
    assert len(admins.get_all(store)) == 1


def test_update_changes_only_progress(store, make_project):
    project = make_project()
    updated = projects.update(store, project['id'], {'progress': 40})
    assert updated['progress'] == 40
    for key in ('title', 'description', 'status', 'start_date', 'end_date', 'created_by'):
        assert updated[key] == project[key]


def test_update_checks_merged_dates(store, make_project):
    project = make_project(start_date=date.today(), end_date=date.today() + timedelta(days=5))
    with pytest.raises(ValidationError):
        projects.update(store, project['id'], {'end_date': date.today() - timedelta(days=1)})


def test_update_missing_project_not_found(store):
    with pytest.raises(NotFoundError, match='Project not found'):
        projects.update(store, MISSING, {'progress': 1})


def test_delete_returns_project_and_leaves_tasks(store, make_task):
    task = make_task()
    deleted = projects.delete(store, task['project_id'])
    assert deleted['id'] == task['project_id']
    with pytest.raises(NotFoundError):
        projects.get_one(store, task['project_id'])
    assert tasks.get_one(store, task['id'])['project_id'] == task['project_id']


def test_lookup_by_admin_and_student(store, make_admin, make_student, make_project):
    admin = make_admin()
    student = make_student()
    mine = make_project(created_by=admin['id'], students_working_on=[student['id']])
    make_project()
    assert [p['id'] for p in projects.get_by_admin(store, admin['id'])] == [mine['id']]
    assert [p['id'] for p in projects.get_by_student(store, student['id'])] == [mine['id']]
