"""
Logging configuration tests
"""
import json
import logging
import sys

import pytest

from logging_config import ContextualFormatter, JSONFormatter, TEXT_FORMAT, request_id_var, setup_logging


@pytest.fixture
def request_id():
    token = request_id_var.set('req-1')
    yield 'req-1'
    request_id_var.reset(token)


@pytest.fixture
def root_handlers():
    root = logging.getLogger()
    before, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = before
    root.setLevel(level)


def make_record(msg='Task %s saved', args=('t1',), exc_info=None, **extra):
    record = logging.LogRecord('resolvers.tasks', logging.ERROR, __file__, 42, msg, args, exc_info)
    record.__dict__.update(extra)
    return record


def test_json_line_carries_request_and_exception(request_id):
    try:
        raise ValueError('bad progress')
    except ValueError:
        record = make_record(exc_info=sys.exc_info(), project_id='p1')

    data = json.loads(JSONFormatter().format(record))
    assert data['level'] == 'ERROR'
    assert data['logger'] == 'resolvers.tasks'
    assert data['message'] == 'Task t1 saved'
    assert data['line'] == 42
    assert data['request_id'] == 'req-1'
    assert data['project_id'] == 'p1'
    assert data['exception']['type'] == 'ValueError'
    assert data['exception']['message'] == 'bad progress'
    assert 'bad progress' in ''.join(data['exception']['traceback'])
    assert 'args' not in data and 'msg' not in data


def test_json_line_without_request_or_exception():
    data = json.loads(JSONFormatter().format(make_record(args=('t2',))))
    assert 'request_id' not in data
    assert 'exception' not in data
    assert data['message'] == 'Task t2 saved'


def test_json_line_serializes_unknown_values(request_id):
    data = json.loads(JSONFormatter().format(make_record(extra_obj=object())))
    assert data['extra_obj'].startswith('<object object')


def test_text_format_falls_back_to_dash():
    line = ContextualFormatter(TEXT_FORMAT).format(make_record())
    assert '| - |' in line
    assert line.endswith('resolvers.tasks | Task t1 saved')


@pytest.mark.parametrize('fmt, formatter', [('json', JSONFormatter), ('text', ContextualFormatter)])
def test_setup_logging_installs_one_handler(root_handlers, fmt, formatter):
    setup_logging('debug', fmt)
    setup_logging('debug', fmt)
    ours = [h for h in root_handlers.handlers if getattr(h, '_taskboard', False)]
    assert len(ours) == 1
    assert isinstance(ours[0].formatter, formatter)
    assert root_handlers.level == logging.DEBUG
    assert logging.getLogger('pymongo').level == logging.WARNING
