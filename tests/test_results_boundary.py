import pytest
from sqlalchemy import exc as sa_exc

from classes.errors import NotFoundError, StoreTimeoutError, UpstreamError, ValidationError
from classes.results import ServiceResult, service_call, translate_error


class FakeSession:
    def __init__(self):
        self.rollbacks = 0

    def rollback(self):
        self.rollbacks += 1


class Manager:
    def __init__(self, error=None, data=None):
        self.session = FakeSession()
        self.error = error
        self.data = data

    @service_call
    def run(self):
        if self.error is not None:
            raise self.error
        return self.data


def operational(message):
    return sa_exc.OperationalError('SELECT 1', {}, Exception(message))


def test_success_wraps_data():
    manager = Manager(data={'answer': 42})

    result = manager.run()

    assert result == ServiceResult(success=True, data={'answer': 42})
    assert result.to_dict() == {'success': True, 'data': {'answer': 42}, 'error': None}
    assert manager.session.rollbacks == 0


@pytest.mark.parametrize(
    'error, code, status',
    [
        (NotFoundError('Quiz attempt not found'), 'not_found', 404),
        (ValidationError('Rating must be between 1 and 5'), 'validation_error', 400),
        (sa_exc.TimeoutError(), 'timeout', 504),
        (operational('(2013, Lost connection to MySQL server during query (timed out))'), 'timeout', 504),
        (operational('database is locked'), 'timeout', 504),
        (operational('no such table: quiz_attempts'), 'upstream_error', 502),
        (sa_exc.IntegrityError('INSERT', {}, Exception('constraint failed')), 'upstream_error', 502),
        (KeyError('boom'), 'upstream_error', 502),
    ],
)
def test_failures_map_to_codes_and_roll_back(error, code, status):
    manager = Manager(error=error)

    result = manager.run()

    assert result.success is False
    assert result.data is None
    assert result.code == code
    assert result.status == status
    assert manager.session.rollbacks == 1


def test_platform_errors_keep_their_message():
    result = Manager(error=NotFoundError('Quiz attempt not found')).run()

    assert result.error == 'Quiz attempt not found'


def test_translate_error_types():
    assert isinstance(translate_error(sa_exc.TimeoutError()), TimeoutError)
    assert isinstance(translate_error(sa_exc.TimeoutError()), StoreTimeoutError)
    assert isinstance(translate_error(RuntimeError('x')), UpstreamError)
