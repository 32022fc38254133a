import os, sys, pytest
from datetime import datetime, timedelta, timezone
# Ensure backend directory is on path so 'printdesk' and 'tests' can be imported
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
from printdesk import create_app, get_db
from printdesk.models.admin import Base
# Import all model modules to ensure tables are registered before create_all
import printdesk.models.order  # noqa: F401
import printdesk.models.audit  # noqa: F401

TEST_SECRET = 'printdesk-test-secret-key-0123456789abcdef'
START = datetime(2026, 1, 5, 9, 0, tzinfo=timezone.utc)


class FrozenClock:
    """Callable clock the services read instead of the wall clock."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **delta):
        self.now = self.now + timedelta(**delta)
        return self.now


@pytest.fixture()
def clock():
    return FrozenClock(START)


@pytest.fixture()
def app_instance(tmp_path, clock):
    app = create_app({
        'DATABASE_URL': 'sqlite+pysqlite:///:memory:',
        'STORAGE_ROOT': str(tmp_path / 'storage'),
        'JWT_SECRET_KEY': TEST_SECRET,
        'CLEANUP_TOKEN': '',
    })
    svc = app.extensions['printdesk']
    svc.clock = clock
    svc.store.clock = clock
    with app.app_context():
        engine = get_db().get_bind()
        Base.metadata.create_all(engine)
    yield app


@pytest.fixture()
def client(app_instance):
    return app_instance.test_client()


@pytest.fixture()
def service(app_instance):
    return app_instance.extensions['printdesk']


@pytest.fixture()
def store(service):
    return service.store


@pytest.fixture()
def objects(service):
    return service.objects


@pytest.fixture()
def admin_headers(app_instance):
    from tests.test_lifecycle_helpers import jwt_headers
    from printdesk.constants.permissions import ADMIN_PERMISSIONS
    with app_instance.app_context():
        return jwt_headers(1, ADMIN_PERMISSIONS)
