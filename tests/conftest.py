import os

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault('DATABASE_URL', 'sqlite://')
os.environ.setdefault('JWT_SECRET_KEY', 'test-secret-key-for-the-study-portal-suite')

from studyportal.auth.dependencies import CurrentUser  # noqa: E402
from studyportal.auth.passwords import get_password_hash  # noqa: E402
from studyportal.core import config  # noqa: E402
from studyportal.database import Database  # noqa: E402
from studyportal.main import create_app  # noqa: E402
from studyportal.models.user import ROLE_ADMIN, ROLE_STUDENT, User  # noqa: E402

DEFAULT_PASSWORD = 'Secret123'


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, 'BCRYPT_ROUNDS', 4)


@pytest.fixture
def database():
    database = Database('sqlite://')
    database.create_schema()
    try:
        yield database
    finally:
        database.dispose()


@pytest.fixture
def db(database):
    session = database.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db):
    def _make_user(username: str, role: str = ROLE_STUDENT, password: str = DEFAULT_PASSWORD, name: str | None = None) -> User:
        user = User(
            name=name or username.title(),
            username=username,
            hashed_password=get_password_hash(password),
            role=role,
            student_id=f'STU-{username}' if role == ROLE_STUDENT else None,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def admin(make_user) -> User:
    return make_user('admin', role=ROLE_ADMIN, name='Admin User')


@pytest.fixture
def student(make_user) -> User:
    return make_user('student_x', name='Student X')


@pytest.fixture
def other_student(make_user) -> User:
    return make_user('student_y', name='Student Y')


@pytest.fixture
def as_caller():
    def _as_caller(user: User) -> CurrentUser:
        return CurrentUser(id=user.id, username=user.username, role=user.role, name=user.name, token='test-token')

    return _as_caller


@pytest.fixture
def client(database):
    app = create_app(database)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def login(client):
    def _login(username: str, password: str = DEFAULT_PASSWORD) -> dict:
        response = client.post('/api/auth/login', json={'username': username, 'password': password})
        assert response.status_code == 200, response.json()
        return {'Authorization': f"Bearer {response.json()['token']}"}

    return _login
