"""RefreshTokenStore against the in-memory SQLite storage."""

import uuid
from datetime import timedelta

import pytest
from sqlalchemy.exc import OperationalError

from models import storage
from models.refresh_token import RefreshToken
from utils.exceptions import PersistenceFailure, TokenExpired, TokenNotFound, TokenRevoked
from utils.tokens import RefreshTokenStore, generate_refresh_token

SIXTY_DAYS = timedelta(days=60)


@pytest.fixture
def store():
    return RefreshTokenStore(storage)


@pytest.fixture
def owner(db_user):
    return uuid.UUID(db_user.id)


def test_generated_tokens_are_long_and_distinct():
    first, second = generate_refresh_token(), generate_refresh_token()
    assert len(first) == 64
    assert first != second


def test_create_then_resolve(store, owner):
    record = store.create(owner, SIXTY_DAYS)
    assert record.revoked_at is None
    assert store.resolve_owner(record.token) == owner


def test_create_persists_row(store, owner):
    record = store.create(owner, SIXTY_DAYS)
    storage.close()
    row = storage.get_session().query(RefreshToken).filter(RefreshToken.token == record.token).one()
    assert row.user_id == str(owner)
    assert row.revoked_at is None


def test_each_create_issues_a_new_token(store, owner):
    assert store.create(owner, SIXTY_DAYS).token != store.create(owner, SIXTY_DAYS).token


def test_unknown_token(store):
    with pytest.raises(TokenNotFound):
        store.resolve_owner("no-such-token")


def test_expired_token(store, owner):
    record = store.create(owner, timedelta(seconds=-1))
    with pytest.raises(TokenExpired):
        store.resolve_owner(record.token)


def test_revoked_token(store, owner):
    record = store.create(owner, SIXTY_DAYS)
    store.resolve_owner(record.token)
    store.revoke(record.token)
    with pytest.raises(TokenRevoked):
        store.resolve_owner(record.token)


def test_revoke_sets_revoked_at(store, owner):
    record = store.create(owner, SIXTY_DAYS)
    store.revoke(record.token)
    storage.close()
    row = storage.get_session().query(RefreshToken).filter(RefreshToken.token == record.token).one()
    assert row.revoked_at is not None


def test_revoke_twice(store, owner):
    record = store.create(owner, SIXTY_DAYS)
    store.revoke(record.token)
    with pytest.raises(TokenNotFound):
        store.revoke(record.token)


def test_revoke_unknown(store):
    with pytest.raises(TokenNotFound):
        store.revoke("no-such-token")


def test_revoking_one_token_leaves_others_alone(store, owner):
    first = store.create(owner, SIXTY_DAYS)
    second = store.create(owner, SIXTY_DAYS)
    store.revoke(first.token)
    assert store.resolve_owner(second.token) == owner


def test_tokens_removed_with_reset(store, owner):
    record = store.create(owner, SIXTY_DAYS)
    storage.reset()
    with pytest.raises(TokenNotFound):
        store.resolve_owner(record.token)


class BrokenSession:
    """Stands in for the scoped session when the database is unreachable."""

    def __init__(self):
        self.rolled_back = False

    def query(self, *args):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    def rollback(self):
        self.rolled_back = True


class BrokenStorage:
    def __init__(self):
        self.session = BrokenSession()

    def new(self, obj):
        pass

    def save(self):
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    def get_session(self):
        return self.session


class TestStoreFailures:
    @pytest.fixture
    def broken(self):
        return BrokenStorage()

    def test_create(self, broken):
        with pytest.raises(PersistenceFailure) as exc_info:
            RefreshTokenStore(broken).create(uuid.uuid4(), SIXTY_DAYS)
        assert isinstance(exc_info.value.__cause__, OperationalError)

    def test_resolve_owner(self, broken):
        with pytest.raises(PersistenceFailure):
            RefreshTokenStore(broken).resolve_owner(generate_refresh_token())
        assert broken.session.rolled_back

    def test_revoke(self, broken):
        with pytest.raises(PersistenceFailure):
            RefreshTokenStore(broken).revoke(generate_refresh_token())
        assert broken.session.rolled_back
