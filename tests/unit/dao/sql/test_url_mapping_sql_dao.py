"""Unit tests for the URLMappingSQLDAO

All tests run against an in-memory SQLite database.

Test coverage includes:

1. Initialization
   - The schema is created on demand.
   - Missing connection parameters raise ValueError.

2. Insertion behavior
   - Fresh mappings are readable in both directions.
   - Identical re-insertion is a no-op.
   - Colliding shortcodes raise ShortCodeCollisionError and leave the first mapping intact.
   - Re-bound target URLs raise TargetConflictError or retire the stale shortcode.

3. Concurrent writers
   - Unique-constraint violations are resolved against the committed state.
   - A lost race that left a stale shortcode is retried so the stale code gets retired.

4. Database errors
   - SQLAlchemy errors surface as DataStoreError.
"""

import re

import pytest
from sqlalchemy import create_engine, inspect
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.pool import StaticPool

from urlshortener.models import URLMappingModel
from urlshortener.dao.exceptions import DataStoreError, ShortCodeCollisionError, ShortURLNotFoundError, TargetConflictError
from urlshortener.dao.sql import URLMappingSQLDAO, urls_table


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def engine():
    _engine = create_engine('sqlite://', connect_args={'check_same_thread': False}, poolclass=StaticPool)
    yield _engine
    _engine.dispose()


@pytest.fixture
def dao(engine):
    return URLMappingSQLDAO(sql_engine=engine)


@pytest.fixture
def mapping():
    return URLMappingModel(target='https://example.com/a', shortcode='abc1234')


def integrity_error():
    return IntegrityError('INSERT INTO urls ...', {}, Exception('UNIQUE constraint failed'))


# -------------------------------
# 1. Initialization
# -------------------------------


def test_initialize_creates_schema(engine):
    URLMappingSQLDAO(sql_engine=engine)
    assert 'urls' in inspect(engine).get_table_names()


def test_initialize_without_schema_creation(engine):
    URLMappingSQLDAO(sql_engine=engine, sql_create_schema=False)
    assert 'urls' not in inspect(engine).get_table_names()


def test_initialize_from_url():
    dao = URLMappingSQLDAO(sql_url='sqlite://')
    assert dao.engine.url.drivername == 'sqlite'
    dao.close()


def test_initialize_without_url_or_engine():
    with pytest.raises(ValueError, match='Either sql_url or sql_engine must be provided.'):
        URLMappingSQLDAO()


# -------------------------------
# 2. Insertion behavior
# -------------------------------


def test_insert_and_lookup_both_directions(dao, mapping):
    assert dao.insert(mapping) is dao
    assert dao.get('abc1234') == mapping
    assert dao.get_by_target('https://example.com/a') == mapping


def test_insert_identical_mapping_is_noop(dao, engine, mapping):
    dao.insert(mapping)
    dao.insert(mapping)

    with engine.connect() as conn:
        assert conn.execute(urls_table.select()).all() == [('abc1234', 'https://example.com/a')]


def test_insert_colliding_shortcode(dao, mapping):
    dao.insert(mapping)

    with pytest.raises(ShortCodeCollisionError, match=re.escape("Short code 'abc1234' already maps to 'https://example.com/a'.")):
        dao.insert(URLMappingModel(target='https://example.com/b', shortcode='abc1234'))

    assert dao.get('abc1234') == mapping
    with pytest.raises(ShortURLNotFoundError):
        dao.get_by_target('https://example.com/b')


def test_insert_rebound_target_without_retiring(dao, mapping):
    dao.insert(mapping)

    with pytest.raises(TargetConflictError) as exc_info:
        dao.insert(URLMappingModel(target='https://example.com/a', shortcode='xyz9876'), retire_stale=False)

    assert exc_info.value.existing_shortcode == 'abc1234'
    with pytest.raises(ShortURLNotFoundError):
        dao.get('xyz9876')


def test_insert_rebound_target_retires_stale_shortcode(dao, engine, mapping):
    dao.insert(mapping)
    dao.insert(URLMappingModel(target='https://example.com/a', shortcode='xyz9876'))

    assert dao.get_by_target('https://example.com/a').shortcode == 'xyz9876'
    with pytest.raises(ShortURLNotFoundError):
        dao.get('abc1234')
    with engine.connect() as conn:
        assert conn.execute(urls_table.select()).all() == [('xyz9876', 'https://example.com/a')]


def test_get_missing_mapping(dao):
    with pytest.raises(ShortURLNotFoundError, match="Short URL with code 'nothere' not found."):
        dao.get('nothere')
    with pytest.raises(ShortURLNotFoundError, match=re.escape("Short URL for 'https://example.com/z' not found.")):
        dao.get_by_target('https://example.com/z')


# -------------------------------
# 3. Concurrent writers
# -------------------------------


def _race(monkeypatch, dao, committed: URLMappingModel | None):
    """Commit a concurrent writer's row and make _insert fail like a lost race."""
    if committed is not None:
        with dao.engine.begin() as conn:
            conn.execute(urls_table.insert().values(short_code=committed.shortcode, original_url=committed.target))

    def racing_insert(conn, mapping, retire_stale):
        raise integrity_error()

    monkeypatch.setattr(dao, '_insert', racing_insert)


def test_integrity_error_with_same_pair_is_noop(monkeypatch, dao, mapping):
    _race(monkeypatch, dao, committed=mapping)

    assert dao.insert(mapping) is dao


def test_integrity_error_with_colliding_shortcode(monkeypatch, dao, mapping):
    _race(monkeypatch, dao, committed=URLMappingModel(target='https://example.com/b', shortcode='abc1234'))

    with pytest.raises(ShortCodeCollisionError) as exc_info:
        dao.insert(mapping)
    assert exc_info.value.existing_target == 'https://example.com/b'


def test_integrity_error_with_rebound_target(monkeypatch, dao, mapping):
    _race(monkeypatch, dao, committed=URLMappingModel(target='https://example.com/a', shortcode='xyz9876'))

    with pytest.raises(TargetConflictError) as exc_info:
        dao.insert(mapping, retire_stale=False)
    assert exc_info.value.existing_shortcode == 'xyz9876'


def test_integrity_error_with_rebound_target_retires_stale_shortcode(monkeypatch, dao, engine, mapping):
    with dao.engine.begin() as conn:
        conn.execute(urls_table.insert().values(short_code='xyz9876', original_url='https://example.com/a'))

    real_insert = dao._insert
    calls = []

    def lose_first_race(conn, mapping, retire_stale):
        calls.append(mapping)
        if len(calls) == 1:
            raise integrity_error()
        real_insert(conn, mapping, retire_stale)

    monkeypatch.setattr(dao, '_insert', lose_first_race)

    assert dao.insert(mapping, retire_stale=True) is dao
    assert len(calls) == 2
    assert dao.get_by_target('https://example.com/a') == mapping
    with pytest.raises(ShortURLNotFoundError):
        dao.get('xyz9876')
    with engine.connect() as conn:
        assert conn.execute(urls_table.select()).all() == [('abc1234', 'https://example.com/a')]


def test_integrity_error_keeps_failing_under_contention(monkeypatch, dao, mapping):
    _race(monkeypatch, dao, committed=URLMappingModel(target='https://example.com/a', shortcode='xyz9876'))

    with pytest.raises(DataStoreError, match='after 4 contended attempts'):
        dao.insert(mapping)


def test_integrity_error_with_vanished_row(monkeypatch, dao, mapping):
    _race(monkeypatch, dao, committed=None)

    with pytest.raises(DataStoreError, match='conflicting row vanished'):
        dao.insert(mapping)


# -------------------------------
# 4. Database errors
# -------------------------------


def test_database_error_raises_datastore_error(monkeypatch, dao):
    def broken_lookup(conn, shortcode):
        raise OperationalError('SELECT ...', {}, Exception('database is locked'))

    monkeypatch.setattr(URLMappingSQLDAO, '_target_of', staticmethod(broken_lookup))

    with pytest.raises(DataStoreError, match=re.escape('Database error at sqlite://: OperationalError.')):
        dao.get('abc1234')
