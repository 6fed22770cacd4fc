import re
import uuid

import pytest
from sqlalchemy import Text
from sqlalchemy.dialects import postgresql

from readstack.core.capabilities import NewReading
from readstack.core.errors import Conflict
from readstack.models import Reading, User
from readstack.services.store import SqlReadingStore, similarity_query


@pytest.fixture
async def user_id(db_session):
    user = User(email="reader@example.com", password_hash="x", name="Reader")
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    # Plain id: a rollback in the store expires ORM instances in the session
    return user.id


def _new_reading(user_id, url="https://example.com/a", **overrides):
    fields = dict(
        user_id=user_id,
        url=url,
        title="A",
        summary="Summary",
        content="hello world",
    )
    fields.update(overrides)
    return NewReading(**fields)


async def test_insert_and_find(db_session, user_id):
    store = SqlReadingStore(db_session)

    created = await store.insert(_new_reading(user_id))
    found = await store.find_by_url(user_id, "https://example.com/a")

    assert found.id == created.id
    assert found.is_read is False
    assert found.embedding is None
    assert found.created_at is not None
    assert await store.find_by_url(uuid.uuid4(), "https://example.com/a") is None


async def test_unique_constraint_surfaces_as_conflict(db_session, user_id):
    store = SqlReadingStore(db_session)
    await store.insert(_new_reading(user_id))

    with pytest.raises(Conflict):
        await store.insert(_new_reading(user_id, title="Again"))

    readings = await store.list_for_owner(user_id)
    assert [r.title for r in readings] == ["A"]


async def test_long_titles_are_stored_whole(db_session, user_id):
    store = SqlReadingStore(db_session)
    title = "T" * 600

    await store.insert(_new_reading(user_id, title=title))

    assert isinstance(Reading.__table__.c.title.type, Text)
    assert Reading.__table__.c.title.type.length is None
    assert (await store.find_by_url(user_id, "https://example.com/a")).title == title


async def test_list_set_read_delete(db_session, user_id):
    store = SqlReadingStore(db_session)
    a = await store.insert(_new_reading(user_id, "https://example.com/a"))
    b = await store.insert(_new_reading(user_id, "https://example.com/b"))
    a_id, b_id = a.id, b.id

    assert {r.id for r in await store.list_for_owner(user_id)} == {a_id, b_id}

    updated = await store.set_read(user_id, a_id, True)
    assert updated.is_read is True
    assert [r.id for r in await store.list_for_owner(user_id, unread_only=True)] == [b_id]
    assert await store.set_read(uuid.uuid4(), a_id, False) is None

    assert await store.delete(uuid.uuid4(), b_id) is False
    assert await store.delete(user_id, b_id) is True
    assert [r.id for r in await store.list_for_owner(user_id)] == [a_id]


async def test_pending_embeddings_and_set_embedding(db_session, user_id):
    store = SqlReadingStore(db_session)
    reading = await store.insert(_new_reading(user_id))
    reading_id = reading.id

    pending = await store.pending_embeddings(user_id, limit=10)
    assert [r.id for r in pending] == [reading_id]

    await store.set_embedding(reading_id, [0.01] * 1536)

    assert await store.pending_embeddings(None, limit=10) == []


async def test_pending_embeddings_skips_excluded_ids(db_session, user_id):
    store = SqlReadingStore(db_session)
    a = await store.insert(_new_reading(user_id, "https://example.com/a"))
    b = await store.insert(_new_reading(user_id, "https://example.com/b"))
    a_id, b_id = a.id, b.id

    pending = await store.pending_embeddings(user_id, limit=10, exclude_ids={a_id})

    assert [r.id for r in pending] == [b_id]


def _compile(statement):
    return statement.compile(dialect=postgresql.dialect())


def test_similarity_query_filters_orders_and_limits():
    owner = uuid.uuid4()
    compiled = _compile(similarity_query(owner, [0.1, 0.2], threshold=0.5, limit=7))
    sql = " ".join(str(compiled).split())
    where, _, tail = sql.partition(" WHERE ")[2].partition(" ORDER BY ")
    order_by, _, limit = tail.partition(" LIMIT ")

    # Scoped to the owner, embedded rows only, strict threshold on 1 - distance
    assert re.search(r"readings\.user_id = %\((\w+)\)s", where)
    assert "readings.embedding IS NOT NULL" in where
    assert "readings.embedding <=> " in where
    assert re.search(r" > %\(\w+\)s", where)
    assert ">=" not in where

    # Ascending cosine distance is descending similarity
    assert re.fullmatch(r"readings\.embedding <=> %\(\w+\)s", order_by)
    assert "DESC" not in order_by
    assert limit.startswith("%(")

    assert "AS similarity" in sql
    params = compiled.params
    assert owner in params.values()
    assert 0.5 in params.values()
    assert 7 in params.values()


def test_similarity_query_respects_limit_and_threshold_values():
    compiled = _compile(similarity_query(uuid.uuid4(), [1.0], threshold=0.8, limit=3))

    assert 0.8 in compiled.params.values()
    assert 3 in compiled.params.values()
    assert 0.5 not in compiled.params.values()
