"""
Unit tests for the Thread and Strand models and their service layer.

Test Organization:
- TestModels: identifiers, timestamps, relationships and cascade deletes
- TestThreadService: listing order, lookup and creation
- TestStrandService: per-thread listing and creation against an existing thread
- TestServiceRegistry: per-request service lookup
"""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from models import Strand, Thread, db, generate_object_id
from services import (
    DatabaseError,
    NotFoundError,
    ServiceRegistryError,
    StrandService,
    ThreadService,
    get_service,
)
from yarn_core.utils.validation import STRAND_RULES, is_object_id
from tests.factories import StrandFactory, ThreadFactory


def _count(model):
    return db.session.scalar(db.select(db.func.count()).select_from(model))


@pytest.mark.unit
class TestModels:
    """Model defaults and relationships."""

    def test_generated_ids_are_unique_object_ids(self):
        ids = {generate_object_id() for _ in range(1000)}
        assert len(ids) == 1000
        assert all(is_object_id(value) for value in ids)

    def test_thread_defaults(self, app_context):
        thread = Thread(title='Untagged', description='No tags were given here.')
        db.session.add(thread)
        db.session.commit()
        assert is_object_id(thread.id)
        assert thread.created_at is not None
        assert thread.updated_at is not None
        assert thread.tag_list == []

    def test_sanitized_columns_are_unbounded(self):
        columns = [
            Thread.__table__.c.description,
            Strand.__table__.c.contributor_name,
            Strand.__table__.c.content,
        ]
        for column in columns:
            assert isinstance(column.type, db.Text)
            assert column.type.length is None

    def test_strand_belongs_to_thread(self, app_context):
        strand = StrandFactory()
        assert strand.thread_id == strand.thread.id
        assert strand.thread.strands == [strand]

    def test_deleting_thread_removes_strands(self, app_context):
        strand = StrandFactory()
        thread = strand.thread
        db.session.delete(thread)
        db.session.commit()
        assert _count(Strand) == 0


@pytest.mark.unit
class TestThreadService:
    """ThreadService operations."""

    def test_requires_session_or_context(self):
        with pytest.raises(RuntimeError):
            ThreadService()

    def test_list_threads_newest_first(self, app_context):
        first = ThreadFactory()
        second = ThreadFactory()
        third = ThreadFactory()

        result = ThreadService().list_threads()

        assert result.success
        assert [thread.id for thread in result.data] == [third.id, second.id, first.id]
        assert result.metadata == {'count': 3}

    def test_list_threads_empty(self, app_context):
        result = ThreadService().list_threads()
        assert result.success
        assert result.data == []

    def test_get_thread(self, app_context):
        thread = ThreadFactory()
        result = ThreadService().get_thread(thread.id)
        assert result.success
        assert result.data is thread

    def test_get_missing_thread(self, app_context):
        result = ThreadService().get_thread(generate_object_id())
        assert not result.success
        assert isinstance(result.error, NotFoundError)
        assert result.error.message == 'Thread not found'

    def test_create_thread(self, app_context):
        result = ThreadService().create_thread({
            'title': 'Night Shift',
            'description': 'Stories from the late hours.',
            'tags': ['night'],
        })
        assert result.success
        assert _count(Thread) == 1
        assert db.session.get(Thread, result.data.id).tags == ['night']

    def test_create_thread_defaults_tags(self, app_context):
        result = ThreadService().create_thread({
            'title': 'Night Shift',
            'description': 'Stories from the late hours.',
        })
        assert result.data.tags == []

    def test_create_thread_database_failure(self, app_context):
        service = ThreadService()
        with patch.object(service.db_session, 'commit', side_effect=OperationalError('COMMIT', {}, Exception('gone'))):
            result = service.create_thread({
                'title': 'Night Shift',
                'description': 'Stories from the late hours.',
            })
        assert not result.success
        assert isinstance(result.error, DatabaseError)
        assert result.error.error_code == 'TRANSACTION_FAILED'


@pytest.mark.unit
class TestStrandService:
    """StrandService operations."""

    def test_list_for_thread_oldest_first(self, app_context):
        thread = ThreadFactory()
        first = StrandFactory(thread=thread)
        second = StrandFactory(thread=thread)
        StrandFactory()

        result = StrandService().list_for_thread(thread.id)

        assert [strand.id for strand in result.data] == [first.id, second.id]

    def test_list_for_unknown_thread_is_empty(self, app_context):
        result = StrandService().list_for_thread(generate_object_id())
        assert result.success
        assert result.data == []

    def test_create_strand(self, app_context):
        thread = ThreadFactory()
        result = StrandService().create_strand({
            'threadId': thread.id,
            'contributorName': 'Jane',
            'content': 'The door creaked open.',
        })
        assert result.success
        assert result.data.thread_id == thread.id
        assert _count(Strand) == 1

    def test_escaped_content_fits_column(self, app_context):
        thread = ThreadFactory()
        cleaned = STRAND_RULES.apply({
            'threadId': thread.id,
            'contributorName': 'Jane',
            'content': '<' * 2000,
        }).cleaned_data
        assert len(cleaned['content']) == 8000

        result = StrandService().create_strand(cleaned)

        assert result.success
        assert db.session.get(Strand, result.data.id).content == '&lt;' * 2000

    def test_create_strand_for_missing_thread(self, app_context):
        result = StrandService().create_strand({
            'threadId': generate_object_id(),
            'contributorName': 'Jane',
            'content': 'The door creaked open.',
        })
        assert isinstance(result.error, NotFoundError)
        assert _count(Strand) == 0


@pytest.mark.unit
class TestServiceRegistry:
    """Service lookup through the application registry."""

    def test_services_cached_per_context(self, app_context):
        assert get_service('thread') is get_service('thread')
        assert isinstance(get_service('strand'), StrandService)

    def test_unknown_service(self, app_context):
        with pytest.raises(ServiceRegistryError):
            get_service('user')
