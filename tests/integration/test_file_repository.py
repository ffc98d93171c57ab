"""Repository tests against an in-memory SQLite database.

The SQL rendering of the visibility filter must select exactly the rows
that ``authorize`` would allow one by one.
"""

import pytest

from memberfiles.core.access.authorizer import authorize
from memberfiles.core.access.model import AccessType, ObjectType, Visibility
from memberfiles.core.errors import AccessConfigurationError, UnknownVisibilityError
from memberfiles.db.repository import FileRepository
from memberfiles.schemas.common import PaginationParams
from memberfiles.schemas.files import FileCreate
from tests.factories import all_file_refs, all_requesters, create_file


pytestmark = [pytest.mark.db, pytest.mark.integration]


@pytest.fixture
def repo(db_session):
    return FileRepository(db_session)


@pytest.fixture
def seeded(db_session):
    """One row per reference from ``all_file_refs``."""
    refs = all_file_refs()
    for ref in refs:
        create_file(
            db_session,
            id=ref.id,
            visibility=ref.visibility,
            object_type=ref.object_type,
            object_id=ref.object_id,
            owner_id=ref.owner_id,
            uploaded_by_id=ref.uploaded_by_id,
        )
    return refs


class TestVisibleQuery:
    """SQL filter versus per-file authorization."""

    def test_sql_filter_matches_authorize(self, repo, seeded):
        for requester in all_requesters():
            listed = {row.id for row in repo.list_visible(requester)}
            expected = {ref.id for ref in seeded if authorize(requester, ref).authorized}
            assert listed == expected, requester

    def test_admin_sees_everything(self, repo, seeded, admin):
        assert len(repo.list_visible(admin)) == len(seeded)

    def test_soft_deleted_rows_hidden(self, db_session, repo, member, admin):
        live = create_file(db_session, visibility="PUBLIC")
        create_file(db_session, visibility="PUBLIC", deleted=True)

        assert [r.id for r in repo.list_visible(member)] == [live.id]
        assert [r.id for r in repo.list_visible(admin)] == [live.id]

    def test_object_filters(self, db_session, repo, member):
        event_file = create_file(db_session, object_type="EVENT", object_id="e1")
        create_file(db_session, object_type="EVENT", object_id="e2")
        create_file(db_session, object_type="GENERAL", object_id="e1")

        rows = repo.list_visible(member, object_type="EVENT", object_id="e1")
        assert [r.id for r in rows] == [event_file.id]
        assert len(repo.list_visible(member, object_type=ObjectType.EVENT)) == 2

    def test_newest_first(self, db_session, repo, member):
        older = create_file(db_session)
        newer = create_file(db_session)
        assert [r.id for r in repo.list_visible(member)] == [newer.id, older.id]


class TestListPage:
    """Tests for paginated listings."""

    def test_pagination(self, db_session, repo, member):
        for _ in range(5):
            create_file(db_session, visibility="MEMBERS_ONLY")
        create_file(db_session, visibility="BOARD_ONLY")

        page = repo.list_page(member, PaginationParams(page=1, per_page=2))
        assert page.total == 5
        assert page.pages == 3
        assert len(page.items) == 2
        assert page.has_next
        assert not page.has_prev

        last = repo.list_page(member, PaginationParams(page=3, per_page=2))
        assert len(last.items) == 1
        assert not last.has_next
        assert last.has_prev

    def test_summary_fields(self, db_session, repo, member):
        row = create_file(db_session, visibility="PRIVATE", owner_id="m1", filename="minutes.pdf")

        page = repo.list_page(member)
        assert page.items[0].id == row.id
        assert page.items[0].visibility is Visibility.PRIVATE
        assert page.items[0].filename == "minutes.pdf"

    def test_unknown_visibility_row_raises_for_admin(self, db_session, repo, admin):
        create_file(db_session, visibility="SECRET")
        with pytest.raises(UnknownVisibilityError):
            repo.list_page(admin)

    def test_unknown_visibility_row_never_listed(self, db_session, repo, member):
        create_file(db_session, visibility="SECRET")
        assert repo.list_page(member).total == 0


class TestGetFile:
    """Tests for the FileLookup side of the repository."""

    def test_returns_ref(self, db_session, repo):
        row = create_file(db_session, visibility="COMMITTEE_ONLY", owner_id="c1")
        ref = repo.get_file(row.id)

        assert ref.id == row.id
        assert ref.visibility is Visibility.COMMITTEE_ONLY
        assert ref.owner_id == "c1"
        assert not ref.deleted

    def test_missing(self, repo):
        assert repo.get_file("nope") is None

    def test_deleted_flagged(self, db_session, repo):
        row = create_file(db_session, deleted=True)
        assert repo.get_file(row.id).deleted
        assert repo.get(row.id) is None
        assert repo.get(row.id, include_deleted=True) is row

    def test_malformed_row_raises(self, db_session, repo):
        row = create_file(db_session, object_type="SPACESHIP")
        with pytest.raises(AccessConfigurationError):
            repo.get_file(row.id)


class TestCreate:
    """Tests for inserting file records."""

    def _data(self, **overrides):
        data = {
            "object_type": "EVENT",
            "object_id": "e1",
            "filename": "flyer.pdf",
            "original_name": "Flyer.pdf",
            "mime_type": "application/pdf",
            "size": 2048,
        }
        data.update(overrides)
        return FileCreate(**data)

    def test_defaults(self, repo):
        row = repo.create(self._data(), uploaded_by_id="m1")

        assert row.id
        assert row.visibility == "MEMBERS_ONLY"
        assert row.owner_id is None
        assert row.storage_key.startswith("event/e1/")
        assert row.storage_key.endswith("-flyer.pdf")

    def test_configured_default_visibility(self, repo):
        row = repo.create(self._data(), uploaded_by_id="m1", default_visibility=Visibility.PUBLIC)
        assert row.visibility == "PUBLIC"

    def test_private_owned_by_uploader(self, repo):
        row = repo.create(self._data(visibility="PRIVATE"), uploaded_by_id="m7")
        assert row.owner_id == "m7"

    def test_explicit_storage_key(self, repo):
        row = repo.create(self._data(storage_key="custom/key"), uploaded_by_id="m1")
        assert row.storage_key == "custom/key"


class TestSoftDeleteAndAccessLog:
    """Tests for soft deletion and the access log."""

    def test_soft_delete(self, db_session, repo):
        row = create_file(db_session)
        assert repo.soft_delete(row.id) is True
        assert row.deleted_at is not None
        assert repo.soft_delete(row.id) is False

    def test_soft_delete_missing(self, repo):
        assert repo.soft_delete("nope") is False

    def test_log_access(self, db_session, repo, member, anonymous):
        row = create_file(db_session, visibility="PUBLIC")
        repo.log_access(row.id, member, AccessType.DOWNLOAD, ip_address="10.0.0.1")
        repo.log_access(row.id, anonymous, "view", user_agent="curl")

        history = repo.access_history(row.id)
        assert len(history) == 2
        assert {e.access_type for e in history} == {"download", "view"}
        assert {e.accessed_by_id for e in history} == {"m1", None}
        assert history[0].file is row
