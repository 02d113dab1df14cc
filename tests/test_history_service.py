"""
Tests for app/services/history_service.py
"""

import datetime
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from app.db import utcnow
from app.exceptions import StorageError
from app.models.history_model import HistoryRecord
from app.services.history_service import HistoryStore


def record_fields(user_id, file_name="main.py", **overrides):
    fields = dict(
        user_id=user_id,
        file_name=file_name,
        format="docx",
        parse_info={"functions": ["main"], "classes": [], "lines": 3},
        project_info="project prompt",
        uml_instructions="uml prompt",
        generated_files={"docx": "main.docx"},
    )
    fields.update(overrides)
    return fields


@pytest.mark.unit
class TestHistoryStore:
    def test_create_returns_id(self, db_session, user):
        store = HistoryStore(db_session)

        record_id = store.create(**record_fields(user.id))

        record = db_session.get(HistoryRecord, record_id)
        assert record.user_id == user.id
        assert record.generated_files == {"docx": "main.docx"}
        assert record.parse_info["functions"] == ["main"]
        assert record.created_at is not None

    def test_list_by_user_newest_first_and_scoped(self, db_session, user, other_user):
        store = HistoryStore(db_session)
        older = store.create(**record_fields(user.id, "old.py"))
        newer = store.create(**record_fields(user.id, "new.py"))
        store.create(**record_fields(other_user.id, "theirs.py"))

        base = datetime.datetime(2026, 1, 1)
        db_session.get(HistoryRecord, older).created_at = base
        db_session.get(HistoryRecord, newer).created_at = base + datetime.timedelta(minutes=5)
        db_session.commit()

        records = store.list_by_user(user.id)

        assert [r.file_name for r in records] == ["new.py", "old.py"]

    def test_delete_by_owner(self, db_session, user):
        store = HistoryStore(db_session)
        record_id = store.create(**record_fields(user.id))

        assert store.delete_by_id(record_id, user.id) is True
        assert store.list_by_user(user.id) == []

    def test_delete_by_other_user_is_not_found(self, db_session, user, other_user):
        store = HistoryStore(db_session)
        record_id = store.create(**record_fields(user.id))

        assert store.delete_by_id(record_id, other_user.id) is False
        assert db_session.get(HistoryRecord, record_id) is not None

    def test_delete_unknown_id(self, db_session, user):
        assert HistoryStore(db_session).delete_by_id("6f1c1f8e-8c1e-4a55-9d34-000000000000", user.id) is False

    def test_create_failure_raises_storage_error(self, db_session, user):
        store = HistoryStore(db_session)

        with patch.object(db_session, "commit", side_effect=OperationalError("INSERT", {}, Exception("disk full"))):
            with pytest.raises(StorageError):
                store.create(**record_fields(user.id))

        assert db_session.query(HistoryRecord).count() == 0


@pytest.mark.unit
def test_created_at_defaults_to_current_utc_time(db_session, user):
    record_id = HistoryStore(db_session).create(**record_fields(user.id))
    record = db_session.get(HistoryRecord, record_id)
    now = utcnow().replace(tzinfo=None)

    for created_at in (user.created_at, record.created_at):
        assert abs((created_at.replace(tzinfo=None) - now).total_seconds()) < 60
