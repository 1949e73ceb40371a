import io

import pytest
from sqlalchemy.exc import OperationalError
from werkzeug.datastructures import FileStorage

from ingestion.models.database import Base, Database, make_engine
from ingestion.services.uploads import (
    DatastoreError, UploadResult, describe_failure, read_upload, record_upload, recent_uploads,
)


@pytest.fixture
def memory_db():
    db = Database(make_engine("sqlite://"))
    db.create_schema()
    yield db
    db.dispose()


def test_read_upload():
    assert read_upload(None) is None
    assert read_upload(FileStorage(io.BytesIO(b"abc"), filename="")) is None
    assert read_upload(FileStorage(io.BytesIO(b"abc"), filename="a.png")) == b"abc"
    assert read_upload(FileStorage(io.BytesIO(b""), filename="a.png")) == b""


def test_result_encodes_image():
    assert UploadResult("backend-a", [], b"hi").to_dict() == {
        "backend": "backend-a", "rows": [], "uploadedImage": "aGk="}
    assert UploadResult("backend-a").to_dict()["uploadedImage"] is None


def test_record_upload_in_memory(memory_db):
    result = record_upload(memory_db, "backend-a", b"\x00\x01")
    assert result.backend == "backend-a"
    assert result.rows[0]["meta"] == {"uploaded": True}
    assert result.image == b"\x00\x01"


def test_recent_uploads_limit(memory_db):
    for _ in range(6):
        record_upload(memory_db, "backend-b", None)
    assert len(recent_uploads(memory_db)) == 5
    assert len(recent_uploads(memory_db, limit=2)) == 2


def test_missing_table_raises_datastore_error(memory_db):
    Base.metadata.drop_all(bind=memory_db.engine)
    with pytest.raises(DatastoreError) as info:
        record_upload(memory_db, "backend-a", None)
    assert "requests" in info.value.details


def test_describe_failure_uses_driver_message():
    err = OperationalError("SELECT 1", {}, Exception("connection refused"))
    assert describe_failure(err) == "connection refused"
    assert describe_failure(ValueError()) == "ValueError"


class FailingDatabase:
    def session(self):
        raise RuntimeError("pool exhausted in driver")


def test_non_database_failure_raises_datastore_error():
    with pytest.raises(DatastoreError) as info:
        record_upload(FailingDatabase(), "backend-a", b"abc")
    assert info.value.details == "pool exhausted in driver"
