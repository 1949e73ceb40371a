import base64
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import load_only

from ..models.uploadRecord import UploadRecord
from ..utils.logging import logger

RECENT_LIMIT = 5


class DatastoreError(Exception):
    """Insert or read-back against the requests table failed."""

    def __init__(self, details):
        super().__init__(details)
        self.details = details


def describe_failure(exc):
    # DBAPI errors wrap the raw driver exception; its text is what callers see
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        message = str(exc.orig).strip()
    else:
        message = str(exc).strip()
    return message or exc.__class__.__name__


@dataclass
class UploadResult:
    backend: str
    rows: list = field(default_factory=list)
    image: Optional[bytes] = None

    @property
    def uploaded_image_b64(self):
        if self.image is None:
            return None
        return base64.b64encode(self.image).decode("ascii")

    def to_dict(self):
        return {
            "backend": self.backend,
            "rows": self.rows,
            "uploadedImage": self.uploaded_image_b64,
        }


def read_upload(file_storage):
    """Raw bytes of an uploaded file part, or None when nothing was attached."""
    if file_storage is None or not file_storage.filename:
        return None
    return file_storage.read()


def insert_upload(db, backend_name, image):
    record = UploadRecord(
        backend_name=backend_name,
        meta={"uploaded": image is not None},
        image=image,
    )
    with db.session() as session:
        session.add(record)
        session.commit()
    return record.id


def recent_uploads(db, limit=RECENT_LIMIT):
    """Newest rows from every backend, without the image bytes."""
    stmt = (
        select(UploadRecord)
        .options(load_only(UploadRecord.id, UploadRecord.backend_name,
                           UploadRecord.ts, UploadRecord.meta))
        .order_by(UploadRecord.ts.desc(), UploadRecord.id.desc())
        .limit(limit)
    )
    with db.session() as session:
        return [r.to_dict() for r in session.scalars(stmt).all()]


def record_upload(db, backend_name, image):
    """Store one upload then read back the most recent rows.

    The insert and the select run in separate transactions, so a failure in
    the select can follow a committed insert. Raises DatastoreError either way.
    """
    try:
        record_id = insert_upload(db, backend_name, image)
        logger.info(f"{backend_name} stored request {record_id} (uploaded={image is not None})")
        rows = recent_uploads(db)
    except Exception as e:
        raise DatastoreError(describe_failure(e)) from e
    return UploadResult(backend=backend_name, rows=rows, image=image)
