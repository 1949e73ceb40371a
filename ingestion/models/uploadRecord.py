from sqlalchemy import Column, Integer, Text, DateTime, JSON, LargeBinary, Index
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from .database import Base


class UploadRecord(Base):
    __tablename__ = "requests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    backend_name = Column(Text, nullable=False)
    ts = Column(DateTime, server_default=func.now())
    meta = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=True)
    image = Column(LargeBinary, nullable=True)

    __table_args__ = (
        Index("idx_backend_name", "backend_name"),
        Index("idx_ts", ts.desc()),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "backend_name": self.backend_name,
            "ts": self.ts.isoformat() if self.ts else None,
            "meta": self.meta,
        }
