import datetime as dt
from sqlalchemy import String, DateTime, Integer
from sqlalchemy.orm import Mapped, mapped_column
from .db import Base


class StoredObject(Base):
    __tablename__ = "files"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime, nullable=False)
    expires_at: Mapped[dt.datetime] = mapped_column(DateTime, nullable=False, index=True)

    def is_expired(self, now: dt.datetime) -> bool:
        return self.expires_at < now

    def __repr__(self) -> str:
        return f"StoredObject(id={self.id!r}, name={self.name!r}, expires_at={self.expires_at!r})"
