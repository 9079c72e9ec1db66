import datetime as dt
from pydantic import BaseModel, field_serializer

from .models import StoredObject


class FileOut(BaseModel):
    id: int
    name: str
    created_at: dt.datetime
    expires_at: dt.datetime

    @field_serializer("created_at", "expires_at")
    def _utc(self, value: dt.datetime) -> str:
        if value.tzinfo is None:
            value = value.replace(tzinfo=dt.timezone.utc)
        return value.isoformat().replace("+00:00", "Z")

    @classmethod
    def from_record(cls, record: StoredObject) -> "FileOut":
        return cls(
            id=record.id,
            name=record.name,
            created_at=record.created_at,
            expires_at=record.expires_at,
        )
