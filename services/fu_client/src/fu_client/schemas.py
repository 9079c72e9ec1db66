import datetime as dt
from pydantic import BaseModel


class RemoteFile(BaseModel):
    id: int
    name: str
    created_at: dt.datetime
    expires_at: dt.datetime
