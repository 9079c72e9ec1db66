import datetime as dt
import logging
import os
import secrets
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, File, Form, Header, HTTPException, Request, UploadFile
from fastapi.responses import FileResponse

from .config import Settings, settings as default_settings
from .durations import parse_duration
from .errors import BlobReadError, DuplicateName, StorageError
from .logging_config import setup_logging
from .schemas import FileOut
from .store import ObjectStore

logger = logging.getLogger(__name__)

DEFAULT_LIFETIME = dt.timedelta(hours=1)
TOKEN_PREFIX = "fu token="


def parse_lifetime(raw: str | None) -> dt.timedelta:
    """Form ``duration`` value; anything unusable means one hour."""
    try:
        lifetime = parse_duration((raw or "").strip())
    except (ValueError, OverflowError):
        return DEFAULT_LIFETIME
    if lifetime <= dt.timedelta(0):
        return DEFAULT_LIFETIME
    return lifetime


def file_extension(filename: str | None) -> str:
    """Everything from the last dot of the base name, ``.bashrc`` included."""
    base = os.path.basename((filename or "").replace("\\", "/"))
    dot = base.rfind(".")
    return base[dot:] if dot >= 0 else ""


def check_token(expected: str, header: str | None) -> bool:
    token = header or ""
    if token.startswith(TOKEN_PREFIX):
        token = token[len(TOKEN_PREFIX):]
    return secrets.compare_digest(expected.encode(), token.encode())


def create_app(settings: Settings | None = None, store: ObjectStore | None = None) -> FastAPI:
    settings = settings or default_settings
    store = store or ObjectStore.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store.open()
        try:
            store.start_sweeper(settings.sweep_interval)
            yield
        finally:
            store.close()

    app = FastAPI(title="fu", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.post("/", response_model=FileOut)
    def upload(
        request: Request,
        file: UploadFile | None = File(None),
        duration: str | None = Form(None),
        authentication: str | None = Header(None),
    ):
        if not check_token(settings.token, authentication):
            raise HTTPException(status_code=403, detail="Forbidden")
        if file is None:
            raise HTTPException(status_code=400, detail="Missing file")

        file.file.seek(0, 2)
        size = file.file.tell()
        file.file.seek(0)
        if size > settings.max_upload_size:
            raise HTTPException(status_code=413, detail="File too large")

        ext = file_extension(file.filename)
        try:
            record = store.put(file.file, parse_lifetime(duration), ext)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except DuplicateName as e:
            logger.error("Upload failed: %s", e)
            raise HTTPException(status_code=503, detail="Name space busy, retry")
        except StorageError as e:
            logger.error("Upload failed: %s", e)
            raise HTTPException(status_code=500, detail="Internal Server Error")
        finally:
            file.file.close()

        logger.info("Upload from %s stored as %s (%d bytes)",
                    request.client.host if request.client else "-", record.name, size)
        return FileOut.from_record(record)

    @app.get("/")
    def index():
        raise HTTPException(status_code=404, detail="Not Found")

    @app.get("/{name}")
    def download(name: str):
        if name in (".", "..") or "/" in name or "\\" in name:
            raise HTTPException(status_code=404, detail="Not Found")
        try:
            record = store.get(name)
        except StorageError as e:
            logger.error("Lookup of %s failed: %s", name, e)
            raise HTTPException(status_code=500, detail="Internal Server Error")
        if record is None:
            raise HTTPException(status_code=404, detail="Not Found")
        try:
            path = store.open_blob(record)
        except BlobReadError as e:
            logger.error("%s", e)
            raise HTTPException(status_code=410, detail="File metadata exists but file is missing on disk")
        return FileResponse(path=str(path))

    return app


def serve(settings: Settings) -> None:
    """Validate ``settings`` and run the HTTP server until interrupted."""
    setup_logging(settings.log_level)
    host, port = settings.host_port()
    if not settings.token:
        logger.warning("fu: running insecurely without token")
    uvicorn.run(create_app(settings), host=host, port=port, log_config=None)
