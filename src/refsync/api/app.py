"""FastAPI application exposing reference block edits to editors."""

import secrets
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Query, Security
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from .. import __version__
from ..core.errors import ConfigError, NoteNotFoundError
from ..core.positions import EOL_STYLES
from ..janitor import compute_edit, sync_note
from ..runtime import Runtime


class EditRequest(BaseModel):
    text: str
    eol: str | None = None  # "lf" | "crlf"; detected from text when omitted
    force: bool = False


def generate_token() -> str:
    """Generate a random bearer token."""
    return secrets.token_urlsafe(32)


def create_app(runtime: Runtime, token: str | None = None, enable_cors: bool = False) -> FastAPI:
    """
    Create FastAPI application with runtime injected.

    Args:
        runtime: Runtime with vault and index; the index is rebuilt on startup
        token: Bearer token for authentication (None to disable auth)
        enable_cors: Enable CORS middleware
    """
    app = FastAPI(
        title="refsync API",
        description="Link reference definition edits for notes in a vault",
        version=__version__,
        docs_url="/docs" if token is None else None,
        redoc_url="/redoc" if token is None else None,
    )

    if enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    if token:
        security_scheme = HTTPBearer(auto_error=False)

        async def verify_token(
            credentials: HTTPAuthorizationCredentials | None = Security(security_scheme),  # noqa: B008
        ) -> None:
            if credentials is None or credentials.credentials != token:
                raise HTTPException(status_code=401, detail="Invalid or missing token")
    else:

        async def verify_token() -> None:
            return None

    runtime.index.rebuild()

    def _edit_or_error(note_id: str, **kwargs: Any) -> dict[str, Any] | None:
        try:
            edit = compute_edit(runtime, note_id, **kwargs)
        except NoteNotFoundError:
            raise HTTPException(status_code=404, detail=f"Note {note_id} not found")
        except ConfigError as e:
            raise HTTPException(status_code=422, detail=str(e))
        return edit.to_dict() if edit else None

    @app.get("/health")
    async def health(auth: None = Depends(verify_token)) -> dict[str, Any]:
        return {"status": "ok", "version": __version__}

    @app.get("/notes/{note_id}/link-references")
    async def get_edit(
        note_id: str,
        force: bool = Query(False, description="Rewrite an up-to-date block"),
        auth: None = Depends(verify_token),
    ) -> dict[str, Any] | None:
        """Edit for the stored note, or null when it is up to date."""
        return _edit_or_error(note_id, force=force)

    @app.post("/notes/{note_id}/link-references")
    async def post_edit(
        note_id: str, request: EditRequest, auth: None = Depends(verify_token)
    ) -> dict[str, Any] | None:
        """Edit for a buffer supplied by the caller."""
        if request.eol is not None and request.eol not in EOL_STYLES:
            raise HTTPException(status_code=422, detail="eol must be lf or crlf")
        eol = EOL_STYLES.get(request.eol) if request.eol else None
        return _edit_or_error(note_id, text=request.text, eol=eol, force=request.force)

    @app.post("/notes/{note_id}/link-references/sync")
    async def sync(
        note_id: str,
        force: bool = Query(False),
        dry_run: bool = Query(False),
        auth: None = Depends(verify_token),
    ) -> dict[str, Any]:
        """Apply the edit to the stored note."""
        try:
            result = sync_note(runtime, note_id, force=force, dry_run=dry_run)
        except NoteNotFoundError:
            raise HTTPException(status_code=404, detail=f"Note {note_id} not found")
        return {
            "id": result.note_id,
            "changed": result.changed,
            "written": result.written,
            "edit": result.edit.to_dict() if result.edit else None,
        }

    @app.post("/reindex")
    async def reindex(auth: None = Depends(verify_token)) -> dict[str, Any]:
        runtime.index.rebuild()
        return {"status": "ok"}

    return app
