"""FastAPI application for the hashnotes local JSON API."""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Literal

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from ..adapters.history_router import HistoryRouter
from ..adapters.scheduling import AsyncioScheduler
from ..core.model import Note
from ..runtime import Runtime, Session


class NotePatch(BaseModel):
    title: str | None = None
    content: str | None = None


class SelectionBody(BaseModel):
    id: str | None = None


class RouteBody(BaseModel):
    fragment: str


class ThemeBody(BaseModel):
    theme: Literal["light", "dark"]


def note_json(note: Note) -> dict[str, Any]:
    return note.to_record()


def create_app(runtime: Runtime, enable_cors: bool = False, initial_route: str = "#") -> FastAPI:
    """
    Create FastAPI application with runtime injected.

    One Session lives for the lifetime of the app. Endpoints are async so
    every store mutation and debounce timer runs on the event loop thread.

    Args:
        runtime: Runtime instance with storage and backend
        enable_cors: Enable CORS middleware
        initial_route: Fragment the router starts on (deep link)

    Returns:
        FastAPI application instance
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        session = Session(
            runtime,
            router=HistoryRouter(initial_route),
            scheduler=AsyncioScheduler(),
            flush_on_close=True,
        )
        with session:
            app.state.session = session
            yield

    app = FastAPI(
        title="Hashnotes API",
        description="Local JSON API for hashnotes",
        version="0.1.0",
        lifespan=lifespan,
    )

    if enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    def session_of(request: Request) -> Session:
        return request.app.state.session

    def require_note(session: Session, note_id: str) -> Note:
        note = session.store.get(note_id)
        if note is None:
            raise HTTPException(status_code=404, detail=f"Note {note_id} not found")
        return note

    def route_state(session: Session) -> dict[str, Any]:
        router = session.router
        return {
            "fragment": router.read(),
            "selected": session.store.selected_id,
            "can_go_back": router.can_go_back,
            "can_go_forward": router.can_go_forward,
        }

    @app.get("/health")
    async def health() -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "ok"}

    @app.get("/notes")
    async def list_notes(
        request: Request,
        q: str = Query("", description="Case-insensitive filter on title and content"),
    ) -> list[dict[str, Any]]:
        """List notes, newest first."""
        store = session_of(request).store
        return [note_json(n) for n in store.search(q)]

    @app.post("/notes", status_code=201)
    async def create_note(request: Request, patch: NotePatch | None = None) -> dict[str, Any]:
        """Create a note and select it."""
        store = session_of(request).store
        nid = store.add()
        if patch is not None and (patch.title is not None or patch.content is not None):
            store.update(nid, title=patch.title, content=patch.content)
        return note_json(store.get(nid))

    @app.get("/notes/{note_id}")
    async def get_note(request: Request, note_id: str) -> dict[str, Any]:
        """Get one note."""
        return note_json(require_note(session_of(request), note_id))

    @app.patch("/notes/{note_id}")
    async def update_note(request: Request, note_id: str, patch: NotePatch) -> dict[str, Any]:
        """Merge title and/or content into a note."""
        session = session_of(request)
        require_note(session, note_id)
        session.store.update(note_id, title=patch.title, content=patch.content)
        return note_json(session.store.get(note_id))

    @app.delete("/notes/{note_id}", status_code=204)
    async def delete_note(request: Request, note_id: str) -> None:
        """Delete a note."""
        session = session_of(request)
        require_note(session, note_id)
        session.store.delete(note_id)

    @app.get("/selection")
    async def get_selection(request: Request) -> dict[str, Any]:
        """Currently selected note, if any."""
        store = session_of(request).store
        note = store.selected_note
        return {"id": store.selected_id, "note": note_json(note) if note else None}

    @app.put("/selection")
    async def put_selection(request: Request, body: SelectionBody) -> dict[str, Any]:
        """Select a note (or clear the selection with null)."""
        session = session_of(request)
        if body.id is not None:
            require_note(session, body.id)
        session.store.select(body.id)
        return route_state(session)

    @app.get("/route")
    async def get_route(request: Request) -> dict[str, Any]:
        """Current fragment and history position."""
        return route_state(session_of(request))

    @app.post("/route")
    async def navigate(request: Request, body: RouteBody) -> dict[str, Any]:
        """Navigate to a fragment as if typed into the address bar."""
        session = session_of(request)
        session.router.navigate(body.fragment)
        return route_state(session)

    @app.post("/route/back")
    async def back(request: Request) -> dict[str, Any]:
        session = session_of(request)
        session.router.back()
        return route_state(session)

    @app.post("/route/forward")
    async def forward(request: Request) -> dict[str, Any]:
        session = session_of(request)
        session.router.forward()
        return route_state(session)

    @app.get("/theme")
    async def get_theme() -> dict[str, Any]:
        return {"theme": runtime.themes.load_theme()}

    @app.put("/theme")
    async def put_theme(body: ThemeBody) -> dict[str, Any]:
        runtime.themes.save_theme(body.theme)
        return {"theme": runtime.themes.load_theme()}

    return app
