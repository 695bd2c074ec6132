"""
Schema Diagram Backend - FastAPI Application

It provides:
- REST API for mounting a schema and driving the viewport and selection
- Scene output as JSON (for the browser canvas) or SVG
- WebSocket endpoint for real-time updates
- CORS configuration for local frontend development
"""
import asyncio
import logging
import os
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI, WebSocket, WebSocketDisconnect, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel, Field, model_validator

from ..core.models import Relationship, Schema, Table
from ..core.validation import validation_summary
from .session import diagram_session
from .websocket_manager import ws_manager

logger = logging.getLogger(__name__)

HOST = os.environ.get("SCHEMA_DIAGRAM_HOST", "127.0.0.1")
PORT = int(os.environ.get("SCHEMA_DIAGRAM_PORT", "8765"))
LOG_LEVEL = os.environ.get("SCHEMA_DIAGRAM_LOG_LEVEL", "INFO")
CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get(
        "SCHEMA_DIAGRAM_CORS_ORIGINS",
        "http://localhost:5173,http://localhost:3000,http://127.0.0.1:5173"
    ).split(",")
    if origin.strip()
]


def configure_logging(level: str = LOG_LEVEL):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )


# --- Async change notification ---
# Bridge between sync DiagramSession callbacks and async WebSocket broadcasts

async def event_broadcaster(queue: asyncio.Queue):
    """Background task that forwards queued session events to clients."""
    while True:
        event = await queue.get()
        if event["type"] == "table_selected":
            await ws_manager.notify_table_selected(event["table"], event["editor_query"])
        else:
            await ws_manager.notify_scene_updated(event["selected_table"])


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan handler for startup/shutdown tasks."""
    queue: asyncio.Queue = asyncio.Queue()

    # Events carry the session state as of the change, not as of delivery
    def on_change():
        queue.put_nowait({
            "type": "scene_updated",
            "selected_table": diagram_session.selected_table,
        })

    def on_select(table: str):
        queue.put_nowait({
            "type": "table_selected",
            "table": table,
            "editor_query": diagram_session.editor_query,
        })

    diagram_session.on_change(on_change)
    diagram_session.on_select(on_select)
    broadcaster_task = asyncio.create_task(event_broadcaster(queue))

    yield

    diagram_session.remove_callbacks(on_change, on_select)
    broadcaster_task.cancel()
    try:
        await broadcaster_task
    except asyncio.CancelledError:
        pass


# --- FastAPI App ---

app = FastAPI(
    title="Schema Diagram API",
    description="Schema diagram layout, pan/zoom and table selection",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Request models ---

class MountSchemaRequest(BaseModel):
    tables: list[Table] = Field(default_factory=list)
    relationships: list[Relationship] = Field(default_factory=list)
    selected_table: Optional[str] = None
    auto_place: bool = True

    @model_validator(mode='before')
    @classmethod
    def convert_camel_fields(cls, data: Any) -> Any:
        if isinstance(data, dict) and "selectedTable" in data and "selected_table" not in data:
            data = dict(data)
            data["selected_table"] = data.pop("selectedTable")
        return data


class MountSqliteRequest(BaseModel):
    path: str
    relationships: list[Relationship] = Field(default_factory=list)


class PointerRequest(BaseModel):
    x: float
    y: float


class SelectTableRequest(BaseModel):
    table: str


class TableKeyRequest(BaseModel):
    table: str
    key: str


# --- Health Check ---

@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "connections": ws_manager.connection_count}


# --- State / Schema ---

@app.get("/api/state")
async def get_state():
    """Get the mounted schema, viewport and selection."""
    return diagram_session.get_state()


@app.post("/api/schema")
async def mount_schema(request: MountSchemaRequest):
    """Mount a schema supplied as JSON."""
    schema = diagram_session.mount(
        Schema(tables=request.tables, relationships=request.relationships),
        selected_table=request.selected_table,
        place=request.auto_place
    )
    return {"success": True, "schema": schema.to_json_dict()}


@app.post("/api/schema/sqlite")
async def mount_sqlite(request: MountSqliteRequest):
    """Introspect a SQLite database file and mount its schema."""
    try:
        schema = diagram_session.mount_sqlite(request.path, request.relationships)
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.warning("Failed to introspect %s: %s", request.path, e)
        raise HTTPException(status_code=400, detail=f"Failed to read database: {e}")
    return {"success": True, "schema": schema.to_json_dict()}


@app.get("/api/schema/validate")
async def validate_current_schema():
    """
    Validate the mounted schema.

    Returns the issues (errors, warnings, info) and a summary.
    """
    issues = diagram_session.validate()
    return {
        "success": True,
        "issues": [issue.to_dict() for issue in issues],
        "summary": validation_summary(issues)
    }


# --- Scene ---

@app.get("/api/scene")
async def get_scene():
    """Drawable scene for the current state."""
    return diagram_session.scene().to_dict()


@app.get("/api/scene.svg")
async def get_scene_svg(legend: bool = True):
    return Response(content=diagram_session.svg(legend=legend), media_type="image/svg+xml")


# --- Viewport ---

@app.post("/api/viewport/zoom-in")
async def zoom_in():
    return {"success": True, "viewport": diagram_session.zoom_in().to_dict()}


@app.post("/api/viewport/zoom-out")
async def zoom_out():
    return {"success": True, "viewport": diagram_session.zoom_out().to_dict()}


@app.post("/api/viewport/reset")
async def reset_view():
    return {"success": True, "viewport": diagram_session.reset_view().to_dict()}


@app.post("/api/viewport/pan/begin")
async def begin_pan(request: PointerRequest):
    diagram_session.begin_pan(request.x, request.y)
    return {"success": True, "viewport": diagram_session.viewport.to_dict()}


@app.post("/api/viewport/pan/move")
async def continue_pan(request: PointerRequest):
    diagram_session.continue_pan(request.x, request.y)
    return {"success": True, "viewport": diagram_session.viewport.to_dict()}


@app.post("/api/viewport/pan/end")
async def end_pan():
    diagram_session.end_pan()
    return {"success": True, "viewport": diagram_session.viewport.to_dict()}


# --- Selection ---

@app.post("/api/selection")
async def select_table(request: SelectTableRequest):
    """Activate a table, as a click on its card would."""
    editor_query = diagram_session.select_table(request.table)
    return {"success": True, "selected_table": request.table, "editor_query": editor_query}


@app.post("/api/selection/key")
async def key_table(request: TableKeyRequest):
    """Keyboard activation; only Enter and Space select."""
    handled = diagram_session.key_table(request.table, request.key)
    return {
        "success": True,
        "handled": handled,
        "selected_table": diagram_session.selected_table,
        "editor_query": diagram_session.editor_query
    }


# --- WebSocket ---

@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """
    WebSocket endpoint for real-time updates.

    Clients connect here to receive scene_updated / table_selected events.
    """
    await ws_manager.connect(websocket)

    try:
        while True:
            data = await websocket.receive_text()
            if data == "ping":
                await websocket.send_text('{"type": "pong"}')
    except WebSocketDisconnect:
        await ws_manager.disconnect(websocket)
    except Exception as e:
        logger.warning("WebSocket error: %s", e)
        await ws_manager.disconnect(websocket)


def run():
    """Start the API server with uvicorn."""
    import uvicorn

    configure_logging()
    uvicorn.run(app, host=HOST, port=PORT, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
