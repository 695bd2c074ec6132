#!/usr/bin/env python3
"""Schema diagram CLI - render offline or drive a running backend."""

import argparse
import json
import os
import sys
from pathlib import Path

import httpx

from .core.introspection import load_sqlite_schema
from .core.layout import auto_place
from .core.models import Relationship, Schema
from .core.renderer import render_scene
from .core.svg import scene_to_svg
from .core.validation import validate_schema, validation_summary
from .core.viewport import ViewportState, set_zoom

API_BASE = os.environ.get("SCHEMA_DIAGRAM_API", "http://127.0.0.1:8765/api")


def _json_out(data, code=0):
    print(json.dumps(data))
    sys.exit(code)


def _error(message):
    _json_out({"status": "error", "error": message}, code=1)


def _api_request(method, endpoint, data=None):
    """Make a request to the schema diagram backend."""
    url = f"{API_BASE}{endpoint}"
    try:
        with httpx.Client(timeout=30.0) as client:
            response = client.request(method, url, json=data)
    except httpx.HTTPError as e:
        _error(f"Connection failed: {e}. Is the schema-diagram backend running?")

    if response.status_code >= 400:
        try:
            detail = response.json().get("detail", "Unknown error")
        except ValueError:
            detail = response.text
        _error(f"API error ({response.status_code}): {detail}")
    return response.json()


def _read_json(path):
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except FileNotFoundError:
        _error(f"File not found: {path}")
    except json.JSONDecodeError as e:
        _error(f"Invalid JSON in {path}: {e}")


def _load_relationships(path):
    if not path:
        return []
    data = _read_json(path)
    if isinstance(data, dict):
        data = data.get("relationships", [])
    return [Relationship.model_validate(r) for r in data]


def _load_schema(args) -> Schema:
    """Schema from --db (introspected) or --schema (JSON file)."""
    relationships = _load_relationships(getattr(args, "relationships", None))
    if args.db:
        try:
            return load_sqlite_schema(args.db, relationships)
        except FileNotFoundError as e:
            _error(str(e))
    if args.schema:
        schema = Schema.from_json_dict(_read_json(args.schema))
        if relationships:
            schema = schema.model_copy(update={"relationships": schema.relationships + relationships})
        return auto_place(schema)
    _error("Provide --db or --schema")


# ── Offline ──────────────────────────────────────────────────────────────────

def cmd_render(args):
    schema = _load_schema(args)
    viewport = set_zoom(ViewportState(), args.zoom)
    scene = render_scene(schema, viewport, args.selected)

    if args.format == "json":
        output = json.dumps(scene.to_dict(), indent=2)
    else:
        output = scene_to_svg(scene, legend=not args.no_legend)

    if args.out:
        Path(args.out).write_text(output, encoding="utf-8")
        _json_out({"status": "ok", "file_path": args.out,
                   "tables": len(scene.tables), "connectors": len(scene.connectors)})
    print(output)


def cmd_validate(args):
    schema = _load_schema(args)
    issues = validate_schema(schema)
    _json_out({
        "success": True,
        "issues": [issue.to_dict() for issue in issues],
        "summary": validation_summary(issues)
    })


# ── Service ──────────────────────────────────────────────────────────────────

def cmd_serve(args):
    import uvicorn
    from .backend.main import app, configure_logging

    configure_logging(args.log_level)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


# ── Backend ──────────────────────────────────────────────────────────────────

def cmd_state(args):
    _json_out(_api_request("GET", "/state"))


def cmd_load(args):
    data = _read_json(args.schema)
    data["auto_place"] = not args.no_auto_place
    if args.selected:
        data["selected_table"] = args.selected
    _json_out(_api_request("POST", "/schema", data=data))


def cmd_load_db(args):
    relationships = [r.model_dump() for r in _load_relationships(args.relationships)]
    _json_out(_api_request("POST", "/schema/sqlite", data={
        "path": str(Path(args.path).resolve()),
        "relationships": relationships
    }))


def cmd_scene(args):
    _json_out(_api_request("GET", "/scene"))


def cmd_zoom_in(args):
    _json_out(_api_request("POST", "/viewport/zoom-in"))


def cmd_zoom_out(args):
    _json_out(_api_request("POST", "/viewport/zoom-out"))


def cmd_reset(args):
    _json_out(_api_request("POST", "/viewport/reset"))


def cmd_select(args):
    _json_out(_api_request("POST", "/selection", data={"table": args.table}))


# ── Main ─────────────────────────────────────────────────────────────────────

def build_parser():
    parser = argparse.ArgumentParser(prog="schema-diagram", description="Schema diagram CLI")
    sub = parser.add_subparsers(dest="command", required=True)

    # Offline
    p = sub.add_parser("render")
    p.add_argument("--db", default=None)
    p.add_argument("--schema", default=None)
    p.add_argument("--relationships", default=None)
    p.add_argument("--selected", default=None)
    p.add_argument("--zoom", type=float, default=1.0)
    p.add_argument("--format", choices=["svg", "json"], default="svg")
    p.add_argument("--no-legend", action="store_true")
    p.add_argument("--out", default=None)

    p = sub.add_parser("validate")
    p.add_argument("--db", default=None)
    p.add_argument("--schema", default=None)
    p.add_argument("--relationships", default=None)

    # Service
    p = sub.add_parser("serve")
    p.add_argument("--host", default=os.environ.get("SCHEMA_DIAGRAM_HOST", "127.0.0.1"))
    p.add_argument("--port", type=int, default=int(os.environ.get("SCHEMA_DIAGRAM_PORT", "8765")))
    p.add_argument("--log-level", default=os.environ.get("SCHEMA_DIAGRAM_LOG_LEVEL", "INFO"))

    # Backend
    sub.add_parser("state")

    p = sub.add_parser("load")
    p.add_argument("--schema", required=True)
    p.add_argument("--selected", default=None)
    p.add_argument("--no-auto-place", action="store_true")

    p = sub.add_parser("load-db")
    p.add_argument("--path", required=True)
    p.add_argument("--relationships", default=None)

    sub.add_parser("scene")
    sub.add_parser("zoom-in")
    sub.add_parser("zoom-out")
    sub.add_parser("reset")

    p = sub.add_parser("select")
    p.add_argument("--table", required=True)

    return parser


COMMANDS = {
    "render": cmd_render,
    "validate": cmd_validate,
    "serve": cmd_serve,
    "state": cmd_state,
    "load": cmd_load,
    "load-db": cmd_load_db,
    "scene": cmd_scene,
    "zoom-in": cmd_zoom_in,
    "zoom-out": cmd_zoom_out,
    "reset": cmd_reset,
    "select": cmd_select,
}


def main(argv=None):
    args = build_parser().parse_args(argv)
    COMMANDS[args.command](args)


if __name__ == "__main__":
    main()
