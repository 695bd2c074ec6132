#!/usr/bin/env python3
"""
Schema Diagram MCP Server

Provides MCP tools for AI agents to inspect and drive the schema diagram.
All changes are immediately reflected in connected canvases via WebSocket
updates from the backend.
"""

import json
import os
from typing import Optional

import httpx
from mcp.server.fastmcp import FastMCP

API_BASE = os.environ.get("SCHEMA_DIAGRAM_API", "http://127.0.0.1:8765/api")

mcp = FastMCP("schema-diagram")


class ApiError(Exception):
    """The backend answered with an error status."""


# --- HTTP Client Helper ---

def api_request(method: str, endpoint: str, json_body: Optional[dict] = None) -> dict:
    """Make a request to the schema diagram backend."""
    url = f"{API_BASE}{endpoint}"
    with httpx.Client(timeout=30.0) as client:
        response = client.request(method, url, json=json_body)

    if response.status_code >= 400:
        error = response.json().get("detail", "Unknown error")
        raise ApiError(f"API error: {error}")

    return response.json()


# ============================================================================
# INSPECTION
# ============================================================================

@mcp.tool()
def schema_get_state() -> str:
    """
    Get the mounted schema, viewport (zoom, offset) and selected table.

    Use this to see which tables and relationships are loaded before
    selecting or navigating.
    """
    return json.dumps(api_request("GET", "/state"), indent=2)


@mcp.tool()
def schema_get_scene() -> str:
    """
    Get the drawable scene: canvas size, table cards with their rows,
    and connector segments (start point, length, angle).
    """
    return json.dumps(api_request("GET", "/scene"), indent=2)


@mcp.tool()
def schema_validate() -> str:
    """
    Check the mounted schema for duplicate tables, unplaced tables and
    relationships that reference unknown tables or columns.
    """
    return json.dumps(api_request("GET", "/schema/validate"), indent=2)


# ============================================================================
# LOADING
# ============================================================================

@mcp.tool()
def schema_load_db(path: str, relationships: Optional[list[dict]] = None) -> str:
    """
    Introspect a SQLite database file and show its tables on a grid.

    Args:
        path: Path to the database file
        relationships: Foreign keys to draw, each with fromTable,
            fromColumn, toTable and toColumn (not discovered automatically)
    """
    result = api_request("POST", "/schema/sqlite", json_body={
        "path": path,
        "relationships": relationships or []
    })
    return json.dumps(result, indent=2)


# ============================================================================
# NAVIGATION / SELECTION
# ============================================================================

@mcp.tool()
def schema_select_table(table: str) -> str:
    """
    Activate a table as if its card were clicked.

    The table is highlighted and the editor query is set to select its rows.
    """
    result = api_request("POST", "/selection", json_body={"table": table})
    return json.dumps(result, indent=2)


@mcp.tool()
def schema_zoom_in() -> str:
    """Zoom in one step (max 200%)."""
    return json.dumps(api_request("POST", "/viewport/zoom-in"), indent=2)


@mcp.tool()
def schema_zoom_out() -> str:
    """Zoom out one step (min 50%)."""
    return json.dumps(api_request("POST", "/viewport/zoom-out"), indent=2)


@mcp.tool()
def schema_reset_view() -> str:
    """Reset zoom to 100% and pan offset to the origin."""
    return json.dumps(api_request("POST", "/viewport/reset"), indent=2)


def main():
    mcp.run()


if __name__ == "__main__":
    main()
