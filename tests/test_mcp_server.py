import json

import httpx
import pytest

from schema_diagram import mcp_server


def test_tools_call_backend(monkeypatch):
    calls = []

    def fake_api_request(method, endpoint, json_body=None):
        calls.append((method, endpoint, json_body))
        return {"success": True}

    monkeypatch.setattr(mcp_server, "api_request", fake_api_request)

    assert json.loads(mcp_server.schema_select_table("users")) == {"success": True}
    mcp_server.schema_zoom_in()
    mcp_server.schema_reset_view()
    mcp_server.schema_load_db("/tmp/shop.db")

    assert calls == [
        ("POST", "/selection", {"table": "users"}),
        ("POST", "/viewport/zoom-in", None),
        ("POST", "/viewport/reset", None),
        ("POST", "/schema/sqlite", {"path": "/tmp/shop.db", "relationships": []}),
    ]


def test_api_error_is_raised(monkeypatch):
    def fake_request(self, method, url, **kwargs):
        return httpx.Response(404, json={"detail": "Database file not found"},
                              request=httpx.Request(method, url))

    monkeypatch.setattr(httpx.Client, "request", fake_request)
    with pytest.raises(mcp_server.ApiError, match="Database file not found"):
        mcp_server.api_request("POST", "/schema/sqlite", {"path": "x"})
