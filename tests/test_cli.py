import json

import httpx
import pytest

from schema_diagram import cli


def _run(argv, capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(argv)
    return exc.value.code, json.loads(capsys.readouterr().out)


def test_render_db_to_svg_file(shop_db, tmp_path, capsys):
    out = tmp_path / "schema.svg"
    code, data = _run(["render", "--db", str(shop_db), "--out", str(out)], capsys)
    assert code == 0
    assert data == {"status": "ok", "file_path": str(out), "tables": 3, "connectors": 0}
    assert 'data-table="order items"' in out.read_text(encoding="utf-8")


def test_render_json_with_relationships(shop_db, tmp_path, capsys):
    rels = tmp_path / "rels.json"
    rels.write_text(json.dumps([
        {"fromTable": "orders", "fromColumn": "customer_id", "toTable": "customers", "toColumn": "id"}
    ]))
    cli.main(["render", "--db", str(shop_db), "--relationships", str(rels),
              "--format", "json", "--zoom", "9", "--selected", "orders"])
    scene = json.loads(capsys.readouterr().out)
    assert scene["viewport"]["zoom"] == 2.0
    assert scene["selected_table"] == "orders"
    assert len(scene["connectors"]) == 1


def test_validate_schema_file(tmp_path, capsys):
    path = tmp_path / "schema.json"
    path.write_text(json.dumps({
        "tables": [{"name": "a", "columns": [{"name": "id", "type": "integer"}]}],
        "relationships": [{"fromTable": "a", "fromColumn": "id", "toTable": "b", "toColumn": "id"}],
    }))
    code, data = _run(["validate", "--schema", str(path)], capsys)
    assert code == 0
    assert data["summary"]["warnings"] == 1


def test_missing_input_is_an_error(capsys):
    code, data = _run(["validate"], capsys)
    assert code == 1
    assert data["status"] == "error"


def test_api_command_reports_connection_failure(monkeypatch, capsys):
    def refuse(self, method, url, **kwargs):
        raise httpx.ConnectError("refused")

    monkeypatch.setattr(httpx.Client, "request", refuse)
    code, data = _run(["zoom-in"], capsys)
    assert code == 1
    assert "Connection failed" in data["error"]


def test_api_command_posts_selection(monkeypatch, capsys):
    calls = []

    def fake_request(self, method, url, **kwargs):
        calls.append((method, url, kwargs.get("json")))
        return httpx.Response(200, json={"success": True}, request=httpx.Request(method, url))

    monkeypatch.setattr(httpx.Client, "request", fake_request)
    code, data = _run(["select", "--table", "users"], capsys)
    assert code == 0
    assert calls == [("POST", f"{cli.API_BASE}/selection", {"table": "users"})]
