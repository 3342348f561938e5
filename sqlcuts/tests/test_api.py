import os

from sqlcuts.services.update_svc import DIRECTORY_MISMATCH


def test_health_and_version(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json().get("status") == "ok"

    v = client.get("/version")
    assert v.status_code == 200
    assert v.json().get("app") == "sqlcuts"


def test_query_returns_formatted_rows(client, db_path):
    payload = {
        "database": db_path,
        "query": "SELECT a, b, c FROM t",
        "column_separator": ",",
        "null_value": "NULL",
        "quote_strings": False,
    }
    res = client.post("/api/query", json=payload)
    assert res.status_code == 200
    assert res.json() == {"rows": ["1,hi,NULL"]}


def test_query_missing_value_is_422(client, db_path):
    res = client.post("/api/query", json={"database": db_path, "query": "SELECT 1"})
    assert res.status_code == 422
    assert res.json()["detail"] == {"needs_value": "column_separator"}


def test_query_engine_error_is_400(client, db_path):
    payload = {
        "database": db_path,
        "query": "SELECT * FROM nothere",
        "column_separator": ",",
        "null_value": "",
        "quote_strings": True,
    }
    res = client.post("/api/query", json=payload)
    assert res.status_code == 400
    assert res.json()["detail"] == "no such table: nothere"


def test_update_roundtrip(client, db_path, read_db):
    payload = {
        "database": db_path,
        "directory": os.path.dirname(db_path),
        "statement": "UPDATE t SET b = 'bye'",
    }
    res = client.post("/api/update", json=payload)
    assert res.status_code == 200
    assert res.json().get("message") == "ok"
    assert read_db(db_path, "SELECT b FROM t") == [("bye",)]


def test_update_directory_mismatch(client, db_path, tmp_path, read_db):
    payload = {"database": db_path, "directory": str(tmp_path), "statement": "DELETE FROM t"}
    res = client.post("/api/update", json=payload)
    assert res.status_code == 400
    assert res.json()["detail"] == DIRECTORY_MISMATCH
    assert read_db(db_path, "SELECT COUNT(*) FROM t") == [(1,)]


def test_update_missing_statement(client, db_path):
    payload = {"database": db_path, "directory": os.path.dirname(db_path), "statement": ""}
    res = client.post("/api/update", json=payload)
    assert res.status_code == 422
    assert res.json()["detail"] == {"needs_value": "statement"}


def test_bad_config_is_500(client, db_path, tmp_path, monkeypatch):
    monkeypatch.setenv("SQLCUTS_JOURNAL_MODE", "WAL")
    res = client.post("/api/query", json={"database": db_path})
    assert res.status_code == 500
