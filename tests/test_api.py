"""HTTP API tests through FastAPI's TestClient."""

import io
import os

import pandas as pd
import pytest

CSV_BODY = (
    "region,sales,segment\n"
    "North,\"1,200.50\",Retail\n"
    "South,R$800,Online\n"
    "East,450,Retail\n"
)


@pytest.fixture
def csv_session(client):
    resp = client.post("/upload/dataset", files={"file": ("sales.csv", CSV_BODY.encode("utf-8"), "text/csv")})
    assert resp.status_code == 200
    return resp.json()


def test_root(client):
    resp = client.get("/")

    assert resp.status_code == 200
    assert "running" in resp.json()["message"]


def test_upload_csv_creates_single_sheet_session(csv_session):
    assert csv_session["file_name"] == "sales.csv"
    assert csv_session["sheets"][0]["sheet_name"] == "sales"
    assert len(csv_session["sheets"]) == 1
    assert csv_session["sheets"][0]["n_rows"] == 3
    assert csv_session["sheets"][0]["n_cols"] == 3


def test_upload_excel_workbook(client):
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        pd.DataFrame({"region": ["North", "South"], "sales": [10, 20]}).to_excel(writer, sheet_name="Q1", index=False)
        pd.DataFrame({"region": ["East"], "sales": [5]}).to_excel(writer, sheet_name="Q2", index=False)

    resp = client.post("/upload/dataset", files={"file": ("report.xlsx", buffer.getvalue())})

    assert resp.status_code == 200
    assert [s["sheet_name"] for s in resp.json()["sheets"]] == ["Q1", "Q2"]


def test_upload_rejects_other_extensions(client):
    resp = client.post("/upload/dataset", files={"file": ("notes.txt", b"hello")})

    assert resp.status_code == 400


def test_preview_returns_raw_cells(client, csv_session):
    sheet = csv_session["sheets"][0]["sheet_name"]

    resp = client.post("/data/preview", json={"session_id": csv_session["session_id"], "sheet_name": sheet, "n_rows": 2})

    body = resp.json()
    assert body["columns"] == ["region", "sales", "segment"]
    assert body["rows"][0] == {"region": "North", "sales": "1,200.50", "segment": "Retail"}
    assert len(body["rows"]) == 2


def test_column_profile_marks_currency_text_as_numeric(client, csv_session):
    sheet = csv_session["sheets"][0]["sheet_name"]

    resp = client.post("/data/columns", json={"session_id": csv_session["session_id"], "sheet_name": sheet})

    body = resp.json()
    assert "sales" in body["numeric_columns"]
    assert "region" in body["category_columns"]


def test_render_bar_chart(client, csv_session):
    sheet = csv_session["sheets"][0]["sheet_name"]
    req = {
        "session_id": csv_session["session_id"],
        "sheet_name": sheet,
        "descriptor": {"title": "Sales", "kind": "BAR", "categoryColumn": "region", "valueColumns": ["sales"]},
    }

    resp = client.post("/charts/render", json=req)

    assert resp.status_code == 200
    body = resp.json()
    assert body["result"]["status"] == "ok"
    assert body["result"]["kind"] == "BAR"
    assert [row["sales"] for row in body["result"]["processed_rows"]] == [1200.5, 800.0, 450.0]
    assert body["image_base64"]


def test_render_returns_diagnostic_as_result(client, csv_session):
    sheet = csv_session["sheets"][0]["sheet_name"]
    req = {
        "session_id": csv_session["session_id"],
        "sheet_name": sheet,
        "descriptor": {"kind": "BAR", "categoryColumn": "region", "valueColumns": ["revenue"]},
    }

    resp = client.post("/charts/render", json=req)

    assert resp.status_code == 200
    result = resp.json()["result"]
    assert result["status"] == "diagnostic"
    assert result["kind"] == "MissingColumns"
    assert result["missing_columns"] == ["revenue"]
    assert resp.json()["image_base64"] is None


def test_dashboard_renders_each_descriptor(client, csv_session):
    sheet = csv_session["sheets"][0]["sheet_name"]
    req = {
        "session_id": csv_session["session_id"],
        "sheet_name": sheet,
        "include_image": False,
        "descriptors": [
            {"kind": "PIE", "categoryColumn": "region", "valueColumns": ["sales"]},
            {"kind": "SCATTER3D", "categoryColumn": "region", "valueColumns": ["sales"]},
            {"kind": "DONUT", "groupColumn": "segment", "singleValueColumn": "sales"},
        ],
    }

    resp = client.post("/charts/dashboard", json=req)

    statuses = [item["result"]["status"] for item in resp.json()]
    assert statuses == ["ok", "diagnostic", "ok"]
    assert resp.json()[1]["result"]["kind"] == "UnsupportedKind"


def test_evaluate_inline_rows(client):
    req = {
        "rows": [{"region": f"R{i}", "sales": i} for i in range(12)],
        "descriptor": {"kind": "HORIZONTAL_BAR", "categoryColumn": "region", "valueColumns": ["sales"]},
    }

    resp = client.post("/charts/evaluate", json=req)

    result = resp.json()["result"]
    assert result["is_truncated"] is True
    assert len(result["processed_rows"]) == 10
    assert result["processed_rows"][0]["region"] == "R11"


def test_unknown_session_is_404(client):
    req = {"session_id": "missing", "sheet_name": "x", "descriptor": {}}

    assert client.post("/charts/render", json=req).status_code == 404
    assert client.post("/data/preview", json={"session_id": "missing", "sheet_name": "x"}).status_code == 404


def test_unknown_sheet_is_404(client, csv_session):
    req = {"session_id": csv_session["session_id"], "sheet_name": "nope", "descriptor": {}}

    assert client.post("/charts/render", json=req).status_code == 404


def test_evaluate_survives_integers_beyond_float_range(client):
    req = {
        "rows": [{"region": "North", "sales": int("9" * 400)}, {"region": "South", "sales": 5}],
        "descriptor": {"kind": "BAR", "categoryColumn": "region", "valueColumns": ["sales"]},
    }

    resp = client.post("/charts/evaluate", json=req)

    assert resp.status_code == 200
    result = resp.json()["result"]
    assert result["status"] == "ok"
    assert [row["sales"] for row in result["processed_rows"]] == [0.0, 5.0]


@pytest.mark.parametrize(
    "name, body",
    [
        ("empty.csv", b""),
        ("broken.xlsx", b"not a workbook"),
    ],
)
def test_unreadable_upload_is_400_and_not_kept(client, name, body):
    from config import UPLOAD_DIR

    stored_before = set(os.listdir(UPLOAD_DIR))

    resp = client.post("/upload/dataset", files={"file": (name, body)})

    assert resp.status_code == 400
    assert name in resp.json()["detail"]
    assert set(os.listdir(UPLOAD_DIR)) == stored_before


def test_close_dataset_drops_session_and_file(client, csv_session):
    from config import UPLOAD_DIR

    session_id = csv_session["session_id"]
    stored_before = len(os.listdir(UPLOAD_DIR))

    resp = client.delete(f"/upload/dataset/{session_id}")

    assert resp.status_code == 200
    assert resp.json()["closed"] is True
    assert len(os.listdir(UPLOAD_DIR)) == stored_before - 1
    req = {"session_id": session_id, "sheet_name": "sales"}
    assert client.post("/data/preview", json=req).status_code == 404
    assert client.delete(f"/upload/dataset/{session_id}").status_code == 404
