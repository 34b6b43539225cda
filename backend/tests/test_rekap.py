from io import BytesIO

import pytest
from openpyxl import load_workbook

from models.apd import ApdMonthly
from utils.rekap import RekapError, generate_batch_rekap


def _issue(client, headers, apd_id, bengkel_id, tanggal, qty):
    resp = client.post("/distribusi", json={
        "apd_id": apd_id, "tanggal": tanggal, "nama": "Budi", "bengkel_id": bengkel_id, "qty": qty,
    }, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def _rekap(client, headers, periode="2025-01"):
    return client.get("/rekap", params={"periode": periode}, headers=headers).json()


@pytest.fixture()
def january(client, auth_headers, apd_item, bengkel):
    first = _issue(client, auth_headers, apd_item["id"], bengkel["id"], "2025-01-05", 5)
    second = _issue(client, auth_headers, apd_item["id"], bengkel["id"], "2025-01-28", 7)
    # Outside the month, never counted
    _issue(client, auth_headers, apd_item["id"], bengkel["id"], "2025-02-01", 40)
    return first, second


def test_generate_january_balance(client, auth_headers, apd_item, january):
    resp = client.post("/rekap/generate", json={"periode": "2025-01-15"}, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json() == {"periode": "2025-01-01", "total_items": 1, "created_count": 1, "updated_count": 0}

    rows = _rekap(client, auth_headers)
    assert len(rows) == 1
    row = rows[0]
    assert row["stock_awal"] == 100
    assert row["distribusi"] == 12
    assert row["realisasi"] == 0
    assert row["saldo_akhir"] == 88
    assert row["satuan"] == "Pasang"
    assert row["apd_name"] == "Sarung Tangan"


def test_generate_without_issuance_fails(client, auth_headers, apd_item):
    resp = client.post("/rekap/generate", json={"periode": "2025-03"}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json()["detail"].startswith("Tidak ada data harian untuk periode yang dipilih")
    assert client.get("/rekap", headers=auth_headers).json() == []


def test_invalid_periode_rejected(client, auth_headers):
    resp = client.post("/rekap/generate", json={"periode": "januari"}, headers=auth_headers)
    assert resp.status_code == 400


def test_regenerate_overwrites_and_keeps_realisasi(client, db_session, auth_headers, apd_item, bengkel, january):
    client.post("/rekap/generate", json={"periode": "2025-01"}, headers=auth_headers)
    row = _rekap(client, auth_headers)[0]

    patched = client.patch(f"/rekap/{row['id']}", json={"realisasi": 10}, headers=auth_headers).json()
    assert patched["saldo_akhir"] == 100 + 10 - 12

    _issue(client, auth_headers, apd_item["id"], bengkel["id"], "2025-01-30", 3)
    resp = client.post("/rekap/generate", json={"periode": "2025-01"}, headers=auth_headers)
    assert resp.json()["created_count"] == 0
    assert resp.json()["updated_count"] == 1

    assert db_session.query(ApdMonthly).count() == 1
    row = _rekap(client, auth_headers)[0]
    assert row["realisasi"] == 10
    assert row["distribusi"] == 15
    assert row["saldo_akhir"] == 95


def test_deleted_issuance_leaves_next_sum(client, auth_headers, january):
    first, second = january
    client.post("/rekap/generate", json={"periode": "2025-01"}, headers=auth_headers)

    assert client.delete(f"/distribusi/{second['id']}", headers=auth_headers).status_code == 204
    client.post("/rekap/generate", json={"periode": "2025-01"}, headers=auth_headers)

    row = _rekap(client, auth_headers)[0]
    assert row["distribusi"] == 5
    assert row["saldo_akhir"] == 95


def test_item_without_remaining_issuance_resets_to_zero(client, auth_headers, bengkel, january):
    helm = client.post("/apd/items", json={"name": "Helm", "jumlah": 10}, headers=auth_headers).json()
    helm_issue = _issue(client, auth_headers, helm["id"], bengkel["id"], "2025-01-09", 4)
    client.post("/rekap/generate", json={"periode": "2025-01"}, headers=auth_headers)

    assert client.delete(f"/distribusi/{helm_issue['id']}", headers=auth_headers).status_code == 204
    resp = client.post("/rekap/generate", json={"periode": "2025-01"}, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["total_items"] == 2
    assert resp.json()["created_count"] == 0
    assert resp.json()["updated_count"] == 2

    rows = {r["apd_name"]: r for r in _rekap(client, auth_headers)}
    assert len(rows) == 2
    assert rows["Helm"]["distribusi"] == 0
    assert rows["Helm"]["saldo_akhir"] == 10
    assert rows["Sarung Tangan"]["distribusi"] == 12


def test_regenerate_after_month_emptied(client, auth_headers, january):
    first, second = january
    client.post("/rekap/generate", json={"periode": "2025-01"}, headers=auth_headers)

    for issued in (first, second):
        assert client.delete(f"/distribusi/{issued['id']}", headers=auth_headers).status_code == 204
    resp = client.post("/rekap/generate", json={"periode": "2025-01"}, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["updated_count"] == 1

    row = _rekap(client, auth_headers)[0]
    assert row["distribusi"] == 0
    assert row["saldo_akhir"] == 100


def test_read_resyncs_opening_stock(client, auth_headers, apd_item, january):
    client.post("/rekap/generate", json={"periode": "2025-01"}, headers=auth_headers)
    client.patch(f"/apd/items/{apd_item['id']}", json={"jumlah": 50}, headers=auth_headers)

    row = _rekap(client, auth_headers)[0]
    assert row["stock_awal"] == 50
    assert row["saldo_akhir"] == 50 + 0 - 12


def test_patch_recomputes_balance(client, auth_headers, january):
    client.post("/rekap/generate", json={"periode": "2025-01"}, headers=auth_headers)
    row = _rekap(client, auth_headers)[0]

    resp = client.patch(f"/rekap/{row['id']}", json={"distribusi": 120}, headers=auth_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["saldo_akhir"] == body["stock_awal"] + body["realisasi"] - body["distribusi"]
    assert body["saldo_akhir"] == -20

    assert client.patch("/rekap/999", json={"realisasi": 1}, headers=auth_headers).status_code == 404


def test_saldo_invariant_over_every_row(client, auth_headers, bengkel, january):
    helm = client.post("/apd/items", json={"name": "Helm", "jumlah": 3}, headers=auth_headers).json()
    _issue(client, auth_headers, helm["id"], bengkel["id"], "2025-01-09", 8)
    client.post("/rekap/generate", json={"periode": "2025-01"}, headers=auth_headers)

    rows = _rekap(client, auth_headers)
    assert len(rows) == 2
    for row in rows:
        assert row["saldo_akhir"] == row["stock_awal"] + row["realisasi"] - row["distribusi"]


def test_periods_listing(client, auth_headers, january):
    client.post("/rekap/generate", json={"periode": "2025-01"}, headers=auth_headers)
    client.post("/rekap/generate", json={"periode": "2025-02"}, headers=auth_headers)

    periods = client.get("/rekap/periods", headers=auth_headers).json()
    assert [p["periode"] for p in periods] == ["2025-02-01", "2025-01-01"]
    assert periods[1]["label"] == "Januari 2025"


def test_service_raises_without_daily_rows(db_session):
    with pytest.raises(RekapError):
        generate_batch_rekap(db_session, "2030-01-01")


def test_balance_report_exports(client, auth_headers, january):
    client.post("/rekap/generate", json={"periode": "2025-01"}, headers=auth_headers)
    row = _rekap(client, auth_headers)[0]
    client.patch(f"/rekap/{row['id']}", json={"distribusi": 150}, headers=auth_headers)

    resp = client.get("/rekap/export", params={"periode": "2025-01"}, headers=auth_headers)
    assert resp.status_code == 200
    ws = load_workbook(BytesIO(resp.content)).active
    assert ws["A1"].value == "PERSONAL PROTECTION EQUIPMENT BALANCE REPORT"
    assert "Januari 2025" in ws["D2"].value
    assert [c.value for c in ws[3]] == ["No", "PPE", "Stock PPE", "Realisasi", "Distribusi", "Saldo Akhir", "Satuan"]
    assert [c.value for c in ws[4]] == [1, "Sarung Tangan", 100, 0, 150, -50, "Pasang"]
    assert ws["F4"].font.color.rgb.endswith("FF0000")

    pdf = client.get("/rekap/export.pdf", params={"periode": "2025-01"}, headers=auth_headers)
    assert pdf.status_code == 200
    assert pdf.headers["content-type"] == "application/pdf"
    assert pdf.content.startswith(b"%PDF")

    missing = client.get("/rekap/export", params={"periode": "2024-06"}, headers=auth_headers)
    assert missing.status_code == 404
