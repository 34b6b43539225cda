from io import BytesIO

from openpyxl import load_workbook


def _issue(client, headers, apd_id, bengkel_id, tanggal, qty, nama="Budi"):
    resp = client.post("/distribusi", json={
        "apd_id": apd_id, "tanggal": tanggal, "nama": nama, "bengkel_id": bengkel_id, "qty": qty,
    }, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_periode_is_derived_from_tanggal(client, auth_headers, apd_item, bengkel):
    row = _issue(client, auth_headers, apd_item["id"], bengkel["id"], "2025-01-15", 5)
    assert row["periode"] == "2025-01-01"
    assert row["apd_name"] == "Sarung Tangan"
    assert row["bengkel_name"] == "Bengkel Mesin"


def test_invalid_issuance_rejected(client, auth_headers, apd_item, bengkel):
    base = {"apd_id": apd_item["id"], "tanggal": "2025-01-15", "nama": "Budi", "bengkel_id": bengkel["id"]}
    assert client.post("/distribusi", json={**base, "qty": 0}, headers=auth_headers).status_code == 422
    assert client.post("/distribusi", json={**base, "qty": 1, "apd_id": 999}, headers=auth_headers).status_code == 400
    assert client.post("/distribusi", json={**base, "qty": 1, "bengkel_id": 999}, headers=auth_headers).status_code == 400


def test_list_filters_and_periods(client, auth_headers, apd_item, bengkel):
    _issue(client, auth_headers, apd_item["id"], bengkel["id"], "2025-01-05", 1)
    _issue(client, auth_headers, apd_item["id"], bengkel["id"], "2025-01-20", 2)
    _issue(client, auth_headers, apd_item["id"], bengkel["id"], "2025-02-03", 3)

    january = client.get("/distribusi", params={"periode": "2025-01"}, headers=auth_headers).json()
    assert [r["tanggal"] for r in january] == ["2025-01-20", "2025-01-05"]

    periods = client.get("/distribusi/periods", headers=auth_headers).json()
    assert periods == [
        {"periode": "2025-02-01", "label": "Februari 2025"},
        {"periode": "2025-01-01", "label": "Januari 2025"},
    ]

    assert client.get("/distribusi", params={"periode": "xx"}, headers=auth_headers).status_code == 400


def test_delete_issuance(client, auth_headers, apd_item, bengkel):
    row = _issue(client, auth_headers, apd_item["id"], bengkel["id"], "2025-01-05", 1)
    assert client.delete(f"/distribusi/{row['id']}", headers=auth_headers).status_code == 204
    assert client.get("/distribusi", headers=auth_headers).json() == []
    assert client.delete(f"/distribusi/{row['id']}", headers=auth_headers).status_code == 404


def test_pengeluaran_report_and_export(client, auth_headers, apd_item, bengkel):
    _issue(client, auth_headers, apd_item["id"], bengkel["id"], "2025-01-20", 2, nama="Siti")
    _issue(client, auth_headers, apd_item["id"], bengkel["id"], "2025-01-05", 1, nama="Andi")

    rows = client.get("/distribusi/pengeluaran", params={"periode": "2025-01-01"}, headers=auth_headers).json()
    assert [r["nama"] for r in rows] == ["Andi", "Siti"]
    assert rows[0]["satuan"] == "Pasang"

    resp = client.get(
        "/distribusi/pengeluaran/export",
        params={"periode": "2025-01-01", "apd_id": apd_item["id"]},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    ws = load_workbook(BytesIO(resp.content)).active
    assert ws["A1"].value == "Laporan Pengeluaran Alat Pelindung Diri (APD)"
    assert "Sarung Tangan" in ws["A2"].value
    assert "Januari 2025" in ws["D2"].value
    assert [c.value for c in ws[4]] == ["NO", "NAMA", "Tanggal", "Bengkel/Biro/Jabatan", "Qty", "TANDA TANGAN"]
    assert [c.value for c in ws[5]][:5] == [1, "Andi", "5-1-2025", "Bengkel Mesin", 1]

    values = [c.value for row in ws.iter_rows() for c in row if c.value]
    assert "Mengetahui" in values
    assert values.count("Inspektor Safety") == 2
    assert "Ka. Biro K3LH" in values
