from io import BytesIO

from openpyxl import load_workbook

from utils.excel import format_rupiah

BASE = {
    "nama_project": "Overhaul Boiler",
    "nomor_project": "PRJ-2025-001",
    "kepala_project": "Ir. Hasan",
    "tanggal": "2025-01-10",
    "apd_nama": "Respirator",
    "jumlah": 3,
    "harga": 150000,
}


def test_total_is_computed_by_database(client, auth_headers):
    resp = client.post("/pengajuan", json={**BASE, "total": 1}, headers=auth_headers)
    assert resp.status_code == 201
    body = resp.json()
    assert body["total"] == 450000
    assert body["progres"] == "Draft"
    assert body["unit"] == "pcs"


def test_total_follows_updates_in_any_order(client, auth_headers):
    created = client.post("/pengajuan", json=BASE, headers=auth_headers).json()

    resp = client.patch(f"/pengajuan/{created['id']}", json={"harga": 2500.5}, headers=auth_headers)
    assert resp.json()["total"] == 3 * 2500.5

    resp = client.patch(f"/pengajuan/{created['id']}", json={"jumlah": 4, "total": 0}, headers=auth_headers)
    assert resp.json()["total"] == 4 * 2500.5

    resp = client.patch(f"/pengajuan/{created['id']}", json={"harga": 10, "jumlah": 7}, headers=auth_headers)
    assert resp.json()["total"] == 70


def test_filters_and_delete(client, auth_headers):
    client.post("/pengajuan", json=BASE, headers=auth_headers)
    other = client.post(
        "/pengajuan",
        json={**BASE, "nama_project": "Pembangunan Gudang", "progres": "Disetujui"},
        headers=auth_headers,
    ).json()

    found = client.get("/pengajuan", params={"nama_project": "gudang"}, headers=auth_headers).json()
    assert [p["id"] for p in found] == [other["id"]]
    found = client.get("/pengajuan", params={"progres": "draft"}, headers=auth_headers).json()
    assert len(found) == 1

    assert client.delete(f"/pengajuan/{other['id']}", headers=auth_headers).status_code == 204
    assert client.get(f"/pengajuan/{other['id']}", headers=auth_headers).status_code == 404


def test_negative_values_rejected(client, auth_headers):
    assert client.post("/pengajuan", json={**BASE, "jumlah": -1}, headers=auth_headers).status_code == 422
    assert client.post("/pengajuan", json={**BASE, "harga": -5}, headers=auth_headers).status_code == 422


def test_export_formats_money(client, auth_headers):
    client.post("/pengajuan", json={**BASE, "jumlah": 10, "keterangan": "Urgent"}, headers=auth_headers)

    resp = client.get("/pengajuan/export", headers=auth_headers)
    assert resp.status_code == 200
    ws = load_workbook(BytesIO(resp.content)).active
    assert [c.value for c in ws[1]] == [
        "NO", "NAMA PROJECT", "NOMOR PROJECT", "KEPALA PROJECT", "PROGRES", "TANGGAL",
        "NAMA APD", "JUMLAH", "UNIT", "HARGA", "TOTAL", "KETERANGAN",
    ]
    assert [c.value for c in ws[2]] == [
        1, "Overhaul Boiler", "PRJ-2025-001", "Ir. Hasan", "Draft", "10/01/2025",
        "Respirator", 10, "pcs", "Rp 150.000", "Rp 1.500.000", "Urgent",
    ]


def test_format_rupiah():
    assert format_rupiah(0) == "Rp 0"
    assert format_rupiah(1234567.4) == "Rp 1.234.567"
    assert format_rupiah(None) == "Rp 0"
