from io import BytesIO

from openpyxl import load_workbook


def test_create_and_list_items_sorted_by_name(client, auth_headers):
    for name in ("Sepatu Safety", "Masker", "Helm"):
        resp = client.post("/apd/items", json={"name": name, "satuan": "Pcs"}, headers=auth_headers)
        assert resp.status_code == 201
        assert resp.json()["jumlah"] == 0

    names = [it["name"] for it in client.get("/apd/items", headers=auth_headers).json()]
    assert names == ["Helm", "Masker", "Sepatu Safety"]


def test_stock_opname_update_and_live_stock(client, auth_headers, apd_item):
    resp = client.patch(f"/apd/items/{apd_item['id']}", json={"jumlah": 75}, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["jumlah"] == 75
    assert resp.json()["name"] == "Sarung Tangan"

    stock = client.get(f"/apd/items/{apd_item['id']}/stock", headers=auth_headers).json()
    assert stock == {"apd_id": apd_item["id"], "stock_awal": 75}


def test_negative_stock_rejected(client, auth_headers, apd_item):
    resp = client.patch(f"/apd/items/{apd_item['id']}", json={"jumlah": -1}, headers=auth_headers)
    assert resp.status_code == 422


def test_missing_item_returns_404(client, auth_headers):
    assert client.get("/apd/items/999/stock", headers=auth_headers).status_code == 404
    assert client.patch("/apd/items/999", json={"jumlah": 1}, headers=auth_headers).status_code == 404


def test_delete_item_refused_while_referenced(client, auth_headers, apd_item, bengkel):
    client.post("/distribusi", json={
        "apd_id": apd_item["id"], "tanggal": "2025-01-10", "nama": "Budi",
        "bengkel_id": bengkel["id"], "qty": 2,
    }, headers=auth_headers)

    assert client.delete(f"/apd/items/{apd_item['id']}", headers=auth_headers).status_code == 409

    spare = client.post("/apd/items", json={"name": "Kacamata"}, headers=auth_headers).json()
    assert client.delete(f"/apd/items/{spare['id']}", headers=auth_headers).status_code == 204


def test_bengkel_duplicates_rejected(client, auth_headers, bengkel):
    resp = client.post("/apd/bengkel", json={"name": "bengkel mesin"}, headers=auth_headers)
    assert resp.status_code == 409
    assert len(client.get("/apd/bengkel", headers=auth_headers).json()) == 1


def test_divisi_and_posisi_reference_lists(client, auth_headers):
    assert client.post("/divisi", json={"nama_divisi": "Produksi"}, headers=auth_headers).status_code == 201
    assert client.post("/divisi", json={"nama_divisi": "Keuangan"}, headers=auth_headers).status_code == 201
    assert client.post("/divisi", json={"nama_divisi": "Produksi"}, headers=auth_headers).status_code == 409
    assert client.post("/posisi", json={"nama_posisi": "Welder"}, headers=auth_headers).status_code == 201

    divisi = [d["nama_divisi"] for d in client.get("/divisi", headers=auth_headers).json()]
    assert divisi == ["Keuangan", "Produksi"]
    assert client.get("/posisi", headers=auth_headers).json()[0]["nama_posisi"] == "Welder"


def test_stock_opname_export(client, auth_headers, apd_item):
    resp = client.get("/apd/items/export", headers=auth_headers)
    assert resp.status_code == 200
    assert "Stock_Opname_APD" in resp.headers["content-disposition"]

    ws = load_workbook(BytesIO(resp.content)).active
    assert [c.value for c in ws[1]] == ["NO", "NAMA APD", "STOCK AWAL", "SATUAN"]
    assert [c.value for c in ws[2]] == [1, "Sarung Tangan", 100, "Pasang"]
