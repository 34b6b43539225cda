from io import BytesIO

import pytest
from openpyxl import load_workbook


@pytest.fixture()
def refs(client, auth_headers, bengkel):
    produksi = client.post("/divisi", json={"nama_divisi": "Produksi"}, headers=auth_headers).json()
    gudang = client.post("/divisi", json={"nama_divisi": "Gudang"}, headers=auth_headers).json()
    welder = client.post("/posisi", json={"nama_posisi": "Welder"}, headers=auth_headers).json()
    return {"produksi": produksi, "gudang": gudang, "welder": welder, "bengkel": bengkel}


def _create(client, headers, refs, nama, divisi="produksi", **extra):
    payload = {
        "nama": nama,
        "nip": f"NIP-{nama}",
        "divisi_id": refs[divisi]["id"],
        "posisi_id": refs["welder"]["id"],
        "bengkel_id": refs["bengkel"]["id"],
        **extra,
    }
    resp = client.post("/pegawai", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_create_resolves_reference_names(client, auth_headers, refs):
    p = _create(client, auth_headers, refs, "Agus", warna_helm="Putih")
    assert p["divisi_name"] == "Produksi"
    assert p["posisi_name"] == "Welder"
    assert p["bengkel_name"] == "Bengkel Mesin"


def test_create_requires_existing_references(client, auth_headers, refs):
    payload = {"nama": "X", "nip": "1", "divisi_id": 999, "posisi_id": refs["welder"]["id"]}
    assert client.post("/pegawai", json=payload, headers=auth_headers).status_code == 400
    payload = {"nama": "X", "nip": "1", "posisi_id": refs["welder"]["id"]}
    assert client.post("/pegawai", json=payload, headers=auth_headers).status_code == 422


def test_list_filters(client, auth_headers, refs):
    _create(client, auth_headers, refs, "Budi Santoso")
    _create(client, auth_headers, refs, "Agus", divisi="gudang")

    names = [p["nama"] for p in client.get("/pegawai", headers=auth_headers).json()]
    assert names == ["Agus", "Budi Santoso"]

    found = client.get("/pegawai", params={"nama": "SANTO"}, headers=auth_headers).json()
    assert [p["nama"] for p in found] == ["Budi Santoso"]
    found = client.get("/pegawai", params={"divisi_id": refs["gudang"]["id"]}, headers=auth_headers).json()
    assert [p["nama"] for p in found] == ["Agus"]


def test_update_and_delete(client, auth_headers, refs):
    p = _create(client, auth_headers, refs, "Agus")
    resp = client.patch(f"/pegawai/{p['id']}", json={"size_sepatu": 42, "jenis_sepatu": "Boot"}, headers=auth_headers)
    assert resp.json()["size_sepatu"] == 42
    assert client.patch(f"/pegawai/{p['id']}", json={"posisi_id": 999}, headers=auth_headers).status_code == 400

    assert client.delete(f"/pegawai/{p['id']}", headers=auth_headers).status_code == 204
    assert client.get(f"/pegawai/{p['id']}", headers=auth_headers).status_code == 404


def test_mandatory_apd_views(client, auth_headers, refs):
    _create(client, auth_headers, refs, "Helmi", warna_helm="Kuning")
    _create(client, auth_headers, refs, "Sepatu", size_sepatu=41)
    _create(client, auth_headers, refs, "Coverall", size_katelpack="L")
    _create(client, auth_headers, refs, "Kosong", warna_helm="")

    helm = client.get("/pegawai/helm", headers=auth_headers).json()
    assert [(r["no"], r["nama"]) for r in helm] == [(1, "Helmi")]
    shoes = client.get("/pegawai/shoes", headers=auth_headers).json()
    assert [r["nama"] for r in shoes] == ["Sepatu"]
    katelpack = client.get("/pegawai/katelpack", headers=auth_headers).json()
    assert [r["nama"] for r in katelpack] == ["Coverall"]


def test_export_grouped_by_divisi(client, auth_headers, refs):
    _create(client, auth_headers, refs, "Budi", size_sepatu=40, warna_helm="Putih")
    _create(client, auth_headers, refs, "Ani")
    _create(client, auth_headers, refs, "Cahya", divisi="gudang")

    resp = client.get("/pegawai/export", headers=auth_headers)
    assert resp.status_code == 200
    ws = load_workbook(BytesIO(resp.content)).active
    assert [c.value for c in ws[1]] == [
        "NO", "NAMA", "POSISI", "SIZE (Sepatu)", "JENIS SEPATU",
        "Warna katelpack", "SIZE (katelpack)", "WARNA HELM", "NIP",
    ]
    assert ws["A2"].value == "Gudang"
    assert (ws["A3"].value, ws["B3"].value) == (1, "Cahya")
    assert ws["A4"].value == "Produksi"
    assert (ws["A5"].value, ws["B5"].value) == (1, "Ani")
    assert [c.value for c in ws[6]] == [2, "Budi", "Welder", "40", "-", "-", "-", "Putih", "NIP-Budi"]


def test_view_export_layout(client, auth_headers, refs):
    _create(client, auth_headers, refs, "Helmi", warna_helm="Kuning")
    resp = client.get("/pegawai/helm/export", headers=auth_headers)
    ws = load_workbook(BytesIO(resp.content)).active
    assert [c.value for c in ws[1]] == ["NO", "NAMA", "NIP", "WARNA HELM", "DOKUMENTASI"]
    assert [c.value for c in ws[2]] == [1, "Helmi", "NIP-Helmi", "Kuning", "-"]

    assert client.get("/pegawai/sarung/export", headers=auth_headers).status_code == 404


def test_documentation_upload_replace_and_delete(client, auth_headers, refs, clean_bucket):
    p = _create(client, auth_headers, refs, "Helmi", warna_helm="Kuning")
    url = f"/pegawai/{p['id']}/dokumentasi/HELM"

    first = client.put(url, files={"file": ("foto.jpg", b"first-photo", "image/jpeg")}, headers=auth_headers)
    assert first.status_code == 200
    first_key = first.json()["link_helm"]
    assert first_key.startswith(f"helm-docs/pegawai-{p['id']}-")
    assert first_key.endswith(".jpg")

    second = client.put(url, files={"file": ("foto2.png", b"second-photo", "image/png")}, headers=auth_headers)
    second_key = second.json()["link_helm"]
    # Earlier photo of the same employee is replaced
    assert [f.name for f in (clean_bucket / "helm-docs").iterdir()] == [second_key.split("/")[1]]

    row = client.get("/pegawai/helm", headers=auth_headers).json()[0]
    assert row["link"] == second_key
    signed = client.get(row["signed_url"])
    assert signed.status_code == 200
    assert signed.content == b"second-photo"

    # A storage token is not a session token
    storage_token = row["signed_url"].rsplit("/", 1)[1]
    assert client.get("/auth/me", headers={"Authorization": f"Bearer {storage_token}"}).status_code == 401

    resp = client.delete(url, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["link_helm"] is None
    assert list((clean_bucket / "helm-docs").iterdir()) == []
    assert client.delete(url, headers=auth_headers).status_code == 404


def test_documentation_unknown_type(client, auth_headers, refs):
    p = _create(client, auth_headers, refs, "Helmi")
    resp = client.put(
        f"/pegawai/{p['id']}/dokumentasi/SARUNG",
        files={"file": ("foto.jpg", b"x", "image/jpeg")},
        headers=auth_headers,
    )
    assert resp.status_code == 404


def test_signed_url_rejects_tampered_token(client):
    assert client.get("/storage/signed/not-a-token").status_code == 404
