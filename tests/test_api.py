"""
HTTP API tests — calculator, presets, history, CSV download.

Tests:
1-2.  /calculate valid and invalid
3-4.  Working state defaults, unit switch, input update
5-7.  Presets list / add / apply / delete
8-11. History save, invalid save, search, delete, clear
12.   CSV download
13.   Load a saved roll back into the working inputs
14.   Health
15.   Theme and logo read back on their own routes
16-17. Values too large to round survive preset add and unit switch
18.   A roll saved before ids existed can be loaded by the id the list shows
"""

import pytest

from backend.history import HISTORY_KEY


def test_calculate_valid(client):
    resp = client.post("/api/calculate", json={"od": 6, "id": 3, "thickness": 0.003, "unit": "in"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["valid"] is True
    assert data["length_ft"] == pytest.approx(589.0486, abs=1e-3)


def test_calculate_invalid_is_not_an_error(client):
    resp = client.post("/api/calculate", json={"od": 3, "id": 3, "thickness": 0.003, "unit": "mm"})
    assert resp.status_code == 200
    assert resp.json() == {"valid": False, "message": "Check that OD > ID and thickness > 0"}


def test_state_defaults_and_unit_switch(client):
    data = client.get("/api/state").json()
    assert data["unit"] == "in"
    assert data["theme"] == "auto"
    assert data["inputs"]["id"] == 3.346
    assert data["result"]["valid"] is True

    data = client.post("/api/state/unit", json={"unit": "mm"}).json()
    assert data["unit"] == "mm"
    assert data["inputs"]["od"] == 152.4
    assert client.get("/api/state").json()["unit"] == "mm"


def test_update_inputs(client):
    data = client.put("/api/state/inputs", json={"od": 2}).json()
    assert data["inputs"]["od"] == 2
    assert data["result"]["valid"] is False
    assert client.get("/api/state/result").json()["valid"] is False


def test_preferences(client):
    assert client.put("/api/state/theme", json={"theme": "light"}).json()["theme"] == "light"
    data = client.put("/api/state/logo", json={"logo_url": "data:image/png;base64,AAAA"}).json()
    assert data["logo_url"] == "data:image/png;base64,AAAA"
    assert client.put("/api/state/theme", json={"theme": "sepia"}).status_code == 422


def test_presets_list_and_apply(client):
    presets = client.get("/api/presets/").json()
    assert [p["name"] for p in presets][:2] == ["Calendared 3 mil", "Cast 2 mil"]
    assert presets[1]["display"] == "0.002 in"

    client.post("/api/state/unit", json={"unit": "mm"})
    resp = client.post("/api/presets/1/apply")
    assert resp.status_code == 200
    assert resp.json() == {"thickness": 0.051, "unit": "mm"}
    assert client.get("/api/state").json()["inputs"]["thickness"] == 0.051


def test_presets_add_and_delete(client):
    presets = client.post("/api/presets/", json={"name": "", "value": 0.08}).json()
    assert presets[0]["name"] == "0.08 in"
    assert len(presets) == 5

    # ignored, list unchanged
    presets = client.post("/api/presets/", json={"name": "zero", "value": 0}).json()
    assert len(presets) == 5

    assert len(client.delete("/api/presets/0").json()) == 4
    assert client.delete("/api/presets/99").status_code == 404
    assert client.post("/api/presets/99/apply").status_code == 404

    client.delete("/api/presets/0")
    assert len(client.post("/api/presets/reset").json()) == 4


def test_history_save_and_search(client):
    resp = client.post("/api/history/", json={"name": "Working roll"})
    assert resp.status_code == 200
    assert resp.json()["od"] == 6.0

    resp = client.post("/api/history/", json={
        "name": "Metric", "inputs": {"od": 300, "id": 76.2, "thickness": 0.08, "unit": "mm"},
    })
    assert resp.json()["unit"] == "mm"

    data = client.get("/api/history/").json()
    assert data["count"] == 2
    assert [r["name"] for r in data["rolls"]] == ["Metric", "Working roll"]

    data = client.get("/api/history/", params={"q": "76.2"}).json()
    assert [r["name"] for r in data["rolls"]] == ["Metric"]
    assert data["query"] == "76.2"


def test_history_invalid_save(client):
    resp = client.post("/api/history/", json={"inputs": {"od": 1, "id": 3, "thickness": 0.003, "unit": "in"}})
    assert resp.status_code == 422
    assert resp.json()["detail"] == "Check that OD > ID and thickness > 0"
    assert client.get("/api/history/").json()["count"] == 0


def test_history_delete_and_clear(client):
    first = client.post("/api/history/", json={"name": "one"}).json()
    second = client.post("/api/history/", json={"name": "two"}).json()

    assert client.delete(f"/api/history/by-id/{second['entry_id']}").json()["name"] == "two"
    assert client.delete("/api/history/by-id/nope").status_code == 404

    assert client.delete(f"/api/history/{first['saved_at']}").json()["name"] == "one"
    assert client.delete(f"/api/history/{first['saved_at']}").status_code == 404

    client.post("/api/history/", json={"name": "three"})
    assert client.delete("/api/history/").json()["count"] == 0
    assert client.get("/api/history/").json()["count"] == 0


def test_csv_download(client):
    client.post("/api/history/", json={"name": 'Quoted "roll", with comma'})
    resp = client.get("/api/history/export.csv")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    assert 'filename="vinyl_rolls_' in resp.headers["content-disposition"]
    lines = resp.text.split("\n")
    assert lines[0].startswith('"Saved At","Name"')
    assert '"Quoted ""roll"", with comma"' in lines[1]


def test_load_saved_roll(client):
    roll = client.post("/api/history/", json={"name": "inch"}).json()
    client.post("/api/state/unit", json={"unit": "mm"})

    resp = client.post(f"/api/history/{roll['entry_id']}/load")
    assert resp.status_code == 200
    assert resp.json()["unit"] == "in"
    assert client.get("/api/state").json()["unit"] == "in"
    assert client.post("/api/history/missing/load").status_code == 404


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"


def test_theme_and_logo_routes(client):
    assert client.get("/api/state/theme").json() == {"theme": "auto"}
    assert client.get("/api/state/logo").json() == {"logo_url": None}

    client.put("/api/state/theme", json={"theme": "dark"})
    client.put("/api/state/logo", json={"logo_url": "https://example.com/logo.png"})
    assert client.get("/api/state/theme").json() == {"theme": "dark"}
    assert client.get("/api/state/logo").json() == {"logo_url": "https://example.com/logo.png"}


def test_huge_preset_value(client):
    resp = client.post("/api/presets/", json={"name": "big", "value": 1e306})
    assert resp.status_code == 200
    assert resp.json()[0]["name"] == "big"

    resp = client.get("/api/presets/")
    assert resp.status_code == 200
    assert resp.json()[0]["thickness_in"] == 1e306


def test_huge_input_survives_unit_switch(client):
    assert client.put("/api/state/inputs", json={"od": 1e306}).status_code == 200

    resp = client.post("/api/state/unit", json={"unit": "mm"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["inputs"]["od"] == pytest.approx(2.54e307)
    assert data["result"]["valid"] is False


def test_legacy_roll_loads_by_listed_id(client, store):
    store.save(HISTORY_KEY, [{
        "name": "Old", "unit": "in", "od": 6, "id": 3, "thickness": 0.003,
        "saved_at": 1, "length_in": 7068.58, "length_ft": 589.05,
        "length_m": 179.54, "length_yd": 196.35,
    }])
    entry_id = client.get("/api/history/").json()["rolls"][0]["entry_id"]

    resp = client.post(f"/api/history/{entry_id}/load")
    assert resp.status_code == 200
    assert resp.json()["od"] == 6.0
