def _add(client, headers, country, entry, exit, **params):
    return client.post(
        "/stays/",
        json={"country": country, "entry_date": entry, "exit_date": exit},
        params=params,
        headers=headers,
    )


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_stays_require_a_token(client):
    assert client.get("/stays/").status_code == 401
    assert client.get("/stays/", headers={"Authorization": "Bearer nope"}).status_code == 401


def test_register_login_and_me(client, auth_headers):
    r = client.post("/auth/login", json={"email": "Traveler@example.com", "password": "passw0rd!"})
    assert r.status_code == 200
    assert r.json()["user"]["email"] == "traveler@example.com"
    assert client.get("/auth/me", headers=auth_headers).json()["full_name"] == "Test Traveler"
    assert client.post("/auth/login", json={"email": "traveler@example.com", "password": "wrong-pass"}).status_code == 401


def test_duplicate_registration_is_rejected(client, auth_headers):
    r = client.post("/auth/register", json={"email": "traveler@example.com", "password": "another-pass"})
    assert r.status_code == 400


def test_create_and_list_stays(client, auth_headers):
    r = _add(client, auth_headers, " fr ", "2024-03-01", "2024-03-10")
    assert r.status_code == 201
    body = r.json()
    assert body["country"] == "FR"
    assert body["duration_days"] == 10
    assert body["is_schengen"] is True

    _add(client, auth_headers, "GB", "2024-01-01", "2024-01-05")
    listed = client.get("/stays/", headers=auth_headers).json()
    assert [s["country"] for s in listed] == ["GB", "FR"]
    assert [s["country"] for s in client.get("/stays/", params={"country": "fr"}, headers=auth_headers).json()] == ["FR"]


def test_reversed_dates_are_rejected(client, auth_headers):
    assert _add(client, auth_headers, "FR", "2024-03-10", "2024-03-01").status_code == 422
    assert _add(client, auth_headers, "FR", "2024-02-30", "2024-03-01").status_code == 422


def test_overstaying_create_needs_force(client, auth_headers):
    for entry, exit in (("2024-01-01", "2024-01-30"), ("2024-03-01", "2024-03-30"), ("2024-05-01", "2024-05-30")):
        assert _add(client, auth_headers, "FR", entry, exit).status_code == 201

    r = _add(client, auth_headers, "FR", "2024-06-01", "2024-06-01")
    assert r.status_code == 409
    assert len(client.get("/stays/", headers=auth_headers).json()) == 3

    assert _add(client, auth_headers, "FR", "2024-06-01", "2024-06-01", force="true").status_code == 201
    assert client.get("/compliance/FR/overstays", headers=auth_headers).json()["days"] == ["2024-06-01"]


def test_member_country_create_counts_the_whole_zone(client, auth_headers):
    assert _add(client, auth_headers, "DE", "2024-01-01", "2024-03-20").status_code == 201
    assert _add(client, auth_headers, "FR", "2024-04-01", "2024-04-20").status_code == 409
    assert len(client.get("/stays/", headers=auth_headers).json()) == 1
    assert _add(client, auth_headers, "FR", "2024-04-01", "2024-04-20", force="true").status_code == 201


def test_overlong_country_is_rejected(client, auth_headers):
    assert _add(client, auth_headers, "United Kingdom", "2024-01-01", "2024-01-05").status_code == 422


def test_compliance_summary(client, auth_headers):
    _add(client, auth_headers, "FR", "2024-01-01", "2024-03-30")
    _add(client, auth_headers, "US", "2024-04-01", "2024-04-10")

    fr = client.get("/compliance/fr", params={"as_of": "2024-03-30"}, headers=auth_headers).json()
    assert fr["selector"] == "FR"
    assert fr["days_used"] == 90
    assert fr["days_remaining"] == 0
    assert fr["within_limit"] is False
    assert fr["has_overstay"] is False
    assert fr["next_entry"] == {"status": "found", "date": "2024-06-29"}

    zone = client.get("/compliance/__schengen__", params={"as_of": "2024-04-10"}, headers=auth_headers).json()
    assert zone["selector"] == "__schengen__"
    assert zone["days_used"] == 90


def test_candidate_check_does_not_store_anything(client, auth_headers):
    _add(client, auth_headers, "DE", "2024-01-01", "2024-03-20")
    ok = client.post(
        "/compliance/__schengen__/check",
        json={"entry_date": "2024-04-01", "exit_date": "2024-04-10"},
        headers=auth_headers,
    ).json()
    bad = client.post(
        "/compliance/__schengen__/check",
        json={"entry_date": "2024-04-01", "exit_date": "2024-04-11"},
        headers=auth_headers,
    ).json()
    assert (ok["would_overstay"], ok["duration_days"]) == (False, 10)
    assert bad["would_overstay"] is True
    assert len(client.get("/stays/", headers=auth_headers).json()) == 1


def test_update_and_delete_stay(client, auth_headers):
    stay_id = _add(client, auth_headers, "FR", "2024-01-01", "2024-01-10").json()["id"]

    r = client.put(f"/stays/{stay_id}", json={"exit_date": "2024-01-20"}, headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["duration_days"] == 20

    r = client.put(f"/stays/{stay_id}", json={"entry_date": "2024-02-01"}, headers=auth_headers)
    assert r.status_code == 422

    assert client.delete(f"/stays/{stay_id}", headers=auth_headers).status_code == 204
    assert client.get(f"/stays/{stay_id}", headers=auth_headers).status_code == 404


def test_overstaying_update_needs_force(client, auth_headers):
    _add(client, auth_headers, "FR", "2024-01-01", "2024-03-20")
    stay_id = _add(client, auth_headers, "FR", "2024-04-01", "2024-04-05").json()["id"]

    url = f"/stays/{stay_id}"
    assert client.put(url, json={"exit_date": "2024-04-11"}, headers=auth_headers).status_code == 409
    assert client.get(url, headers=auth_headers).json()["exit_date"] == "2024-04-05"
    assert client.put(url, json={"exit_date": "2024-04-10"}, headers=auth_headers).status_code == 200

    r = client.put(url, json={"exit_date": "2024-04-11"}, params={"force": "true"}, headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["duration_days"] == 11


def test_other_users_cannot_see_my_stays(client, auth_headers):
    stay_id = _add(client, auth_headers, "FR", "2024-01-01", "2024-01-10").json()["id"]
    other = client.post("/auth/register", json={"email": "other@example.com", "password": "passw0rd!"}).json()
    other_headers = {"Authorization": f"Bearer {other['access_token']}"}
    assert client.get(f"/stays/{stay_id}", headers=other_headers).status_code == 404
    assert client.get("/stays/", headers=other_headers).json() == []


def test_csv_import_reports_bad_rows(client, auth_headers):
    csv_text = "country,entryDate,exitDate\nfr,2024-01-01,2024-01-10\nDE,2024-02-10,2024-02-01\n"
    r = client.post(
        "/stays/import",
        files={"file": ("stays.csv", csv_text.encode("utf-8"), "text/csv")},
        headers=auth_headers,
    )
    assert r.status_code == 200
    body = r.json()
    assert [s["country"] for s in body["created"]] == ["FR"]
    assert body["errors"] == ["Row 3: exitDate must be on or after entryDate"]


def test_csv_import_skips_overlong_country(client, auth_headers):
    csv_text = "United Kingdom,2024-01-01,2024-01-05\nGB,2024-01-01,2024-01-05\n"
    r = client.post(
        "/stays/import",
        files={"file": ("stays.csv", csv_text.encode("utf-8"), "text/csv")},
        headers=auth_headers,
    )
    body = r.json()
    assert [s["country"] for s in body["created"]] == ["GB"]
    assert body["errors"] == ["Row 1: country must be at most 8 characters"]


def test_csv_import_rejects_non_utf8(client, auth_headers):
    r = client.post(
        "/stays/import",
        files={"file": ("stays.csv", b"\xff\xfe\x00bad", "text/csv")},
        headers=auth_headers,
    )
    assert r.status_code == 400


def test_csv_export(client, auth_headers):
    _add(client, auth_headers, "IT", "2024-02-01", "2024-02-03")
    _add(client, auth_headers, "FR", "2024-01-01", "2024-01-10")
    r = client.get("/stays/export", headers=auth_headers)
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/csv")
    assert "stays-90-180-" in r.headers["content-disposition"]
    assert r.text == "country,entryDate,exitDate\nFR,2024-01-01,2024-01-10\nIT,2024-02-01,2024-02-03"


def test_dashboard(client, auth_headers):
    _add(client, auth_headers, "FR", "2024-01-25", "2024-02-05")
    _add(client, auth_headers, "GB", "2024-03-01", "2024-03-03")
    r = client.get("/dashboard/", params={"start": "2024-01-15", "end": "2024-03-10"}, headers=auth_headers)
    assert r.status_code == 200
    body = r.json()
    assert [c["selector"] for c in body["countries"]] == ["FR", "GB"]
    assert body["schengen"]["days_used"] == 12
    assert body["days_per_country"] == [
        {"country": "FR", "days": 12, "is_schengen": True},
        {"country": "GB", "days": 3, "is_schengen": False},
    ]
    assert [m["days"] for m in body["monthly_timeline"]] == [7, 5, 3]


def test_dashboard_without_zone_stays(client, auth_headers):
    _add(client, auth_headers, "GB", "2024-03-01", "2024-03-03")
    body = client.get("/dashboard/", params={"end": "2024-03-10"}, headers=auth_headers).json()
    assert body["schengen"] is None
    assert body["start"] == "2023-09-13"


def test_dashboard_default_range_is_180_days(client, auth_headers):
    _add(client, auth_headers, "FR", "2024-01-01", "2024-01-05")
    body = client.get("/dashboard/", params={"end": "2024-06-28"}, headers=auth_headers).json()
    assert body["start"] == "2024-01-01"


def test_zones(client):
    zone = client.get("/zones/schengen").json()
    assert zone["selector"] == "__schengen__"
    assert "FR" in zone["countries"] and len(zone["countries"]) == 29
    assert client.get("/zones/benelux").status_code == 404
