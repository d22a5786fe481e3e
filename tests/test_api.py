"""HTTP surface: projects, estimates, quote preview/generation and files."""
import io

import pytest
from docx import Document

from marinecrm.seed.seed_product_descriptions import seed_product_descriptions

OPP_100 = {
    "name": "Ferry 2",
    "project_type": "Anti-Heeling",
    "opportunity_number": "OPP-100",
    "currency": "USD",
    "price_per_vessel": 50000,
    "number_of_vessels": 2,
}


def create_project(client, **overrides):
    r = client.post("/projects/", json=dict(OPP_100, **overrides))
    assert r.status_code == 200, r.text
    return r.json()


def put_estimate(client, project_id, data, estimate_type="anti_heeling"):
    r = client.put(f"/projects/{project_id}/estimates/{estimate_type}", json={"data": data})
    assert r.status_code == 200, r.text
    return r.json()


class TestProjects:

    def test_crud(self, client):
        project = create_project(client)
        assert project["number_of_vessels"] == 2

        r = client.get(f"/projects/{project['id']}")
        assert r.status_code == 200
        assert r.json()["opportunity_number"] == "OPP-100"

        r = client.put(f"/projects/{project['id']}", json={"price_per_vessel": 60000})
        assert r.json()["price_per_vessel"] == 60000
        assert r.json()["name"] == "Ferry 2"

        assert len(client.get("/projects/").json()) == 1

        assert client.delete(f"/projects/{project['id']}").status_code == 200
        assert client.get(f"/projects/{project['id']}").status_code == 404

    def test_stage_change_is_logged(self, client):
        project = create_project(client)
        client.put(f"/projects/{project['id']}", json={"stage": "Quoted"})

        activities = client.get(f"/projects/{project['id']}/activities").json()
        assert activities[0]["type"] == "status_change"
        assert "Quoted" in activities[0]["content"]

    def test_missing_project(self, client):
        assert client.get("/projects/999").status_code == 404
        assert client.put("/projects/999", json={"name": "x"}).status_code == 404


class TestEstimates:

    def test_upsert_and_read(self, client):
        project = create_project(client)
        put_estimate(client, project["id"], {"pumpQuantity": 2})
        put_estimate(client, project["id"], {"pumpQuantity": 3})

        r = client.get(f"/projects/{project['id']}/estimates/anti_heeling")
        assert r.json()["data"] == {"pumpQuantity": 3}
        assert len(client.get(f"/projects/{project['id']}/estimates").json()) == 1

    def test_missing(self, client):
        project = create_project(client)
        assert client.get(f"/projects/{project['id']}/estimates/anti_heeling").status_code == 404
        assert client.put("/projects/999/estimates/anti_heeling", json={"data": {}}).status_code == 404


class TestQuotePreview:

    def test_preview_from_estimate(self, client):
        project = create_project(client)
        put_estimate(client, project["id"], {})

        r = client.post(f"/projects/{project['id']}/quote/preview", json={})
        assert r.status_code == 200, r.text
        body = r.json()
        assert body["total_price"] == 100000
        assert body["currency"] == "USD"
        kinds = [i["kind"] for i in body["items"]]
        assert kinds[0] == "pump"
        assert kinds[-2:] == ["tools", "startup"]
        assert "3-working days" in body["items"][-1]["description"]
        assert "1-man" in body["items"][-1]["description"]

    def test_preview_uses_seeded_templates(self, client, db):
        seed_product_descriptions(db)
        project = create_project(client)
        put_estimate(client, project["id"], {"starterType": "VFD"})

        items = client.post(f"/projects/{project['id']}/quote/preview", json={}).json()["items"]
        starter = next(i for i in items if i["kind"] == "starter")
        assert starter["description"].startswith("Variable Frequency Drive")

    def test_item_override_bypasses_builder(self, client):
        project = create_project(client)
        items = [{"kind": "custom", "qty": 1, "unit": "lot", "description": "Engineering"}]

        r = client.post(f"/projects/{project['id']}/quote/preview", json={"items": items})
        assert r.status_code == 200
        assert [i["kind"] for i in r.json()["items"]] == ["custom"]

    def test_override_items_must_have_quantity_and_description(self, client):
        project = create_project(client)
        for item in ({"kind": "custom", "qty": 0, "description": "Engineering"},
                     {"kind": "custom", "qty": 1, "description": "  "}):
            r = client.post(f"/projects/{project['id']}/quote/preview", json={"items": [item]})
            assert r.status_code == 422

    def test_missing_estimate_is_404(self, client):
        project = create_project(client)
        r = client.post(f"/projects/{project['id']}/quote/preview", json={})
        assert r.status_code == 404

    def test_missing_project_is_404(self, client):
        assert client.post("/projects/999/quote/preview", json={}).status_code == 404


class TestQuoteGenerate:

    def test_generate_docx_and_download(self, client):
        project = create_project(client)
        put_estimate(client, project["id"], {})

        r = client.post(f"/projects/{project['id']}/quote", json={})
        assert r.status_code == 200, r.text
        body = r.json()
        assert body["total_price"] == 100000
        assert body["line_items_synced"] is True
        assert body["file"]["name"].startswith("Quote_Anti-Heeling_Opp-OPP-100_Ferry_2_")
        assert body["file"]["name"].endswith(".docx")

        r = client.get(f"/files/{body['file']['id']}/download")
        assert r.status_code == 200
        assert body["file"]["name"] in r.headers["content-disposition"]
        assert Document(io.BytesIO(r.content)).tables

        files = client.get(f"/projects/{project['id']}/files").json()
        assert [f["id"] for f in files] == [body["file"]["id"]]

    def test_generate_txt(self, client):
        project = create_project(client)
        put_estimate(client, project["id"], {})

        r = client.post(f"/projects/{project['id']}/quote", json={"format": "txt", "options": {"notes": "Ex works"}})
        assert r.status_code == 200, r.text
        file = r.json()["file"]
        assert file["mime_type"] == "text/plain"

        content = client.get(f"/files/{file['id']}/download").content.decode("utf-8")
        assert "Total price: USD 100,000.00" in content
        assert "Ex works" in content

    def test_invalid_format_rejected(self, client):
        project = create_project(client)
        assert client.post(f"/projects/{project['id']}/quote", json={"format": "pdf"}).status_code == 422

    def test_zero_quantity_override_is_rejected(self, client):
        project = create_project(client)
        items = [{"kind": "custom", "qty": 0, "description": "Engineering"}]
        r = client.post(f"/projects/{project['id']}/quote", json={"format": "txt", "items": items})
        assert r.status_code == 422
        assert client.get(f"/projects/{project['id']}/line-items").json() == []
        assert client.get(f"/projects/{project['id']}/files").json() == []

    def test_regenerate_replaces_auto_line_items(self, client):
        project = create_project(client)
        put_estimate(client, project["id"], {})
        client.post(f"/projects/{project['id']}/line-items",
                    json={"kind": "freight", "qty": 1, "unit": "lot", "description": "Sea freight"})

        first = client.post(f"/projects/{project['id']}/quote", json={"format": "txt"}).json()
        client.post(f"/projects/{project['id']}/quote", json={"format": "txt"})

        rows = client.get(f"/projects/{project['id']}/line-items").json()
        manual = [r for r in rows if r["source"].startswith("MANUAL:")]
        auto = [r for r in rows if r["source"].startswith("AUTO:")]
        assert len(manual) == 1
        assert [r["kind"] for r in auto] == [i["kind"] for i in first["items"]]

    def test_no_sync_when_disabled(self, client):
        project = create_project(client)
        put_estimate(client, project["id"], {})

        r = client.post(f"/projects/{project['id']}/quote", json={"format": "txt", "sync_line_items": False})
        assert r.json()["line_items_synced"] is False
        assert client.get(f"/projects/{project['id']}/line-items").json() == []

    def test_generation_is_logged(self, client):
        project = create_project(client)
        put_estimate(client, project["id"], {})
        client.post(f"/projects/{project['id']}/quote", json={"format": "txt"})

        activities = client.get(f"/projects/{project['id']}/activities").json()
        assert activities[0]["content"].startswith("Quote generated: Quote_Anti-Heeling")

    def test_missing_project_and_file(self, client):
        assert client.post("/projects/999/quote", json={}).status_code == 404
        assert client.get("/files/999/download").status_code == 404
        assert client.delete("/files/999").status_code == 404


class TestLineItems:

    def test_manual_line_item_validation(self, client):
        project = create_project(client)
        r = client.post(f"/projects/{project['id']}/line-items", json={"kind": "x", "qty": 0, "description": "d"})
        assert r.status_code == 422

    def test_delete(self, client):
        project = create_project(client)
        item = client.post(f"/projects/{project['id']}/line-items",
                           json={"kind": "x", "qty": 1, "description": "d"}).json()
        assert item["source"] == "MANUAL:x"
        assert client.delete(f"/line-items/{item['id']}").status_code == 200
        assert client.delete(f"/line-items/{item['id']}").status_code == 404


class TestProductDescriptions:

    def test_crud(self, client):
        r = client.post("/product-descriptions/", json={"key": "k", "scope_template": "Pump {{model}}"})
        assert r.status_code == 200
        assert client.post("/product-descriptions/", json={"key": "k", "scope_template": "x"}).status_code == 400

        r = client.put("/product-descriptions/k", json={"scope_template": "Valve"})
        assert r.json()["scope_template"] == "Valve"
        assert client.delete("/product-descriptions/k").status_code == 200
        assert client.get("/product-descriptions/k").status_code == 404


class TestAuth:

    def test_signup_signin_and_admin_routes(self, client):
        r = client.post("/auth/signup", json={"email": "admin@example.com", "password": "secret"})
        assert r.status_code == 200
        assert r.json()["role"] == "admin"

        r = client.post("/auth/signup", json={"email": "user@example.com", "password": "secret"})
        assert r.json()["role"] == "user"

        assert client.post("/auth/signin", json={"email": "admin@example.com", "password": "bad"}).status_code == 401
        token = client.post("/auth/signin", json={"email": "admin@example.com", "password": "secret"}).json()["access_token"]

        r = client.get("/users/", headers={"Authorization": f"Bearer {token}"})
        assert r.status_code == 200
        assert len(r.json()) == 2

        user_token = client.post("/auth/signin", json={"email": "user@example.com", "password": "secret"}).json()["access_token"]
        assert client.get("/users/", headers={"Authorization": f"Bearer {user_token}"}).status_code == 403
        assert client.get("/users/").status_code == 401


class TestCompanies:

    def test_company_and_contact(self, client):
        company = client.post("/companies/", json={"name": "Meyer Werft", "type": "Shipyard"}).json()
        contact = client.post("/contacts/", json={"name": "Jane", "company_id": company["id"]}).json()
        project = create_project(client, shipyard_id=company["id"], primary_contact_id=contact["id"])

        assert [c["name"] for c in client.get("/companies/?type=Shipyard").json()] == ["Meyer Werft"]
        assert len(client.get(f"/contacts/?company_id={company['id']}").json()) == 1

        assert client.delete(f"/companies/{company['id']}").status_code == 200
        assert client.get("/contacts/").json() == []
        detached = client.get(f"/projects/{project['id']}").json()
        assert detached["shipyard_id"] is None
        assert detached["primary_contact_id"] is None

    def test_contact_for_unknown_company(self, client):
        assert client.post("/contacts/", json={"name": "X", "company_id": 42}).status_code == 404


class TestUserRoles:

    @pytest.fixture
    def team(self, client):
        for email in ("admin@example.com", "user@example.com"):
            client.post("/auth/signup", json={"email": email, "password": "secret"})
        users = client.get("/users/", headers=self.signin(client, "admin@example.com")).json()
        return {u["email"]: u["id"] for u in users}

    def signin(self, client, email):
        token = client.post("/auth/signin", json={"email": email, "password": "secret"}).json()["access_token"]
        return {"Authorization": f"Bearer {token}"}

    def test_admin_changes_role(self, client, team):
        headers = self.signin(client, "admin@example.com")
        member_id = team["user@example.com"]

        r = client.put(f"/users/{member_id}/role", json={"role": "manager"}, headers=headers)
        assert r.status_code == 200
        assert r.json()["role"] == "manager"

        # the next sign-in carries the new role
        r = client.post("/auth/signin", json={"email": "user@example.com", "password": "secret"})
        assert r.json()["role"] == "manager"

    def test_invalid_changes_rejected(self, client, team):
        headers = self.signin(client, "admin@example.com")
        member_id = team["user@example.com"]
        admin_id = team["admin@example.com"]

        assert client.put(f"/users/{member_id}/role", json={"role": "owner"}, headers=headers).status_code == 400
        assert client.put(f"/users/{admin_id}/role", json={"role": "user"}, headers=headers).status_code == 400
        assert client.put("/users/999/role", json={"role": "user"}, headers=headers).status_code == 404

    def test_non_admin_cannot_change_roles(self, client, team):
        admin_id = team["admin@example.com"]
        headers = self.signin(client, "user@example.com")

        assert client.put(f"/users/{admin_id}/role", json={"role": "user"}, headers=headers).status_code == 403
        assert client.put(f"/users/{admin_id}/role", json={"role": "user"}).status_code == 401
