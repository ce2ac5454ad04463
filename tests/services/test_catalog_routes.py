"""Project Routes & Health: public catalog, quotes and probes over HTTP."""


async def test_list_projects(client):
    res = await client.get("/api/projects")
    assert res.status_code == 200
    projects = res.json()
    assert [p["id"] for p in projects] == ["aura", "subha"]
    assert projects[0]["minimum_investment"] == 100000
    assert projects[0]["available_slots"] == 18


async def test_get_project(client):
    res = await client.get("/api/projects/subha")
    assert res.status_code == 200
    assert res.json()["name"] == "Codename Skylife 2100"
    assert res.json()["location"] == "Mysore"


async def test_unknown_project_is_404(client):
    res = await client.get("/api/projects/atlantis")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "PROJECT_NOT_FOUND"

    res = await client.get("/api/projects/atlantis/models")
    assert res.status_code == 404


async def test_list_models(client):
    res = await client.get("/api/projects/aura/models")
    assert res.status_code == 200
    models = {m["id"]: m for m in res.json()}
    assert set(models) == {"aura-gold", "aura-platinum", "aura-virtual"}
    assert models["aura-platinum"]["roi"] == 14
    assert models["aura-platinum"]["lock_in_period"] == 4


async def test_quote(client):
    res = await client.get("/api/projects/aura/models/aura-gold/quote?slots=2")
    assert res.status_code == 200
    quote = res.json()
    assert quote["amount"] == 200000
    assert quote["maturity_value"] == 280986
    assert quote["projected_gain"] == 80986


async def test_quote_validation(client):
    res = await client.get("/api/projects/aura/models/aura-gold/quote?slots=0")
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"

    res = await client.get("/api/projects/aura/models/subha-gold/quote?slots=1")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "MODEL_NOT_FOUND"


async def test_health(client):
    res = await client.get("/api/health")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"


async def test_readiness_checks_database(client):
    res = await client.get("/api/health/ready")
    assert res.status_code == 200
    assert res.json() == {"status": "ready", "checks": {"database": "healthy"}}
