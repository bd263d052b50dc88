from pathlib import Path

from fastapi.testclient import TestClient

from ranger.api.app import app, db

client = TestClient(app)


def test_generate(tmp_path: Path, template_dir: Path):
    out_dir = tmp_path / "out"
    r = client.post("/generate", json={
        "out": str(out_dir), "folder": str(template_dir), "vars": {"app.name": "api"},
    })
    assert r.status_code == 200
    assert r.json()["files"] == 2
    assert (out_dir / "api" / "__init__.py").exists()

    runs = client.get("/runs").json()["items"]
    assert any(run["id"] == r.json()["id"] and run["status"] == "ok" for run in runs)


def test_existing_output_conflicts(tmp_path: Path, template_dir: Path):
    out_dir = tmp_path / "out"
    out_dir.mkdir()
    (out_dir / "x").write_text("x")
    r = client.post("/generate", json={"out": str(out_dir), "folder": str(template_dir)})
    assert r.status_code == 409


def test_render_failure(tmp_path: Path, template_dir: Path):
    (template_dir / "bad.txt").write_text("{{ vars.nope }}")
    out_dir = tmp_path / "out"
    r = client.post("/generate", json={"out": str(out_dir), "folder": str(template_dir)})
    assert r.status_code == 400
    assert not out_dir.exists()
    assert db.list_runs()[-1]["status"] == "failed"


def test_output_claimed_by_another_request(tmp_path: Path, template_dir: Path):
    out_dir = tmp_path / "out"
    assert db.claim(out_dir)
    try:
        r = client.post("/generate", json={"out": str(out_dir), "folder": str(template_dir)})
        assert r.status_code == 409
    finally:
        db.release(out_dir)
    assert not out_dir.exists()


def test_runtime_error_in_template(tmp_path: Path, template_dir: Path):
    (template_dir / "calc.txt").write_text("{{ 1 // 0 }}")
    out_dir = tmp_path / "out"
    r = client.post("/generate", json={"out": str(out_dir), "folder": str(template_dir)})
    assert r.status_code == 400
    assert not out_dir.exists()
    run = db.list_runs()[-1]
    assert run["status"] == "failed"
    assert "ZeroDivisionError" in run["error"]
