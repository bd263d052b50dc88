import logging
from pathlib import Path

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from .. import __version__
from ..generator.errors import OutputExistsError, RangerError
from ..generator.models import GenerateRequest
from ..generator.transaction import generate
from ..utils.store import InMemoryStore

logger = logging.getLogger(__name__)

app = FastAPI(title="Ranger API", version=__version__)
db = InMemoryStore()


class GenerateReq(BaseModel):
    out: str
    folder: str = "."
    repo: str | None = None
    branch: str | None = None
    vars: dict[str, str] = {}
    force: bool = False


@app.get("/runs")
def list_runs():
    return {"items": db.list_runs()}


@app.post("/generate")
def generate_project(req: GenerateReq):
    out_dir = Path(req.out).resolve()
    if not db.claim(out_dir):
        raise HTTPException(status_code=409, detail=f"output {out_dir} is being generated")
    run = db.create_run(out_dir)
    try:
        request = GenerateRequest(
            out=out_dir,
            folder=Path(req.folder),
            repo=req.repo,
            branch=req.branch,
            overrides=list(req.vars.items()),
            force=req.force,
        )
        result = generate(request)
    except OutputExistsError as e:
        db.finish_run(run["id"], str(e))
        raise HTTPException(status_code=409, detail=str(e))
    except RangerError as e:
        logger.warning(f"Run {run['id']} failed: {e}")
        db.finish_run(run["id"], str(e))
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception(f"Run {run['id']} crashed")
        db.finish_run(run["id"], f"{type(e).__name__}: {e}")
        raise
    finally:
        db.release(out_dir)

    db.finish_run(run["id"])
    return {"status": "ok", "id": run["id"], "out": str(result.out), "files": len(result.files)}
