from fastapi import APIRouter, HTTPException
from pydantic import BaseModel
from pathlib import Path
from typing import Any, Dict, List, Optional

from toybridge.config import build_config, defaults_from_config
from toybridge.errors import (
    FilesystemError,
    MalformedSourceError,
    RemoteFetchError,
    UnsupportedInputError,
)
from toybridge.project import create_project_from_remote_url
from toybridge.remote import parse_document
from toybridge.translator import RenderChainTranslator

router = APIRouter()

class ImportRequest(BaseModel):
    url: str
    api_key: str
    data_dir: Optional[str] = None

def _raise_http(e: Exception):
    if isinstance(e, (MalformedSourceError, UnsupportedInputError)):
        raise HTTPException(status_code=400, detail=str(e))
    if isinstance(e, RemoteFetchError):
        raise HTTPException(status_code=502, detail=str(e))
    if isinstance(e, FilesystemError):
        raise HTTPException(status_code=500, detail=str(e))
    raise e

@router.get("/", response_model=List[Dict])
def list_projects(data_dir: Optional[str] = None):
    """List project folders that contain a config document"""
    cfg = build_config()
    projects_dir = Path(data_dir or cfg["data_dir"]) / "projects"
    if not projects_dir.is_dir():
        return []

    projects = []
    for project_dir in sorted(projects_dir.iterdir()):
        if not project_dir.is_dir():
            continue
        configs = sorted(project_dir.glob("config.*"))
        if not configs:
            continue
        stages = []
        render_chain_dir = project_dir / "render_chain"
        if render_chain_dir.is_dir():
            stages = sorted(p.name for p in render_chain_dir.iterdir() if p.is_dir() and p.name != "utils")
        projects.append({
            "name": project_dir.name,
            "config": str(configs[0]),
            "stages": stages,
        })
    return projects

@router.post("/preview")
async def preview_project(document: Dict[str, Any]):
    """Translate a Shadertoy document without writing anything"""
    try:
        source = parse_document(document)
        result = RenderChainTranslator(defaults_from_config(build_config())).translate(source)
    except RemoteFetchError as e:
        # The document came in the request body, so a bad schema is the client's fault
        raise HTTPException(status_code=400, detail=str(e))
    except (MalformedSourceError, UnsupportedInputError) as e:
        _raise_http(e)

    return {
        "name": source.name,
        "project": result.project.to_dict(),
        "filters": {name: f.to_dict() for name, f in result.filters.items()},
        "files": [w.path for w in result.writes],
    }

@router.post("/import")
def import_project(data: ImportRequest):
    """Fetch a shader from Shadertoy and write it as a project"""
    cfg = build_config()
    data_dir = Path(data.data_dir or cfg["data_dir"])
    try:
        config_path = create_project_from_remote_url(data_dir, data.url, data.api_key, cfg)
    except (MalformedSourceError, UnsupportedInputError, RemoteFetchError, FilesystemError) as e:
        _raise_http(e)

    return {"status": "success", "config": str(config_path)}
