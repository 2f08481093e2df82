from pathlib import Path
from typing import Any, Dict, Optional

from .config import build_config, defaults_from_config
from .errors import MalformedSourceError
from .materialize import ProjectMaterializer
from .remote import fetch_document, parse_document
from .translator import RenderChainTranslator

TEMPLATE_PROJECT = "wvr_template"

def project_directory(data_dir: Path, project_name: str) -> Path:
    if not project_name or project_name in (".", "..") or "/" in project_name or "\\" in project_name:
        raise MalformedSourceError(f"Project name {project_name!r} cannot be used as a directory name")
    return Path(data_dir) / "projects" / project_name

def create_project_from_document(data_dir: Path, document: Dict[str, Any], cfg: Optional[Dict[str, Any]] = None) -> Path:
    """
    Translates an already fetched Shadertoy document into a wvr project.

    Returns the path of the written config document. Nothing is written if
    the document cannot be translated.
    """
    cfg = cfg or build_config()
    data_dir = Path(data_dir)

    source = parse_document(document)
    project_dir = project_directory(data_dir, source.name)

    result = RenderChainTranslator(defaults_from_config(cfg)).translate(source)

    template_dir = Path(cfg["template_dir"]) if cfg.get("template_dir") else data_dir / "projects" / TEMPLATE_PROJECT
    # The project directory is wiped before writing; it must not hold the templates
    resolved_project, resolved_template = project_dir.resolve(), template_dir.resolve()
    if resolved_project == resolved_template or resolved_project in resolved_template.parents:
        raise MalformedSourceError(
            f"Project '{source.name}' would overwrite the template directory {template_dir}"
        )

    materializer = ProjectMaterializer(
        template_dir=template_dir,
        document_format=cfg["document_format"],
        filter_documents=cfg["filter_documents"],
    )

    print(f"Creating project '{source.name}' ({len(source.passes)} passes) in {project_dir}")
    return materializer.materialize(result, project_dir)

def create_project_from_remote_url(data_dir: Path, remote_url: str, api_key: str,
                                   cfg: Optional[Dict[str, Any]] = None) -> Path:
    cfg = cfg or build_config()
    print(f"Fetching {remote_url}")
    document = fetch_document(remote_url, api_key, api_base=cfg["api_base"], timeout=float(cfg["timeout"]))
    return create_project_from_document(data_dir, document, cfg)
