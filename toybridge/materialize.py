import json
import shutil
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import FilesystemError
from .types import ShaderFileWrite, TranslationResult

BUNDLED_TEMPLATES = Path(__file__).parent / "templates"

DOCUMENT_FORMATS = {"json": "json", "yaml": "yaml"}
FILTER_DOCUMENT_MODES = ("project", "filter")

class ProjectMaterializer:
    """
    Writes a TranslationResult to disk.

    The project directory is removed and recreated; files are then written in
    order with no rollback, so a failure part way leaves a partial project.
    """

    def __init__(self, template_dir: Optional[Path] = None, document_format: str = "json",
                 filter_documents: str = "project"):
        if document_format not in DOCUMENT_FORMATS:
            raise ValueError(f"Unknown document format: {document_format}")
        if filter_documents not in FILTER_DOCUMENT_MODES:
            raise ValueError(f"Unknown filter document mode: {filter_documents}")
        self.template_dir = Path(template_dir) if template_dir else None
        self.document_format = document_format
        # "project" repeats the whole project document in every filter file,
        # which is what existing wvr projects generated by this tool contain.
        self.filter_documents = filter_documents

    @property
    def extension(self) -> str:
        return DOCUMENT_FORMATS[self.document_format]

    # --- Primitives ---

    def ensure_clean_directory(self, path: Path):
        try:
            if path.exists():
                shutil.rmtree(path)
            path.mkdir(parents=True)
        except OSError as e:
            raise FilesystemError(f"Cannot recreate directory {path}: {e}") from e

    def copy_file(self, src: Path, dst: Path):
        try:
            dst.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(src, dst)
        except OSError as e:
            raise FilesystemError(f"Cannot copy {src} to {dst}: {e}") from e

    def write_text_file(self, path: Path, content: str):
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8', newline='') as f:
                f.write(content)
        except OSError as e:
            raise FilesystemError(f"Cannot write {path}: {e}") from e

    def serialize(self, document: Dict[str, Any]) -> str:
        if self.document_format == "yaml":
            return yaml.safe_dump(document, default_flow_style=False, sort_keys=False)
        return json.dumps(document, indent=2)

    # --- Templates ---

    def resolve_template(self, relative: str) -> Path:
        candidates = []
        if self.template_dir:
            candidates.append(self.template_dir / relative)
        candidates.append(BUNDLED_TEMPLATES / relative)

        for candidate in candidates:
            if candidate.is_file():
                return candidate
        raise FilesystemError(f"Template not found: {relative} (searched {[str(c) for c in candidates]})")

    # --- Project ---

    def apply_write(self, project_dir: Path, write: ShaderFileWrite):
        target = project_dir / write.path
        if write.is_copy:
            self.copy_file(self.resolve_template(write.template), target)
        else:
            self.write_text_file(target, write.content or "")

    def materialize(self, result: TranslationResult, project_dir: Path) -> Path:
        project_dir = Path(project_dir)
        if self.template_dir and not self.template_dir.exists():
            print(f"Warning: template directory {self.template_dir} not found, using bundled templates.",
                  file=sys.stderr)

        self.ensure_clean_directory(project_dir)
        filters_dir = project_dir / "filters"
        for d in (filters_dir, project_dir / "render_chain", project_dir / "render_chain" / "utils"):
            try:
                d.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise FilesystemError(f"Cannot create directory {d}: {e}") from e

        for write in result.writes:
            self.apply_write(project_dir, write)

        project_doc = result.project.to_dict()
        config_path = project_dir / f"config.{self.extension}"
        self.write_text_file(config_path, self.serialize(project_doc))

        for name, filter_spec in result.filters.items():
            doc = project_doc if self.filter_documents == "project" else filter_spec.to_dict()
            self.write_text_file(filters_dir / f"{name}.{self.extension}", self.serialize(doc))

        print(f"Wrote {len(result.writes)} shader files and {len(result.filters)} filters to {project_dir}")
        return config_path
