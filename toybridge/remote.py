import json
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import requests
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import RemoteFetchError, UnsupportedInputError
from .types import BufferRef, CameraRef, SourceInputRef, SourcePass, SourceProject

API_BASE = "https://www.shadertoy.com/api/v1/shaders"

# --- Document schema ---
# Only the fields the translator needs; the API sends many more, which are ignored.

class InputModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    ctype: str
    channel: Optional[int] = None   # required for buffers, unused for webcams

class RenderPassModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    code: str
    inputs: List[InputModel] = Field(default_factory=list)

class ShaderInfoModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str

class ShaderModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    info: ShaderInfoModel
    renderpass: List[RenderPassModel]

class ShadertoyDocument(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    shader: ShaderModel = Field(alias="Shader")

def _to_input_ref(pass_name: str, model: InputModel) -> SourceInputRef:
    if model.ctype == "buffer":
        if model.channel is None:
            raise RemoteFetchError(f"Render pass '{pass_name}' has a buffer input without a channel")
        return BufferRef(slot=model.channel)
    if model.ctype == "webcam":
        return CameraRef()
    raise UnsupportedInputError(f"Render pass '{pass_name}' uses unsupported input type '{model.ctype}'")

def parse_document(data: Dict[str, Any]) -> SourceProject:
    """Validates a decoded API response and converts it to a SourceProject."""
    if isinstance(data, dict) and "Error" in data:
        raise RemoteFetchError(f"Shadertoy API error: {data['Error']}")

    try:
        doc = ShadertoyDocument.model_validate(data)
    except ValidationError as e:
        raise RemoteFetchError(f"Invalid Shadertoy document: {e}") from e

    passes = []
    for rp in doc.shader.renderpass:
        refs = tuple(_to_input_ref(rp.name, i) for i in rp.inputs)
        passes.append(SourcePass(name=rp.name, code=rp.code, inputs=refs))

    return SourceProject(name=doc.shader.info.name, passes=tuple(passes))

def load_document(path: Path) -> Dict[str, Any]:
    """Reads a previously saved API response from disk."""
    if not path.exists():
        raise RemoteFetchError(f"Document not found: {path}")
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise RemoteFetchError(f"Invalid JSON in {path}: {e}") from e
    except OSError as e:
        raise RemoteFetchError(f"Cannot read {path}: {e}") from e

# --- HTTP ---

def shader_id_from_url(url: str) -> str:
    """
    Extracts the shader id from a shader page URL.

    "https://www.shadertoy.com/view/XsXXDn" -> "XsXXDn"
    A bare id is returned unchanged.
    """
    path = urlparse(url).path if "://" in url else url.split("?")[0]
    parts = [p for p in path.split("/") if p]
    if not parts:
        raise RemoteFetchError(f"No shader id in URL: {url!r}")
    return parts[-1]

def build_request_url(shader_id: str, api_key: str, api_base: str = API_BASE) -> str:
    return f"{api_base.rstrip('/')}/{shader_id}?key={api_key}"

def fetch_document(url: str, api_key: str, api_base: str = API_BASE, timeout: float = 20.0) -> Dict[str, Any]:
    """Downloads the API document for the shader page at `url`."""
    request_url = build_request_url(shader_id_from_url(url), api_key, api_base)
    try:
        r = requests.get(request_url, timeout=timeout)
        r.raise_for_status()
    except requests.exceptions.HTTPError as e:
        raise RemoteFetchError(f"HTTP {r.status_code} ({r.reason}) fetching {url}") from e
    except requests.exceptions.RequestException as e:
        raise RemoteFetchError(f"Network error fetching {url}: {e}") from e

    try:
        data = r.json()
    except ValueError as e:
        raise RemoteFetchError(f"Response for {url} is not JSON") from e

    if isinstance(data, dict) and "Error" in data:
        raise RemoteFetchError(f"Shadertoy API error for {url}: {data['Error']}")
    return data
