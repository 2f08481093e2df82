from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Tuple, Union

# --- Source side (Shadertoy) ---

@dataclass(frozen=True)
class BufferRef:
    slot: int                        # 0..3 -> "Buffer A".."Buffer D"

@dataclass(frozen=True)
class CameraRef:
    pass

SourceInputRef = Union[BufferRef, CameraRef]

@dataclass(frozen=True)
class SourcePass:
    name: str                        # "Buffer A", "Image", ...
    code: str                        # raw GLSL, written verbatim
    inputs: Tuple[SourceInputRef, ...] = ()   # index -> iChannel slot

@dataclass(frozen=True)
class SourceProject:
    name: str
    passes: Tuple[SourcePass, ...]   # declared order, last is the output pass

# --- Target side (wvr project) ---

@dataclass
class InputSourceSpec:
    path: str = "/dev/video0"
    width: int = 640
    height: int = 480

    def to_dict(self) -> Dict[str, Any]:
        return {"Cam": {"path": self.path, "width": self.width, "height": self.height}}

@dataclass
class ViewConfig:
    width: int = 640
    height: int = 480
    fullscreen: bool = False
    dynamic: bool = True
    vsync: bool = True
    screenshot: bool = False
    screenshot_path: str = "output/"
    screenshot_frame_count: int = -1
    target_fps: float = 60.0
    locked_speed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "fullscreen": self.fullscreen,
            "dynamic": self.dynamic,
            "vsync": self.vsync,
            "screenshot": self.screenshot,
            "screenshot_path": self.screenshot_path,
            "screenshot_frame_count": self.screenshot_frame_count,
            "target_fps": self.target_fps,
            "locked_speed": self.locked_speed,
        }

@dataclass
class ServerConfig:
    ip: str = "localhost"
    port: int = 3000
    enable: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"ip": self.ip, "port": self.port, "enable": self.enable}

@dataclass
class ProjectDefaults:
    """Settings embedded in every generated project that do not come from the source document."""
    bpm: float = 89.0
    view: ViewConfig = field(default_factory=ViewConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    camera: InputSourceSpec = field(default_factory=InputSourceSpec)
    precision: str = "F32"

# Full-frame rectangle: x, y, width, height in normalized coordinates
RECTANGLE_FULL = (0.0, 0.0, 1.0, 1.0)

@dataclass
class RenderStageSpec:
    name: str
    filter: str                      # filter name, same as the stage name
    inputs: Dict[str, str]           # "iChannel0" -> "Buffer A" / "webcam"
    precision: str = "F32"
    filter_mode_params: Tuple[float, float, float, float] = RECTANGLE_FULL
    variables: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "filter": self.filter,
            "filter_mode_params": {"Rectangle": list(self.filter_mode_params)},
            "inputs": {uniform: {"Linear": input_name} for uniform, input_name in self.inputs.items()},
            "variables": dict(self.variables),
            "precision": self.precision,
        }

@dataclass
class FilterSpec:
    name: str
    inputs: FrozenSet[str]           # uniform names sampled by the shader
    vertex_shader: List[str]
    fragment_shader: List[str]       # [header, stage fragment]
    mode: Tuple[float, float, float, float] = RECTANGLE_FULL
    variables: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": {"Rectangle": list(self.mode)},
            "inputs": sorted(self.inputs),
            "variables": dict(self.variables),
            "vertex_shader": list(self.vertex_shader),
            "fragment_shader": list(self.fragment_shader),
        }

@dataclass
class TargetProject:
    bpm: float
    view: ViewConfig
    server: ServerConfig
    inputs: Dict[str, InputSourceSpec]
    render_chain: List[RenderStageSpec]     # non-final passes, reverse declared order
    final_stage: RenderStageSpec
    variables: Dict[str, Any] = field(default_factory=dict)

    def stage_names(self) -> List[str]:
        return [stage.name for stage in self.render_chain] + [self.final_stage.name]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bpm": self.bpm,
            "view": self.view.to_dict(),
            "server": self.server.to_dict(),
            "inputs": {name: spec.to_dict() for name, spec in sorted(self.inputs.items())},
            "render_chain": [stage.to_dict() for stage in self.render_chain],
            "final_stage": self.final_stage.to_dict(),
            "variables": dict(self.variables),
        }

@dataclass(frozen=True)
class ShaderFileWrite:
    path: str                        # relative to the project directory
    content: Optional[str] = None    # text to write verbatim
    template: Optional[str] = None   # or: template file to copy, relative to the template dir

    @property
    def is_copy(self) -> bool:
        return self.template is not None

@dataclass
class TranslationResult:
    project: TargetProject
    filters: Dict[str, FilterSpec]   # keyed by filter name, declared pass order
    writes: List[ShaderFileWrite]
