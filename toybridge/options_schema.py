from dataclasses import dataclass
from typing import Any, List, Optional

@dataclass
class Option:
    name: str
    label: str
    type: str  # "str", "int", "float", "bool", "path", "choice"
    default: Any
    choices: Optional[List[str]] = None
    help_text: Optional[str] = None

OPTIONS: List[Option] = []

# --- Paths ---
OPTIONS.append(Option("data_dir", "wvr Data Directory", "path", ".",
                      help_text="Projects are written to <data_dir>/projects/<name>"))
OPTIONS.append(Option("template_dir", "Template Directory", "path", None,
                      help_text="Defaults to <data_dir>/projects/wvr_template; bundled templates fill any gaps"))

# --- Remote ---
OPTIONS.append(Option("api_base", "Shadertoy API Base URL", "str", "https://www.shadertoy.com/api/v1/shaders"))
OPTIONS.append(Option("timeout", "Request Timeout (sec)", "float", 20.0))

# --- Output documents ---
OPTIONS.append(Option("document_format", "Document Format", "choice", "json", choices=["json", "yaml"]))
OPTIONS.append(Option(
    "filter_documents", "Filter Documents", "choice", "project",
    choices=["project", "filter"],
    help_text="'project' writes the project document into each filter file (legacy); 'filter' writes the filter's own definition."
))

# --- Project defaults ---
OPTIONS.append(Option("bpm", "Tempo (BPM)", "float", 89.0))
OPTIONS.append(Option("width", "Width", "int", 640))
OPTIONS.append(Option("height", "Height", "int", 480))
OPTIONS.append(Option("fullscreen", "Fullscreen", "bool", False))
OPTIONS.append(Option("dynamic", "Dynamic Resize", "bool", True))
OPTIONS.append(Option("vsync", "VSync", "bool", True))
OPTIONS.append(Option("target_fps", "Target FPS", "float", 60.0))
OPTIONS.append(Option("locked_speed", "Locked Speed", "bool", False))
OPTIONS.append(Option("screenshot", "Screenshots", "bool", False))
OPTIONS.append(Option("screenshot_path", "Screenshot Path", "path", "output/"))
OPTIONS.append(Option("screenshot_frame_count", "Screenshot Frame Count", "int", -1,
                      help_text="-1 keeps capturing until stopped"))
OPTIONS.append(Option("precision", "Buffer Precision", "choice", "F32", choices=["U8", "F16", "F32"]))

# --- Server ---
OPTIONS.append(Option("server_ip", "Server IP", "str", "localhost"))
OPTIONS.append(Option("server_port", "Server Port", "int", 3000))
OPTIONS.append(Option("server_enable", "Enable Server", "bool", False))

# --- Camera ---
OPTIONS.append(Option("camera_path", "Camera Device", "path", "/dev/video0"))
OPTIONS.append(Option("camera_width", "Camera Width", "int", 640))
OPTIONS.append(Option("camera_height", "Camera Height", "int", 480))
