from dataclasses import dataclass, replace
from typing import Dict, List, Optional

from .errors import MalformedSourceError, UnsupportedInputError
from .types import (
    BufferRef,
    CameraRef,
    FilterSpec,
    InputSourceSpec,
    ProjectDefaults,
    RenderStageSpec,
    ShaderFileWrite,
    SourceInputRef,
    SourcePass,
    SourceProject,
    TargetProject,
    TranslationResult,
)

BUFFER_NAMES = ("Buffer A", "Buffer B", "Buffer C", "Buffer D")
CAMERA_INPUT_NAME = "webcam"

@dataclass
class TranslatorOptions:
    render_chain_dir: str = "render_chain"
    shader_extension: str = ".glsl"
    # Template files, relative to the template directory
    header_template: str = "render_chain/utils/header.glsl"
    vertex_template: str = "render_chain/Image/vertex/main.glsl"

    def header_path(self) -> str:
        return f"{self.render_chain_dir}/utils/header{self.shader_extension}"

    def shader_path(self, stage_name: str, kind: str) -> str:
        return f"{self.render_chain_dir}/{stage_name}/{kind}/main{self.shader_extension}"

def uniform_name(index: int) -> str:
    return f"iChannel{index}"

def buffer_input_name(slot: int) -> str:
    # bool is an int subclass; a document saying "channel": true is not a slot
    if isinstance(slot, bool) or not 0 <= slot < len(BUFFER_NAMES):
        raise UnsupportedInputError(f"Buffer channel {slot!r} is not supported (expected 0-3)")
    return BUFFER_NAMES[slot]

class RenderChainTranslator:
    """
    Maps a Shadertoy multipass project onto a wvr render chain.

    Every pass becomes one filter and one render stage of the same name. The
    last declared pass is the final stage; the others form the render chain
    in reverse declaration order (each one is inserted at the front while
    walking the passes forward). Nothing is written here: the result lists
    the shader files to create and is handed to the materializer.
    """

    def __init__(self, defaults: Optional[ProjectDefaults] = None, options: Optional[TranslatorOptions] = None):
        self.defaults = defaults or ProjectDefaults()
        self.options = options or TranslatorOptions()

    def translate(self, source: SourceProject) -> TranslationResult:
        self._validate(source)

        inputs: Dict[str, InputSourceSpec] = {}
        filters: Dict[str, FilterSpec] = {}
        render_chain: List[RenderStageSpec] = []
        final_stage = None
        writes = [ShaderFileWrite(self.options.header_path(), template=self.options.header_template)]

        stage_count = len(source.passes)
        for stage_index, render_pass in enumerate(source.passes):
            bindings = self._resolve_channels(render_pass, inputs)

            vertex_path = self.options.shader_path(render_pass.name, "vertex")
            fragment_path = self.options.shader_path(render_pass.name, "fragment")

            filters[render_pass.name] = FilterSpec(
                name=render_pass.name,
                inputs=frozenset(bindings),
                vertex_shader=[vertex_path],
                fragment_shader=[self.options.header_path(), fragment_path],
            )
            writes.append(ShaderFileWrite(vertex_path, template=self.options.vertex_template))
            writes.append(ShaderFileWrite(fragment_path, content=render_pass.code))

            stage = RenderStageSpec(
                name=render_pass.name,
                filter=render_pass.name,
                inputs=bindings,
                precision=self.defaults.precision,
            )
            if stage_index == stage_count - 1:
                final_stage = stage
            else:
                render_chain.insert(0, stage)

        project = TargetProject(
            bpm=self.defaults.bpm,
            view=replace(self.defaults.view),
            server=replace(self.defaults.server),
            inputs=inputs,
            render_chain=render_chain,
            final_stage=final_stage,
        )
        self._check_bindings(source, project)
        return TranslationResult(project=project, filters=filters, writes=writes)

    def _validate(self, source: SourceProject):
        if not source.passes:
            raise MalformedSourceError(f"Project '{source.name}' has no render passes")

        seen = set()
        for render_pass in source.passes:
            # Stage names become directory names
            if not render_pass.name or render_pass.name in (".", "..") or "/" in render_pass.name or "\\" in render_pass.name:
                raise MalformedSourceError(f"Render pass name {render_pass.name!r} cannot be used as a stage name")
            if render_pass.name in seen:
                raise MalformedSourceError(
                    f"Project '{source.name}' declares render pass '{render_pass.name}' more than once"
                )
            seen.add(render_pass.name)

    def _check_bindings(self, source: SourceProject, project: TargetProject):
        known = set(project.stage_names()) | set(project.inputs)
        for stage in project.render_chain + [project.final_stage]:
            for uniform, input_name in stage.inputs.items():
                if input_name not in known:
                    raise MalformedSourceError(
                        f"Project '{source.name}': stage '{stage.name}' binds {uniform} to '{input_name}', "
                        f"which is neither a render pass nor an input"
                    )

    def _resolve_channels(self, render_pass: SourcePass, inputs: Dict[str, InputSourceSpec]) -> Dict[str, str]:
        bindings = {}
        for index, ref in enumerate(render_pass.inputs):
            bindings[uniform_name(index)] = self._resolve_input(ref, inputs)
        return bindings

    def _resolve_input(self, ref: SourceInputRef, inputs: Dict[str, InputSourceSpec]) -> str:
        if isinstance(ref, BufferRef):
            return buffer_input_name(ref.slot)
        if isinstance(ref, CameraRef):
            # Same key for every camera reference, so re-declaring it is a no-op
            inputs[CAMERA_INPUT_NAME] = replace(self.defaults.camera)
            return CAMERA_INPUT_NAME
        raise UnsupportedInputError(f"Unsupported input reference: {ref!r}")

def translate(source: SourceProject, defaults: Optional[ProjectDefaults] = None,
              options: Optional[TranslatorOptions] = None) -> TranslationResult:
    return RenderChainTranslator(defaults, options).translate(source)
