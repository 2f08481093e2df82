import json
import tempfile
import unittest
from pathlib import Path

import yaml

from toybridge.errors import FilesystemError
from toybridge.materialize import ProjectMaterializer
from toybridge.translator import RenderChainTranslator, TranslatorOptions
from toybridge.types import BufferRef, CameraRef, SourcePass, SourceProject


def sample_result():
    source = SourceProject(name="Test", passes=(
        SourcePass("Buffer A", "// a\n", (BufferRef(0), CameraRef())),
        SourcePass("Image", "// image\n", (BufferRef(0),)),
    ))
    return RenderChainTranslator().translate(source)


class TestMaterialize(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.project_dir = self.root / "projects" / "Test"

    def tearDown(self):
        self._tmp.cleanup()

    def test_layout(self):
        config_path = ProjectMaterializer().materialize(sample_result(), self.project_dir)

        self.assertEqual(config_path, self.project_dir / "config.json")
        for rel in [
            "render_chain/utils/header.glsl",
            "render_chain/Buffer A/vertex/main.glsl",
            "render_chain/Buffer A/fragment/main.glsl",
            "render_chain/Image/vertex/main.glsl",
            "render_chain/Image/fragment/main.glsl",
            "filters/Buffer A.json",
            "filters/Image.json",
        ]:
            self.assertTrue((self.project_dir / rel).is_file(), rel)

        self.assertEqual((self.project_dir / "render_chain/Image/fragment/main.glsl").read_text(encoding="utf-8"),
                         "// image\n")

    def test_config_document(self):
        config_path = ProjectMaterializer().materialize(sample_result(), self.project_dir)
        doc = json.loads(config_path.read_text(encoding="utf-8"))

        self.assertEqual(doc["bpm"], 89.0)
        self.assertEqual(doc["inputs"], {"webcam": {"Cam": {"path": "/dev/video0", "width": 640, "height": 480}}})
        self.assertEqual([s["name"] for s in doc["render_chain"]], ["Buffer A"])
        self.assertEqual(doc["final_stage"]["inputs"], {"iChannel0": {"Linear": "Buffer A"}})
        self.assertEqual(doc["final_stage"]["precision"], "F32")
        self.assertEqual(doc["server"], {"ip": "localhost", "port": 3000, "enable": False})

    def test_filter_documents_repeat_project_by_default(self):
        config_path = ProjectMaterializer().materialize(sample_result(), self.project_dir)
        project_doc = config_path.read_text(encoding="utf-8")
        self.assertEqual((self.project_dir / "filters" / "Image.json").read_text(encoding="utf-8"), project_doc)

    def test_filter_documents_own_definition(self):
        ProjectMaterializer(filter_documents="filter").materialize(sample_result(), self.project_dir)
        doc = json.loads((self.project_dir / "filters" / "Buffer A.json").read_text(encoding="utf-8"))
        self.assertEqual(doc["inputs"], ["iChannel0", "iChannel1"])
        self.assertEqual(doc["fragment_shader"][0], "render_chain/utils/header.glsl")
        self.assertEqual(doc["vertex_shader"], ["render_chain/Buffer A/vertex/main.glsl"])

    def test_yaml_documents(self):
        config_path = ProjectMaterializer(document_format="yaml").materialize(sample_result(), self.project_dir)
        self.assertEqual(config_path.name, "config.yaml")
        doc = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        self.assertEqual(doc["final_stage"]["name"], "Image")
        self.assertTrue((self.project_dir / "filters" / "Image.yaml").is_file())

    def test_previous_project_removed(self):
        stale = self.project_dir / "render_chain" / "Old" / "fragment" / "main.glsl"
        stale.parent.mkdir(parents=True)
        stale.write_text("old", encoding="utf-8")

        ProjectMaterializer().materialize(sample_result(), self.project_dir)
        self.assertFalse((self.project_dir / "render_chain" / "Old").exists())

    def test_template_dir_preferred(self):
        template_dir = self.root / "projects" / "wvr_template"
        header = template_dir / "render_chain" / "utils" / "header.glsl"
        header.parent.mkdir(parents=True)
        header.write_text("// custom header\n", encoding="utf-8")

        ProjectMaterializer(template_dir=template_dir).materialize(sample_result(), self.project_dir)
        self.assertEqual((self.project_dir / "render_chain/utils/header.glsl").read_text(encoding="utf-8"),
                         "// custom header\n")
        # Vertex template missing from template_dir: bundled one is used
        self.assertIn("gl_Position", (self.project_dir / "render_chain/Image/vertex/main.glsl").read_text(encoding="utf-8"))

    def test_missing_template(self):
        options = TranslatorOptions(vertex_template="render_chain/Nope/vertex/main.glsl")
        source = SourceProject(name="Test", passes=(SourcePass("Image", "", ()),))
        result = RenderChainTranslator(options=options).translate(source)
        with self.assertRaises(FilesystemError):
            ProjectMaterializer().materialize(result, self.project_dir)

    def test_write_failure_is_filesystem_error(self):
        blocker = self.root / "file"
        blocker.write_text("x", encoding="utf-8")
        with self.assertRaises(FilesystemError):
            ProjectMaterializer().write_text_file(blocker / "child.txt", "content")

    def test_serialization_is_stable(self):
        m = ProjectMaterializer()
        self.assertEqual(m.serialize(sample_result().project.to_dict()),
                         m.serialize(sample_result().project.to_dict()))

    def test_unknown_format(self):
        with self.assertRaises(ValueError):
            ProjectMaterializer(document_format="toml")


if __name__ == "__main__":
    unittest.main()
