import contextlib
import io
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from fastapi.testclient import TestClient

from toybridge.errors import RemoteFetchError
from toybridge.project import create_project_from_document
from toybridge.server.app import app

from test_remote import sample_document


class TestServer(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(app)
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def test_health(self):
        r = self.client.get("/api/health")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["status"], "ok")

    def test_preview(self):
        r = self.client.post("/api/projects/preview", json=sample_document())
        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertEqual(body["name"], "Feedback Cam")
        self.assertEqual(body["project"]["final_stage"]["name"], "Image")
        self.assertIn("webcam", body["project"]["inputs"])
        self.assertIn("render_chain/utils/header.glsl", body["files"])
        self.assertFalse((self.root / "projects").exists())

    def test_preview_unsupported(self):
        doc = sample_document()
        doc["Shader"]["renderpass"][0]["inputs"][0]["channel"] = 7
        r = self.client.post("/api/projects/preview", json=doc)
        self.assertEqual(r.status_code, 400)

    def test_preview_bad_schema(self):
        r = self.client.post("/api/projects/preview", json={"Shader": {}})
        self.assertEqual(r.status_code, 400)

    def test_list_projects(self):
        with contextlib.redirect_stdout(io.StringIO()), contextlib.redirect_stderr(io.StringIO()):
            create_project_from_document(self.root, sample_document())
        r = self.client.get("/api/projects/", params={"data_dir": str(self.root)})
        self.assertEqual(r.status_code, 200)
        projects = r.json()
        self.assertEqual([p["name"] for p in projects], ["Feedback Cam"])
        self.assertEqual(projects[0]["stages"], ["Buffer A", "Image"])

    def test_list_projects_empty(self):
        r = self.client.get("/api/projects/", params={"data_dir": str(self.root)})
        self.assertEqual(r.json(), [])

    def test_import(self):
        with mock.patch("toybridge.project.fetch_document", return_value=sample_document()):
            r = self.client.post("/api/projects/import",
                                 json={"url": "XsXXDn", "api_key": "k", "data_dir": str(self.root)})
        self.assertEqual(r.status_code, 200)
        self.assertTrue(Path(r.json()["config"]).is_file())

    def test_import_remote_failure(self):
        with mock.patch("toybridge.project.fetch_document", side_effect=RemoteFetchError("down")):
            r = self.client.post("/api/projects/import",
                                 json={"url": "XsXXDn", "api_key": "k", "data_dir": str(self.root)})
        self.assertEqual(r.status_code, 502)


if __name__ == "__main__":
    unittest.main()
