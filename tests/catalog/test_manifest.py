"""
Unit Tests for Dataset Manifests
"""

import json

from quiz_toolkit.catalog.manifest import DatasetInfo, Manifest, load_manifest


class TestLoadManifest:
    """Tests for load_manifest()."""

    def test_load_when_valid_then_datasets_with_resolved_sources(self, tmp_path):
        path = tmp_path / "manifest.json"
        path.write_text(
            json.dumps(
                {
                    "datasets": [
                        {
                            "id": "ds1",
                            "label": "Networks",
                            "notebookUrl": "https://example.org/nb",
                            "json": ["data/a.json", "https://example.org/b.json"],
                        },
                        {"id": "ds2"},
                    ]
                }
            ),
            encoding="utf-8",
        )

        manifest = load_manifest(path)

        assert manifest.ids() == ["ds1", "ds2"]
        ds1 = manifest.get("ds1")
        assert ds1.notebook_url == "https://example.org/nb"
        assert ds1.sources == (str(tmp_path / "data" / "a.json"), "https://example.org/b.json")
        assert manifest.get("ds2").display_label == "ds2"

    def test_load_when_missing_file_then_none(self, tmp_path):
        assert load_manifest(tmp_path / "nope.json") is None

    def test_load_when_malformed_then_none(self, tmp_path):
        path = tmp_path / "manifest.json"
        path.write_text(json.dumps({"datasets": [{"label": "no id"}]}), encoding="utf-8")

        assert load_manifest(path) is None

    def test_load_when_not_json_then_none(self, tmp_path):
        path = tmp_path / "manifest.json"
        path.write_text("<html>", encoding="utf-8")

        assert load_manifest(path) is None

    def test_load_when_not_utf8_then_none(self, tmp_path):
        path = tmp_path / "manifest.json"
        path.write_bytes(b'{"datasets": [{"id": "\xff"}]}')

        assert load_manifest(path) is None


def test_manifest_get_unknown_id_is_none():
    manifest = Manifest(datasets=(DatasetInfo(id="a"),))

    assert manifest.get("b") is None
    assert manifest.get("a").id == "a"
