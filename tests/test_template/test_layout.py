"""Unit tests for content-root resolution (cordova_create.template.layout)."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from cordova_create.errors import InvalidTemplateError
from cordova_create.template.acquirer import AcquiredContent
from cordova_create.template.layout import ContentRoot, find_pointer, resolve_content_root

from conftest import write_files

pytestmark = pytest.mark.unit


class TestFindPointer:
    def test_package_json_dirname(self, subdir_template: Path):
        assert find_pointer(subdir_template) == (subdir_template / "template_src").resolve()

    def test_index_js_pointer(self, tmp_path: Path):
        write_files(
            tmp_path,
            {
                "index.js": "const path = require('path');\n"
                "module.exports = {\n    dirname: path.join(__dirname, \"template\")\n};\n",
            },
        )
        assert find_pointer(tmp_path) == (tmp_path / "template").resolve()

    def test_package_json_without_pointer(self, flat_template: Path):
        assert find_pointer(flat_template) is None

    def test_no_manifest(self, tmp_path: Path):
        assert find_pointer(tmp_path) is None

    def test_malformed_package_json(self, tmp_path: Path):
        (tmp_path / "package.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(InvalidTemplateError, match="is not a valid template"):
            find_pointer(tmp_path)

    def test_non_object_package_json(self, tmp_path: Path):
        (tmp_path / "package.json").write_text(json.dumps(["a"]), encoding="utf-8")
        with pytest.raises(InvalidTemplateError):
            find_pointer(tmp_path)


class TestResolveContentRoot:
    def test_www_folder(self, www_template: Path):
        root = resolve_content_root(AcquiredContent(path=www_template))
        assert root == ContentRoot(path=www_template, is_www=True, is_subdirectory=False)

    def test_subdirectory_template(self, subdir_template: Path):
        root = resolve_content_root(AcquiredContent(path=subdir_template))
        assert root.path == (subdir_template / "template_src").resolve()
        assert root.is_subdirectory is True
        assert root.is_www is False

    def test_flat_template(self, flat_template: Path):
        root = resolve_content_root(AcquiredContent(path=flat_template))
        assert root == ContentRoot(path=flat_template)

    def test_stock_template(self, config):
        root = resolve_content_root(AcquiredContent(path=config.stock_template_dir))
        assert root.path == config.stock_asset_dir
        assert root.is_subdirectory

    def test_missing_directory(self, tmp_path: Path):
        missing = tmp_path / "doesnotexist"
        with pytest.raises(InvalidTemplateError, match="Could not find directory"):
            resolve_content_root(AcquiredContent(path=missing))

    def test_pointer_to_missing_directory(self, tmp_path: Path):
        (tmp_path / "package.json").write_text(json.dumps({"dirname": "gone"}), encoding="utf-8")
        with pytest.raises(InvalidTemplateError) as exc_info:
            resolve_content_root(AcquiredContent(path=tmp_path))
        assert exc_info.value.path == (tmp_path / "gone").resolve()

    def test_missing_www_directory(self, tmp_path: Path):
        with pytest.raises(InvalidTemplateError, match="Could not find directory"):
            resolve_content_root(AcquiredContent(path=tmp_path / "www"))
