"""
Tests for the JSON/YAML syntax tree front-end.
"""

import json

import pytest
import yaml

from nativeexport.frontend import FrontendError, is_tree_file, load_tree, parse_tree
from nativeexport.models import GenericKind, Method, VerbatimItem

MINIMAL_BLOCK = {
    "type_name": "Enemy",
    "items": [
        {"kind": "method", "name": "f", "params": [{"name": "self"}, {"name": "owner"}]},
    ],
}


@pytest.mark.frontend
class TestParseTree:
    """Tests for parse_tree."""

    def test_single_block(self):
        blocks = parse_tree(MINIMAL_BLOCK)
        assert [b.type_name for b in blocks] == ["Enemy"]

    def test_list_of_blocks(self):
        blocks = parse_tree([MINIMAL_BLOCK, {**MINIMAL_BLOCK, "type_name": "Boss"}])
        assert [b.type_name for b in blocks] == ["Enemy", "Boss"]

    def test_blocks_mapping(self):
        blocks = parse_tree({"blocks": [MINIMAL_BLOCK]})
        assert len(blocks) == 1

    def test_missing_kind_rejected(self):
        """Test members must say whether they are methods."""
        data = {"type_name": "Enemy", "items": [{"name": "f"}]}
        with pytest.raises(FrontendError, match="Invalid syntax tree"):
            parse_tree(data, "enemy.json")

    def test_invalid_document(self):
        """Test non-block documents are rejected with the source name."""
        with pytest.raises(FrontendError) as exc_info:
            parse_tree("not a tree", "enemy.json")
        assert exc_info.value.path == "enemy.json"


@pytest.mark.frontend
class TestLoadTree:
    """Tests for load_tree."""

    def test_load_sample_json(self, sample_tree_path):
        """Test the sample tree loads with all member kinds."""
        blocks = load_tree(sample_tree_path)

        block = blocks[0]
        assert block.type_name == "Enemy"
        assert [type(i) for i in block.items] == [Method, Method, VerbatimItem]
        attack = block.items[0]
        assert attack.params[3].has_marker("opt")
        assert block.items[1].generics[0].kind == GenericKind.LIFETIME

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "enemy.yaml"
        path.write_text(yaml.safe_dump({"blocks": [MINIMAL_BLOCK]}))

        blocks = load_tree(path)
        assert blocks[0].methods[0].name == "f"

    def test_yaml_and_json_agree(self, tmp_path):
        """Test both encodings produce the same blocks."""
        json_path = tmp_path / "a.json"
        yaml_path = tmp_path / "a.yml"
        json_path.write_text(json.dumps(MINIMAL_BLOCK))
        yaml_path.write_text(yaml.safe_dump(MINIMAL_BLOCK))

        assert load_tree(json_path) == load_tree(yaml_path)

    def test_undecodable_file(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        with pytest.raises(FrontendError, match="Cannot decode tree"):
            load_tree(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FrontendError, match="Cannot read tree"):
            load_tree(tmp_path / "missing.json")


@pytest.mark.frontend
class TestIsTreeFile:
    """Tests for is_tree_file."""

    @pytest.mark.parametrize("name", ["a.json", "a.yaml", "a.yml", "A.JSON"])
    def test_tree_suffixes(self, name, tmp_path):
        assert is_tree_file(tmp_path / name)

    @pytest.mark.parametrize("name", ["a.py", "a.txt", "json"])
    def test_other_suffixes(self, name, tmp_path):
        assert not is_tree_file(tmp_path / name)
