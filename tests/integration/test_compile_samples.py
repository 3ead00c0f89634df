"""
End-to-end compilation of the sample inputs.
"""

import ast

import pytest

from nativeexport import compile_path, compile_tree
from nativeexport.frontend import load_tree
from nativeexport.models import ErrorMarker, RegistrationStatement, RpcMode


@pytest.mark.integration
class TestSampleModule:
    """Compiles tests/fixtures/sample_classes/player.py."""

    @pytest.fixture
    def result(self, sample_module_path):
        return compile_path(sample_module_path)

    def test_one_marked_class(self, result):
        assert [r.class_name for r in result.results] == ["Player"]

    def test_registration(self, result):
        """Test accepted methods in order with their export arguments."""
        items = result.results[0].registration.items
        assert [type(i) for i in items] == [
            RegistrationStatement,
            RegistrationStatement,
            ErrorMarker,
            RegistrationStatement,
        ]

        jump, shoot, _, teleport = items
        assert [a.name for a in jump.required] == ["height"]
        assert jump.optional == []
        assert shoot.rpc_mode == RpcMode.REMOTE
        assert [a.name for a in shoot.optional] == ["power"]
        assert shoot.returns == "bool"
        assert teleport.rpc_mode == RpcMode.MASTER_SYNC
        assert [a.name for a in teleport.required] == ["___unused_arg_2", "x"]

    def test_single_diagnostic(self, result, sample_module_path):
        """Test only the method without an owner is reported."""
        assert len(result.diagnostics) == 1
        diag = result.diagnostics[0]
        assert diag.method == "broken"
        assert diag.span.file == str(sample_module_path)

    def test_output_is_valid_python(self, result):
        tree = ast.parse(result.output)
        names = [getattr(n, "name", None) for n in tree.body]
        assert "Player" in names
        assert "Plain" in names
        assert "_register_Player_methods" in names

    def test_to_dict(self, result):
        data = result.to_dict()
        player = data["classes"][0]
        assert player["export"]["method_count"] == 4
        assert player["diagnostics"][0]["kind"] == "signature"


@pytest.mark.integration
class TestSampleTree:
    """Compiles tests/fixtures/sample_classes/enemy.json."""

    def test_compile_path(self, sample_tree_path):
        result = compile_path(sample_tree_path)

        assert result.output is None
        enemy = result.results[0]
        assert [i.method_name for i in enemy.registration.items] == ["attack", "borrow"]
        assert isinstance(enemy.registration.items[1], ErrorMarker)
        assert [d.message for d in result.diagnostics] == [
            "lifetime parameters not allowed in exported functions"
        ]

    def test_matches_compile_tree(self, sample_tree_path):
        """Test compile_path and compile_tree agree for tree input."""
        by_path = compile_path(sample_tree_path)
        by_tree = compile_tree(load_tree(sample_tree_path), str(sample_tree_path))

        assert by_path.to_dict() == by_tree.to_dict()

    def test_verbatim_member_kept(self, sample_tree_path):
        result = compile_path(sample_tree_path)
        items = result.results[0].implementation.items
        assert items[2].text == "health = 100"
