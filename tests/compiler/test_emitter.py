"""
Tests for registration procedure emission.
"""

import pytest

from nativeexport.compiler import RegistrationEmitter, SignatureValidator
from nativeexport.models import (
    ErrorMarker,
    ExportArgs,
    ExportMethod,
    ExportStatus,
    RegistrationStatement,
    RpcMode,
    ValidationOutcome,
    WrapperArg,
)


@pytest.fixture
def validate():
    """Validate a method with the default validator."""
    validator = SignatureValidator()

    def _validate(method, args=None):
        return validator.validate(ExportMethod(signature=method, args=args or ExportArgs()))

    return _validate


@pytest.mark.compiler
class TestRegistrationEmitter:
    """Tests for RegistrationEmitter."""

    def test_parameter_partition(self, validate, make_method, make_param):
        """Test receiver, owner, required and optional split."""
        method = make_method(
            "shoot",
            "self",
            make_param("owner", annotation="Node"),
            make_param("target", annotation="str"),
            make_param("power", "opt", annotation="int"),
            make_param("spread", "opt"),
            returns="bool",
        )
        procedure, diagnostics = RegistrationEmitter().emit("Player", [validate(method)])

        assert diagnostics == []
        stmt = procedure.items[0]
        assert isinstance(stmt, RegistrationStatement)
        assert stmt.class_name == "Player"
        assert stmt.method_name == "shoot"
        assert stmt.receiver == WrapperArg(name="self")
        assert stmt.owner == WrapperArg(name="owner", annotation="Node")
        assert stmt.required == [WrapperArg(name="target", annotation="str")]
        assert [a.name for a in stmt.optional] == ["power", "spread"]
        assert stmt.returns == "bool"
        assert stmt.arity == 5

    def test_declared_count_without_markers(self, validate, make_method):
        """Test a declared count splits unmarked trailing parameters."""
        method = make_method("f", "self", "owner", "a", "b", "c")
        outcome = validate(method, ExportArgs(optional_arg_count=2))
        procedure, _ = RegistrationEmitter().emit("Player", [outcome])

        stmt = procedure.statements[0]
        assert [a.name for a in stmt.required] == ["a"]
        assert [a.name for a in stmt.optional] == ["b", "c"]

    def test_discard_names_match_signature(self, validate, make_method):
        """Test wrapper arguments use the same names as the normalized signature."""
        outcome = validate(make_method("f", "self", "owner", None, None))
        procedure, _ = RegistrationEmitter().emit("Player", [outcome])

        stmt = procedure.statements[0]
        assert [a.name for a in stmt.required] == ["___unused_arg_2", "___unused_arg_3"]
        assert [p.name for p in outcome.method.signature.params[2:]] == [
            a.name for a in stmt.required
        ]

    def test_rpc_mode_and_default_return(self, validate, make_method):
        """Test rpc mode is carried and a missing return renders as None."""
        outcome = validate(
            make_method("f", "self", "owner"), ExportArgs(rpc_mode=RpcMode.MASTER_SYNC)
        )
        procedure, _ = RegistrationEmitter().emit("Player", [outcome])

        stmt = procedure.statements[0]
        assert stmt.rpc_mode == RpcMode.MASTER_SYNC
        assert stmt.returns == "None"

    def test_rejected_methods_become_markers_in_place(self, validate, make_method):
        """Test declaration order is kept across accepted and rejected methods."""
        outcomes = [
            validate(make_method("a", "self", "owner")),
            validate(make_method("b", "self")),
            validate(make_method("c", "self", "owner")),
        ]
        procedure, diagnostics = RegistrationEmitter().emit("Player", outcomes)

        assert [type(i) for i in procedure.items] == [
            RegistrationStatement,
            ErrorMarker,
            RegistrationStatement,
        ]
        assert procedure.items[1].method_name == "b"
        assert procedure.items[1].diagnostics == outcomes[1].diagnostics
        # Validation diagnostics are not reported twice
        assert diagnostics == []

    def test_bound_rechecked_at_emission(self, make_method):
        """Test an out-of-range count is caught again when lowering."""
        outcome = ValidationOutcome(
            method=ExportMethod(
                signature=make_method("f", "self", "owner", "a"),
                args=ExportArgs(optional_arg_count=2),
            ),
            status=ExportStatus.ACCEPTED,
        )
        procedure, diagnostics = RegistrationEmitter().emit("Player", [outcome])

        assert isinstance(procedure.items[0], ErrorMarker)
        assert [d.message for d in diagnostics] == [
            "there can be at most 1 optional arguments, got 2"
        ]

    def test_unnamed_parameter_raises(self, make_method):
        """Test emission requires normalized parameter names."""
        outcome = ValidationOutcome(
            method=ExportMethod(signature=make_method("f", "self", "owner", None)),
            status=ExportStatus.ACCEPTED,
        )
        with pytest.raises(ValueError, match="named"):
            RegistrationEmitter().emit("Player", [outcome])

    def test_builder_name(self):
        """Test the builder parameter name is configurable."""
        procedure, _ = RegistrationEmitter(builder_name="reg").emit("Player", [])
        assert procedure.builder_name == "reg"
        assert procedure.items == []
