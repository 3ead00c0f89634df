"""
Base enumerations used throughout the data models.

These enums provide type-safe values for the categorical fields of the
syntax tree, the export metadata and the diagnostics.
"""

from enum import Enum


class RpcMode(str, Enum):
    """How an exported method may be invoked across the replication boundary.

    Values are the literal names accepted by the ``rpc`` directive key.
    Members are ordered by declaration, not by value.
    """

    DISABLED = "disabled"
    REMOTE = "remote"
    REMOTE_SYNC = "remote_sync"
    MASTER = "master"
    PUPPET = "puppet"
    MASTER_SYNC = "master_sync"
    PUPPET_SYNC = "puppet_sync"

    @classmethod
    def parse(cls, text: str) -> "RpcMode | None":
        """Map a literal mode name to its member.

        Args:
            text: Mode name as written in the directive (case-sensitive)

        Returns:
            The matching member, or None if the name is unknown
        """
        for mode in cls:
            if mode.value == text:
                return mode
        return None

    @property
    def rank(self) -> int:
        """Position of the member in declaration order."""
        return list(type(self)).index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, RpcMode):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, RpcMode):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, RpcMode):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, RpcMode):
            return NotImplemented
        return self.rank >= other.rank


class GenericKind(str, Enum):
    """Kind of generic parameter declared on a method."""

    TYPE = "type"
    LIFETIME = "lifetime"
    CONST = "const"


class ParamKind(str, Enum):
    """How a parameter binds call arguments."""

    POSITIONAL = "positional"
    VAR_POSITIONAL = "var_positional"  # *args
    KEYWORD_ONLY = "keyword_only"
    VAR_KEYWORD = "var_keyword"  # **kwargs


class LitType(str, Enum):
    """Type of a literal value inside an attribute payload."""

    STR = "str"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    NONE = "none"
    OTHER = "other"


class DiagnosticKind(str, Enum):
    """Category of a compile-time diagnostic.

    Determines how far the failure reaches: a whole directive, a single
    name/value pair, or a single method.
    """

    DIRECTIVE_SHAPE = "directive_shape"  # Malformed payload, directive not parsed
    SEMANTIC = "semantic"  # Bad pair, dropped, siblings still parsed
    SIGNATURE = "signature"  # Method rejected, siblings unaffected


class ExportStatus(str, Enum):
    """Validation state of an exported method."""

    PARSED = "parsed"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
