"""Type definitions for API descriptions and code generation."""

from dataclasses import dataclass, field

from dataclasses_json import DataClassJsonMixin


class GenerationError(RuntimeError):
    """Raised when an API description cannot be compiled."""


@dataclass(frozen=True)
class WireType(DataClassJsonMixin):
    """A parsed type expression.

    ``Array of Array of PhotoSize`` parses to ``WireType("PhotoSize", 2)``.
    """

    name: str
    array_depth: int = 0

    @property
    def is_array(self) -> bool:
        return self.array_depth > 0


@dataclass(frozen=True)
class FieldDescriptor(DataClassJsonMixin):
    """A wire field of a type or method.

    ``types`` lists the candidate type expressions, preferred first.
    """

    name: str
    types: list[str]
    required: bool = False
    description: str = ""

    @property
    def preferred_type(self) -> str:
        # Union-typed fields always take the first declared candidate.
        return self.types[0]


@dataclass(frozen=True)
class TypeDescriptor(DataClassJsonMixin):
    """A named API type.

    A type without fields is a polymorphic marker; every type listing it in
    ``subtype_of`` implements it.
    """

    name: str
    fields: list[FieldDescriptor] = field(default_factory=list)
    subtype_of: list[str] = field(default_factory=list)
    description: list[str] = field(default_factory=list)
    href: str = ""

    @property
    def is_interface(self) -> bool:
        return len(self.fields) == 0


@dataclass(frozen=True)
class MethodDescriptor(DataClassJsonMixin):
    """A named API operation."""

    name: str
    returns: list[str]
    fields: list[FieldDescriptor] = field(default_factory=list)
    description: list[str] = field(default_factory=list)
    href: str = ""

    @property
    def required_fields(self) -> list[FieldDescriptor]:
        return [f for f in self.fields if f.required]

    @property
    def optional_fields(self) -> list[FieldDescriptor]:
        return [f for f in self.fields if not f.required]


@dataclass(frozen=True)
class APIDescription(DataClassJsonMixin):
    """Represents a complete API description."""

    types: dict[str, TypeDescriptor] = field(default_factory=dict)
    methods: dict[str, MethodDescriptor] = field(default_factory=dict)

    def type_names(self) -> list[str]:
        """Type names in generation order."""
        return sorted(self.types)

    def method_names(self) -> list[str]:
        """Method names in generation order."""
        return sorted(self.methods)


BOOLEAN_TYPES = frozenset(["Boolean", "True"])


def is_boolean(type_name: str) -> bool:
    """Check if a type expression denotes a boolean."""
    return type_name in BOOLEAN_TYPES
