"""Mapping of API type expressions to Python type references."""

from dataclasses import dataclass, replace
from enum import StrEnum, auto

from .parser import ValidationError, parse_type
from .types import APIDescription, FieldDescriptor, GenerationError

# Map API scalar names to Python type annotations
SCALAR_TYPE_MAP = {
    "Integer": "int",
    "Float": "float",
    "Float number": "float",
    "String": "str",
    "Boolean": "bool",
    "True": "bool",
}

# Zero values of the Python scalars
SCALAR_ZERO = {
    "int": "0",
    "float": "0.0",
    "str": '""',
    "bool": "False",
}

FILE_TYPE = "InputFile"
MEDIA_FAMILY = "InputMedia"

# Optional primitives whose wire protocol tells "omitted" apart from "present but empty".
# Keyed by (owner name, wire field name).
NULLABLE_PRIMITIVES = frozenset(
    [
        ("editForumTopic", "icon_custom_emoji_id"),
    ]
)


class TypeKind(StrEnum):
    """Classification of a mapped type."""

    SCALAR = auto()
    FILE = auto()
    AGGREGATE = auto()
    INTERFACE = auto()
    SEQUENCE = auto()


@dataclass(frozen=True)
class TypeRef:
    """A Python type reference produced for an API type expression.

    For sequences, ``item`` holds the element type and ``name`` is empty.
    """

    kind: TypeKind
    name: str = ""
    item: "TypeRef | None" = None
    nullable: bool = False

    @property
    def annotation(self) -> str:
        if self.kind == TypeKind.SEQUENCE:
            assert self.item is not None
            base = f"list[{self.item.annotation}]"
        else:
            base = self.name
        return f"{base} | None" if self.nullable else base

    @property
    def is_sequence(self) -> bool:
        return self.kind == TypeKind.SEQUENCE


def zero_value(ref: TypeRef) -> str:
    """Python expression of the zero value for a type reference."""
    if ref.nullable or ref.kind != TypeKind.SCALAR:
        return "None"
    return SCALAR_ZERO[ref.name]


def decoder(ref: TypeRef) -> str:
    """Python expression of the callable decoding a wire value into ``ref``."""
    if ref.kind == TypeKind.SEQUENCE:
        assert ref.item is not None
        return f"list_of({decoder(ref.item)})"
    if ref.kind == TypeKind.SCALAR:
        return f"decode_{ref.name}"
    if ref.kind == TypeKind.FILE:
        return "decode_str"
    return f"{ref.name}.from_dict"


class TypeMapper:
    """Map field and return types of an API description to TypeRefs."""

    def __init__(self, api: APIDescription):
        self.api = api

    def resolve(self, type_expr: str) -> TypeRef:
        """Map a type expression without applying optional wrapping."""
        try:
            wire = parse_type(type_expr)
        except ValidationError as err:
            raise GenerationError(str(err)) from err

        if wire.name in SCALAR_TYPE_MAP:
            ref = TypeRef(TypeKind.SCALAR, SCALAR_TYPE_MAP[wire.name])
        elif wire.name == FILE_TYPE:
            ref = TypeRef(TypeKind.FILE, FILE_TYPE)
        elif wire.name in self.api.types:
            kind = TypeKind.INTERFACE if self.api.types[wire.name].is_interface else TypeKind.AGGREGATE
            ref = TypeRef(kind, wire.name)
        else:
            raise GenerationError(f"Unknown type: {wire.name}")

        for _ in range(wire.array_depth):
            ref = TypeRef(TypeKind.SEQUENCE, item=ref)
        return ref

    def map_field(self, field: FieldDescriptor, owner: str) -> TypeRef:
        """Map a field of the type or method named ``owner``."""
        try:
            ref = self.resolve(field.preferred_type)
        except GenerationError as err:
            raise GenerationError(f"field {field.name}: {err}") from err

        if field.required:
            return ref
        if ref.kind != TypeKind.SCALAR or (owner, field.name) in NULLABLE_PRIMITIVES:
            return replace(ref, nullable=True)
        return ref

    def map_returns(self, returns: list[str]) -> TypeRef:
        """Map the primary return type of a method."""
        try:
            return self.resolve(returns[0])
        except GenerationError as err:
            raise GenerationError(f"return type: {err}") from err

    def is_media(self, ref: TypeRef) -> bool:
        """Check if a type reference denotes the media family or one of its members."""
        if ref.kind == TypeKind.INTERFACE:
            return ref.name == MEDIA_FAMILY
        if ref.kind == TypeKind.AGGREGATE:
            return MEDIA_FAMILY in self.api.types[ref.name].subtype_of
        return False
