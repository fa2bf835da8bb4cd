"""Selection and rendering of request field encodings."""

from dataclasses import dataclass
from enum import StrEnum, auto

from .typemap import TypeKind, TypeMapper, TypeRef
from .types import FieldDescriptor, GenerationError, MethodDescriptor
from .util import member_name

# Python expressions converting a scalar to its string wire form
SCALAR_FORMATTERS = {
    "int": "format_int({})",
    "float": "format_float({})",
    "bool": "format_bool({})",
    "str": "{}",
}

# Optional numbers are omitted when zero, except where a sibling field makes zero meaningful.
# Keyed by (method name, wire field name), valued by (sibling wire field name, sibling value).
ZERO_VALUE_OVERRIDES = {
    ("sendPoll", "correct_option_id"): ("type", "quiz"),
}


class Strategy(StrEnum):
    """How a request field becomes wire data."""

    SCALAR = auto()
    FILE = auto()
    MEDIA = auto()
    MEDIA_LIST = auto()
    COMPOSITE = auto()

    @property
    def uses_parts(self) -> bool:
        """Whether the strategy may register side-channel parts."""
        return self in (Strategy.FILE, Strategy.MEDIA, Strategy.MEDIA_LIST)


def choose_strategy(mapper: TypeMapper, ref: TypeRef) -> Strategy:
    """Pick the encoding strategy for a mapped field type."""
    if ref.kind == TypeKind.SCALAR:
        return Strategy.SCALAR
    if ref.kind == TypeKind.FILE:
        return Strategy.FILE
    if mapper.is_media(ref):
        return Strategy.MEDIA
    if ref.is_sequence and ref.item is not None and mapper.is_media(ref.item):
        return Strategy.MEDIA_LIST
    return Strategy.COMPOSITE


@dataclass(frozen=True)
class FieldEncoding:
    strategy: Strategy
    lines: list[str]


def _indent(lines: list[str]) -> list[str]:
    return ["    " + line for line in lines]


class FieldEncoder:
    """Render the statements writing one method field into the request.

    Generated statements write into the call-local ``_params`` map and, for
    file and media fields, the call-local ``_parts`` map.
    """

    def __init__(self, mapper: TypeMapper):
        self.mapper = mapper

    def encode(
        self,
        method: MethodDescriptor,
        field: FieldDescriptor,
        ref: TypeRef,
        expr: str,
        opts_expr: str = "opts",
    ) -> FieldEncoding:
        """Render the encoding of ``field``, whose value is the Python expression ``expr``."""
        strategy = choose_strategy(self.mapper, ref)
        if strategy == Strategy.SCALAR:
            lines = self._scalar(method, field, ref, expr, opts_expr)
        elif strategy == Strategy.FILE:
            allow_string = len(field.types) > 1
            lines = [
                f"if {expr} is not None:",
                f'    attach_file("{field.name}", {expr}, _params, _parts, allow_string={allow_string})',
            ]
        elif strategy == Strategy.MEDIA:
            lines = [f'_params["{field.name}"] = attach_media("{field.name}", {expr}, _parts)']
            if not field.required:
                lines = [f"if {expr} is not None:"] + _indent(lines)
        elif strategy == Strategy.MEDIA_LIST:
            lines = [
                f"if {expr} is not None:",
                f'    _params["{field.name}"] = attach_media_list("{field.name}", {expr}, _parts)',
            ]
        else:
            lines = [f'_params["{field.name}"] = encode_json("{field.name}", {expr})']
            if not field.required:
                lines = [f"if {expr} is not None:"] + _indent(lines)
        return FieldEncoding(strategy, lines)

    def _scalar(
        self,
        method: MethodDescriptor,
        field: FieldDescriptor,
        ref: TypeRef,
        expr: str,
        opts_expr: str,
    ) -> list[str]:
        assign = f'_params["{field.name}"] = {SCALAR_FORMATTERS[ref.name].format(expr)}'
        if field.required:
            return [assign]

        if ref.nullable:
            return [
                f"# {field.name} behaves differently when empty and when unset.",
                f"if {expr} is not None:",
                "    " + assign,
            ]

        if ref.name not in ("int", "float"):
            return [assign]

        override = ZERO_VALUE_OVERRIDES.get((method.name, field.name))
        if override is None:
            return [f"if {expr} != 0:", "    " + assign]

        sibling, value = override
        if not any(f.name == sibling and not f.required for f in method.fields):
            raise GenerationError(
                f"field {field.name} depends on optional field {sibling}, which is not declared"
            )
        return [
            f"# {field.name} must be sent, even when zero, if {sibling} is {value!r}.",
            f'if {opts_expr}.{member_name(sibling)} == "{value}" or {expr} != 0:',
            "    " + assign,
        ]
