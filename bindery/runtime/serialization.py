"""Encoding and decoding of generated types to and from the wire."""

import json
import os
from decimal import Decimal
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, fields, replace
from typing import Any, ClassVar, Self

from .types import NamedFile

WIRE = "wire"

# Sentinel for missing default
_MISSING: Any = object()


class BindingError(RuntimeError):
    """Base class for errors raised by generated bindings."""


class EncodingError(BindingError):
    """Raised when a request field cannot be serialized."""

    def __init__(self, field_name: str, cause: Exception):
        super().__init__(f"failed to marshal field {field_name}: {cause}")
        self.field_name = field_name
        self.cause = cause


class DecodingError(BindingError):
    """Raised when a response does not have the expected shape."""


class FileKindError(BindingError, TypeError):
    """Raised when a file field is given a value of an unsupported kind."""


@dataclass(frozen=True)
class WireFieldInfo:
    """Metadata for a generated struct member."""

    name: str
    required: bool = False
    file: bool = False


def wire_field(
    name: str,
    *,
    required: bool = False,
    file: bool = False,
    default: Any = _MISSING,
    default_factory: Any = _MISSING,
) -> Any:
    """Define a struct member with its wire metadata.

    Args:
        name: The wire name of the field.
        required: Whether the API always sends the field.
        file: Whether the field holds a file reference.
        default: Default value for the field.
        default_factory: Factory function for default value.

    Returns:
        A dataclass field with wire metadata attached.
    """
    metadata = {WIRE: WireFieldInfo(name, required, file)}

    if default is not _MISSING:
        return field(default=default, metadata=metadata)
    if default_factory is not _MISSING:
        return field(default_factory=default_factory, metadata=metadata)
    return field(metadata=metadata)


def _wire_fields(cls_or_instance: Any) -> list[tuple[str, WireFieldInfo]]:
    return [(f.name, f.metadata[WIRE]) for f in fields(cls_or_instance) if WIRE in f.metadata]


def to_wire(value: Any) -> Any:
    """Convert a value to its JSON-compatible wire form."""
    if isinstance(value, Struct):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [to_wire(item) for item in value]
    return value


class Struct:
    """Base class for generated aggregate types.

    Subclasses are @dataclass decorated and declare members with wire_field().
    Generated code overrides from_dict(), and overrides to_dict() where members
    need defaulting on the wire.

    Example:
        @dataclass
        class User(Struct):
            id: int = wire_field("id", required=True, default=0)
            username: str = wire_field("username", default="")
    """

    def to_dict(self) -> dict[str, Any]:
        """Encode this struct to a JSON-compatible dict, omitting absent members."""
        data: dict[str, Any] = {}
        for attr, info in _wire_fields(self):
            value = getattr(self, attr)
            if value is None:
                continue
            data[info.name] = to_wire(value)
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_dict(cls, data: Any) -> Self:
        """Decode a struct from its wire form. Generated code overrides this."""
        raise NotImplementedError("from_dict() must be implemented by generated code")

    @classmethod
    def wire_names(cls) -> frozenset[str]:
        return frozenset(info.name for _, info in _wire_fields(cls))

    @classmethod
    def required_wire_names(cls) -> frozenset[str]:
        return frozenset(info.name for _, info in _wire_fields(cls) if info.required)


class MediaStruct(Struct):
    """Base class for members of the media family.

    Media values are sent as JSON fragments whose binary members travel as
    side-channel parts referenced by attachment tokens.
    """

    def media_params(self, name: str, parts: dict[str, NamedFile]) -> str:
        """Serialize as media, registering binary members in ``parts``.

        The ``media`` member registers under ``name``; any other file member
        registers under ``name_<wire name>``.
        """
        shadow = replace(self)
        for attr, info in _wire_fields(self):
            value = getattr(shadow, attr)
            if not info.file or value is None or isinstance(value, str):
                continue
            key = name if info.name == "media" else f"{name}_{info.name}"
            parts[key] = as_named_file(key, value)
            setattr(shadow, attr, f"attach://{key}")
        return json.dumps(shadow.to_dict(), separators=(",", ":"))


class Interface:
    """Base class for generated polymorphic types.

    Generated code registers the implementers of each interface once, after
    all types are defined. Decoding dispatches on the discriminator field when
    one is registered, and on the payload shape otherwise.
    """

    _implementers: ClassVar[tuple[type[Struct], ...]] = ()
    _discriminator: ClassVar[str | None] = None
    _tags: ClassVar[dict[str, type[Struct]]] = {}

    @classmethod
    def register(
        cls,
        *,
        implementers: tuple[type[Struct], ...],
        discriminator: str | None = None,
        tags: dict[str, type[Struct]] | None = None,
    ) -> None:
        cls._implementers = implementers
        cls._discriminator = discriminator
        cls._tags = dict(tags or {})

    @classmethod
    def implementers(cls) -> tuple[type[Struct], ...]:
        return cls._implementers

    @classmethod
    def from_dict(cls, data: Any) -> Any:
        """Decode the implementer matching ``data``."""
        values = expect_object(data, cls.__name__)

        if cls._discriminator is not None:
            tag = values.get(cls._discriminator)
            impl = cls._tags.get(tag) if isinstance(tag, str) else None
            if impl is None:
                raise DecodingError(
                    f"no {cls.__name__} implementer for {cls._discriminator}={tag!r}"
                )
            return impl.from_dict(values)

        best: type[Struct] | None = None
        best_score = -1
        for impl in cls._implementers:
            if not impl.required_wire_names() <= values.keys():
                continue
            score = len(impl.wire_names() & values.keys())
            if score > best_score:
                best, best_score = impl, score
        if best is None:
            raise DecodingError(f"no {cls.__name__} implementer matches the payload")
        return best.from_dict(values)


# Decoding


def expect_object(data: Any, type_name: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise DecodingError(f"cannot decode {type(data).__name__} into {type_name}")
    return data


def decode_int(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodingError(f"expected an integer, got {value!r}")
    return value


def decode_float(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodingError(f"expected a number, got {value!r}")
    return float(value)


def decode_str(value: Any) -> str:
    if not isinstance(value, str):
        raise DecodingError(f"expected a string, got {value!r}")
    return value


def decode_bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise DecodingError(f"expected a boolean, got {value!r}")
    return value


def list_of(decoder: Callable[[Any], Any]) -> Callable[[Any], list[Any]]:
    """Build a decoder for a list whose elements are decoded by ``decoder``."""

    def decode_list(value: Any) -> list[Any]:
        if not isinstance(value, list):
            raise DecodingError(f"expected an array, got {type(value).__name__}")
        return [decoder(item) for item in value]

    return decode_list


def decode_struct(cls: type[Struct], data: Any, /, **decoders: Callable[[Any], Any]) -> Any:
    """Decode ``data`` into ``cls`` using one decoder per member.

    Absent and null wire fields keep the member default.
    """
    values = expect_object(data, cls.__name__)
    kwargs: dict[str, Any] = {}
    for attr, info in _wire_fields(cls):
        raw = values.get(info.name)
        if raw is None:
            continue
        try:
            kwargs[attr] = decoders[attr](raw)
        except DecodingError as err:
            raise DecodingError(f"{cls.__name__}.{info.name}: {err}") from err
    return cls(**kwargs)


def load_payload(raw: bytes | str) -> Any:
    try:
        return json.loads(raw)
    except ValueError as err:
        raise DecodingError(f"invalid response payload: {err}") from err


def decode_result(raw: bytes | str, decoder: Callable[[Any], Any]) -> Any:
    """Decode a response payload."""
    return decoder(load_payload(raw))


def decode_dual_result(raw: bytes | str, decoder: Callable[[Any], Any], zero: Any) -> tuple[Any, bool]:
    """Decode a response that is either a value or a boolean.

    Returns ``(value, True)`` when the payload decodes as the value, otherwise
    ``(zero, flag)`` when it decodes as a boolean. Raises the boolean decoding
    error when it is neither.
    """
    value = load_payload(raw)
    try:
        return decoder(value), True
    except DecodingError:
        flag = decode_bool(value)
    return zero, flag


# Encoding


def format_int(value: int) -> str:
    return str(value)


def format_float(value: float) -> str:
    """Shortest fixed-point form, without exponent or trailing zeros (1e-05 -> 0.00001)."""
    return f"{Decimal(repr(float(value))).normalize():f}"


def format_bool(value: bool) -> str:
    return "true" if value else "false"


def encode_json(name: str, value: Any) -> str:
    """Serialize a composite request field to compact JSON."""
    try:
        return json.dumps(to_wire(value), separators=(",", ":"))
    except (TypeError, ValueError) as err:
        raise EncodingError(name, err) from err


def as_named_file(name: str, value: Any) -> NamedFile:
    """Wrap a binary payload for upload under ``name``."""
    if isinstance(value, NamedFile):
        return value
    if hasattr(value, "read"):
        return NamedFile(value, os.path.basename(getattr(value, "name", "") or "") or name)
    raise FileKindError(f"unknown type for file field {name}: {type(value).__name__}")


def attach_file(
    name: str,
    value: Any,
    params: dict[str, str],
    parts: dict[str, NamedFile],
    *,
    allow_string: bool = True,
) -> None:
    """Write a file reference: strings are sent as-is, binaries as attachments."""
    if isinstance(value, str):
        if not allow_string:
            raise FileKindError(f"field {name} only accepts binary uploads, got a string")
        params[name] = value
        return

    parts[name] = as_named_file(name, value)
    params[name] = f"attach://{name}"


def _expect_media(name: str, value: Any) -> None:
    if not isinstance(value, MediaStruct):
        raise FileKindError(f"unknown type for media field {name}: {type(value).__name__}")


def attach_media(name: str, value: MediaStruct, parts: dict[str, NamedFile]) -> str:
    """Serialize a media value, registering its binaries under ``name``."""
    _expect_media(name, value)
    try:
        return value.media_params(name, parts)
    except FileKindError:
        raise
    except (TypeError, ValueError) as err:
        raise EncodingError(name, err) from err


def attach_media_list(name: str, values: Iterable[MediaStruct], parts: dict[str, NamedFile]) -> str:
    """Serialize a list of media values; element ``i`` registers under ``name + i``."""
    fragments = []
    for idx, value in enumerate(values):
        _expect_media(f"{name}[{idx}]", value)
        try:
            fragments.append(value.media_params(f"{name}{idx}", parts))
        except FileKindError:
            raise
        except (TypeError, ValueError) as err:
            raise EncodingError(f"{name}[{idx}]", err) from err
    return "[" + ",".join(fragments) + "]"
