"""Compilation of API types to Python dataclasses and interfaces."""

import json
import logging
from dataclasses import dataclass

from .registry import Family, media_tag
from .typemap import FILE_TYPE, MEDIA_FAMILY, TypeKind, TypeMapper, TypeRef, decoder, zero_value
from .types import APIDescription, FieldDescriptor, GenerationError
from .util import comment, docstring, member_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratedMember:
    """A dataclass member of a generated struct."""

    name: str
    wire_name: str
    ref: TypeRef
    definition: str
    comment: str

    @property
    def annotation(self) -> str:
        return self.ref.annotation

    @property
    def decoder(self) -> str:
        return decoder(self.ref)


@dataclass(frozen=True)
class GeneratedInterface:
    name: str
    docstring: str


@dataclass(frozen=True)
class GeneratedStruct:
    name: str
    bases: str
    docstring: str
    members: list[GeneratedMember]
    encode_override: str


def _member_definition(field: FieldDescriptor, ref: TypeRef) -> str:
    args = [f'"{field.name}"']
    if field.required:
        args.append("required=True")
    if ref.kind == TypeKind.FILE:
        args.append("file=True")

    if field.required and ref.kind == TypeKind.AGGREGATE:
        args.append(f"default_factory=lambda: {ref.name}()")
    else:
        args.append(f"default={zero_value(ref)}")
    return f"wire_field({', '.join(args)})"


def _tuple_literal(names: list[str] | tuple[str, ...]) -> str:
    if len(names) == 1:
        return f"({names[0]},)"
    return f"({', '.join(names)})"


class TypeCompiler:
    """Compile the type universe of an API description."""

    def __init__(self, api: APIDescription, mapper: TypeMapper, families: dict[str, Family]):
        self.api = api
        self.mapper = mapper
        self.families = families

    def is_media_member(self, type_name: str) -> bool:
        return MEDIA_FAMILY in self.api.types[type_name].subtype_of

    def compile_interface(self, name: str) -> GeneratedInterface:
        tg_type = self.api.types[name]
        family = self.families[name]
        paragraphs = list(tg_type.description)
        if family.implementers:
            paragraphs.append(f"Implemented by: {', '.join(family.implementers)}.")
        if tg_type.href:
            paragraphs.append(tg_type.href)
        return GeneratedInterface(name=name, docstring=docstring(paragraphs))

    def compile_member(self, owner: str, field: FieldDescriptor) -> GeneratedMember:
        ref = self.mapper.map_field(field, owner)
        return GeneratedMember(
            name=member_name(field.name),
            wire_name=field.name,
            ref=ref,
            definition=_member_definition(field, ref),
            comment=comment(field.description),
        )

    def encode_override(self, name: str, members: list[GeneratedMember]) -> str:
        """Body of the generated to_dict() override, or "" when none is needed.

        Unset sequences are sent as empty arrays, and media family members
        carry their constant type discriminator.
        """
        sequences = [m for m in members if m.ref.is_sequence]
        is_media = self.is_media_member(name)
        if not sequences and not is_media:
            return ""

        lines = []
        target = "self"
        if sequences:
            target = "shadow"
            lines.append("shadow = replace(self)")
            for m in sequences:
                lines.append(f"if shadow.{m.name} is None:")
                lines.append(f"    shadow.{m.name} = []")
        if is_media:
            lines.append(f'return {{"type": {json.dumps(media_tag(name))}, **Struct.to_dict({target})}}')
        else:
            lines.append(f"return Struct.to_dict({target})")
        return "\n".join(lines)

    def compile_struct(self, name: str) -> GeneratedStruct:
        tg_type = self.api.types[name]
        is_media = self.is_media_member(name)

        members = []
        for field in tg_type.fields:
            # The media type discriminator is set by the encoder, never by the caller.
            if is_media and field.name == "type":
                continue
            members.append(self.compile_member(name, field))

        seen: set[str] = set()
        for m in members:
            if m.name in seen:
                raise GenerationError(f"member {m.name} generated more than once")
            seen.add(m.name)

        bases = ["MediaStruct" if is_media else "Struct"] + sorted(tg_type.subtype_of)
        paragraphs = list(tg_type.description)
        if tg_type.href:
            paragraphs.append(tg_type.href)

        return GeneratedStruct(
            name=name,
            bases=", ".join(bases),
            docstring=docstring(paragraphs),
            members=members,
            encode_override=self.encode_override(name, members),
        )

    def registration(self, family: Family) -> str:
        """Python statement registering the implementers of a family."""
        lines = [f"{family.name}.register("]
        lines.append(f"    implementers={_tuple_literal(family.implementers)},")
        if family.discriminator is not None:
            lines.append(f"    discriminator={json.dumps(family.discriminator)},")
            lines.append("    tags={")
            for tag, impl in family.tags:
                lines.append(f"        {json.dumps(tag)}: {impl},")
            lines.append("    },")
        lines.append(")")
        return "\n".join(lines)

    def compile(self) -> tuple[list[GeneratedInterface], list[GeneratedStruct], list[str]]:
        interfaces = []
        structs = []
        for name in self.api.type_names():
            if name == FILE_TYPE:
                continue
            try:
                if self.api.types[name].is_interface:
                    interfaces.append(self.compile_interface(name))
                else:
                    structs.append(self.compile_struct(name))
            except GenerationError as err:
                raise GenerationError(f"failed to generate type {name}: {err}") from err
            logger.debug("Compiled type %s", name)

        registrations = [self.registration(self.families[i.name]) for i in interfaces]
        return interfaces, structs, registrations
