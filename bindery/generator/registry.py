"""Registry of polymorphic families and their implementers."""

import logging
import re
from dataclasses import dataclass

from .typemap import FILE_TYPE, MEDIA_FAMILY
from .types import APIDescription, GenerationError, TypeDescriptor

logger = logging.getLogger(__name__)

# Matches constants pinned by a field description, e.g. 'always “creator”' or 'must be photo'
_CONSTANT_RE = re.compile(r"(?:always|must be)\s+[“\"]?([A-Za-z_][A-Za-z0-9_-]*)[”\"]?")


@dataclass(frozen=True)
class Family:
    """A polymorphic family: a zero-field type and its concrete implementers.

    With a ``discriminator``, payloads are dispatched on that wire field using
    ``tags`` (pairs of tag value and implementer name). Without one, payloads
    are dispatched on their shape.
    """

    name: str
    implementers: tuple[str, ...]
    discriminator: str | None = None
    tags: tuple[tuple[str, str], ...] = ()


def media_tag(type_name: str) -> str:
    """Discriminator value of a media family member (``InputMediaPhoto`` -> ``photo``)."""
    return type_name.removeprefix(MEDIA_FAMILY).lower()


def _pinned_constant(tg_type: TypeDescriptor, field_name: str) -> str | None:
    for f in tg_type.fields:
        if f.name == field_name:
            match = _CONSTANT_RE.search(f.description)
            return match.group(1) if match else None
    return None


def _find_discriminator(
    api: APIDescription, implementers: tuple[str, ...]
) -> tuple[str | None, tuple[tuple[str, str], ...]]:
    if not implementers:
        return None, ()

    first = api.types[implementers[0]]
    for candidate in first.fields:
        tags: dict[str, str] = {}
        for name in implementers:
            tag = _pinned_constant(api.types[name], candidate.name)
            if tag is None or tag in tags:
                break
            tags[tag] = name
        else:
            return candidate.name, tuple(sorted(tags.items()))
    return None, ()


def build_registry(api: APIDescription) -> dict[str, Family]:
    """Derive every polymorphic family of an API description."""
    implementers: dict[str, list[str]] = {
        name: [] for name in api.type_names() if api.types[name].is_interface and name != FILE_TYPE
    }

    for name in api.type_names():
        tg_type = api.types[name]
        for parent in tg_type.subtype_of:
            if parent not in api.types:
                raise GenerationError(f"type {name}: subtype of undeclared type {parent}")
            if parent not in implementers:
                raise GenerationError(f"type {name}: subtype of {parent}, which is not a polymorphic type")
            if tg_type.is_interface:
                raise GenerationError(f"type {name}: polymorphic types cannot implement {parent}")
            implementers[parent].append(name)

    families: dict[str, Family] = {}
    for name, members in implementers.items():
        ordered = tuple(members)
        if name == MEDIA_FAMILY:
            discriminator: str | None = "type"
            tags = tuple(sorted((media_tag(member), member) for member in ordered))
        else:
            discriminator, tags = _find_discriminator(api, ordered)
        families[name] = Family(name, ordered, discriminator, tags)
        logger.debug(
            "Family %s: %d implementers, discriminator %s", name, len(ordered), discriminator
        )
    return families

