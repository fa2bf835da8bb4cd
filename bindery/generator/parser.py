"""API description loader and type expression parser using Lark."""

import json
import logging
import os
from typing import Any

from lark import Lark
from lark.exceptions import LarkError
from lark.visitors import Transformer

from .types import APIDescription, FieldDescriptor, WireType, is_boolean

logger = logging.getLogger(__name__)

_g_parser: Lark | None = None


class ValidationError(RuntimeError):
    """Raised when API description validation fails."""


class TreeTransformer(Transformer):
    """Transform a type expression parse tree into a WireType."""

    def array(self, args: list[Any]) -> WireType:
        inner: WireType = args[0]
        return WireType(name=inner.name, array_depth=inner.array_depth + 1)

    def named(self, args: list[Any]) -> WireType:
        return WireType(name=" ".join(str(word) for word in args))


def _get_parser() -> Lark:
    global _g_parser

    if not _g_parser:
        with open(f"{os.path.dirname(__file__)}/typeexpr.lark", encoding="utf-8") as f:
            grammar = f.read()
        _g_parser = Lark(grammar, parser="lalr")
    return _g_parser


def parse_type(text: str) -> WireType:
    """Parse a type expression such as ``Array of PhotoSize``."""
    try:
        tree = _get_parser().parse(text)
    except LarkError as err:
        raise ValidationError(f"Invalid type expression {text!r}") from err

    result = TreeTransformer().transform(tree)
    if not isinstance(result, WireType):
        raise ValidationError(f"Invalid type expression {text!r}")
    return result


def _validate_fields(owner: str, fields: list[FieldDescriptor]) -> None:
    seen: set[str] = set()
    for f in fields:
        if f.name in seen:
            raise ValidationError(f"{owner}: field {f.name} declared more than once")
        seen.add(f.name)
        if not f.types:
            raise ValidationError(f"{owner}: field {f.name} has no candidate types")
        for type_name in f.types:
            try:
                parse_type(type_name)
            except ValidationError as err:
                raise ValidationError(f"{owner}: field {f.name}: {err}") from err


def validate(api: APIDescription) -> None:
    """Validate a loaded API description."""
    for name, tg_type in api.types.items():
        if name != tg_type.name:
            raise ValidationError(f"type {name} is declared under the name {tg_type.name}")
        _validate_fields(f"type {name}", tg_type.fields)
        for parent in tg_type.subtype_of:
            if parent not in api.types:
                raise ValidationError(f"type {name} is a subtype of {parent}, but it is not declared")

    for name, method in api.methods.items():
        if name != method.name:
            raise ValidationError(f"method {name} is declared under the name {method.name}")
        _validate_fields(f"method {name}", method.fields)
        if len(method.returns) not in (1, 2):
            raise ValidationError(
                f"method {name} must declare one or two return types, got {len(method.returns)}"
            )
        if len(method.returns) == 2 and not is_boolean(method.returns[1]):
            raise ValidationError(
                f"method {name}: second return type must be a boolean, got {method.returns[1]}"
            )
        for type_name in method.returns:
            try:
                parse_type(type_name)
            except ValidationError as err:
                raise ValidationError(f"method {name}: {err}") from err


def load(text: str) -> APIDescription:
    """Load an API description from its JSON document."""
    try:
        document = json.loads(text)
    except ValueError as err:
        raise ValidationError(f"API description is not valid JSON: {err}") from err

    if not isinstance(document, dict):
        raise ValidationError("API description must be a JSON object")

    try:
        api = APIDescription.from_dict(
            {"types": document.get("types", {}), "methods": document.get("methods", {})}
        )
    except (KeyError, TypeError, ValueError) as err:
        raise ValidationError(f"Malformed API description: {err}") from err

    validate(api)
    logger.debug("Loaded %d types and %d methods", len(api.types), len(api.methods))
    return api
