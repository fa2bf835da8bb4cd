"""Identifier conversions from wire names to Python names."""

import keyword
import re

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def to_snake_case(name: str) -> str:
    """Convert ``sendMessage`` to ``send_message``."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def to_pascal_case(name: str) -> str:
    """Convert ``sendMessage`` or ``send_message`` to ``SendMessage``."""
    return "".join(part[:1].upper() + part[1:] for part in to_snake_case(name).split("_") if part)


def safe_identifier(name: str) -> str:
    """Suffix Python keywords with an underscore."""
    if keyword.iskeyword(name):
        return name + "_"
    return name


def member_name(wire_name: str) -> str:
    """Name of the generated dataclass member for a wire field."""
    return safe_identifier(wire_name)


def param_name(wire_name: str) -> str:
    """Name of the generated method parameter for a wire field."""
    return safe_identifier(wire_name)


def method_name(wire_name: str) -> str:
    """Name of the generated client method for an API method."""
    return safe_identifier(to_snake_case(wire_name))


def opts_name(wire_name: str) -> str:
    """Name of the generated options dataclass for an API method."""
    return to_pascal_case(wire_name) + "Opts"


def _escape_doc(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def docstring(paragraphs: list[str]) -> str:
    """Render paragraphs as an unindented docstring literal."""
    paragraphs = [_escape_doc(p.strip()) for p in paragraphs if p.strip()]
    if not paragraphs:
        return '""""""'
    if len(paragraphs) == 1 and "\n" not in paragraphs[0]:
        return f'"""{paragraphs[0]}"""'
    return '"""' + "\n\n".join(paragraphs) + '\n"""'


def comment(text: str) -> str:
    """Collapse text to a single comment line."""
    return " ".join(text.split())
