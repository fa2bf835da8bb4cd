"""Python client binding generator for API descriptions."""

import logging
from importlib import resources

from jinja2 import Environment, PackageLoader

from .methods import MethodCompiler
from .registry import build_registry
from .typegen import TypeCompiler
from .typemap import TypeMapper
from .types import APIDescription

logger = logging.getLogger(__name__)

RUNTIME_FILES = [
    "__init__.py",
    "types.py",
    "serialization.py",
    "client.py",
]

# Line statements swallow the blank lines after them; templates emit {{ BLANK_LINE }} instead.
env = Environment(
    loader=PackageLoader("bindery.generator", "templates"),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    line_comment_prefix="%%",
    line_statement_prefix="%",
)

template = env.get_template("python.py.j2")


def render(
    api: APIDescription,
    runtime_import: str = "bindery_runtime",
    client_name: str = "Bot",
) -> str:
    """Render an API description to Python source code.

    The whole module is compiled before any text is produced, so a
    GenerationError never leaves partial output behind.
    """
    mapper = TypeMapper(api)
    families = build_registry(api)
    interfaces, structs, registrations = TypeCompiler(api, mapper, families).compile()
    all_opts, methods = MethodCompiler(api, mapper, client_name).compile()

    logger.info(
        "Rendering %d interfaces, %d structs and %d methods",
        len(interfaces),
        len(structs),
        len(methods),
    )
    return template.render(
        interfaces=interfaces,
        structs=structs,
        registrations=registrations,
        all_opts=all_opts,
        methods=methods,
        client_name=client_name,
        runtime_import=runtime_import,
        BLANK_LINE="",
    )


def runtime() -> dict[str, str]:
    """Return the Python runtime files as a dict of filename -> content."""
    result: dict[str, str] = {}
    for filename in RUNTIME_FILES:
        content = resources.files("bindery.runtime").joinpath(filename).read_text()
        result[filename] = content
    return result
