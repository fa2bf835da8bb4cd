"""Compilation of API methods to client methods and options dataclasses."""

import logging
from dataclasses import dataclass

from .encoding import FieldEncoder
from .typemap import TypeMapper, TypeRef, decoder, zero_value
from .types import APIDescription, GenerationError, MethodDescriptor
from .util import comment, docstring, member_name, method_name, opts_name, param_name

logger = logging.getLogger(__name__)

RESERVED_PARAMS = frozenset(["self", "opts"])


@dataclass(frozen=True)
class GeneratedOptsMember:
    name: str
    annotation: str
    default: str
    comment: str


@dataclass(frozen=True)
class GeneratedOpts:
    name: str
    docstring: str
    members: list[GeneratedOptsMember]


@dataclass(frozen=True)
class GeneratedMethod:
    name: str
    wire_name: str
    signature: str
    returns: str
    docstring: str
    body: str
    uses_parts: bool
    dual_return: bool


class MethodCompiler:
    """Compile the operations of an API description."""

    def __init__(self, api: APIDescription, mapper: TypeMapper, client_name: str = "Bot"):
        self.api = api
        self.mapper = mapper
        self.client_name = client_name
        self.encoder = FieldEncoder(mapper)

    def compile_opts(self, method: MethodDescriptor) -> GeneratedOpts:
        """Options dataclass: every optional field plus the transport options."""
        name = opts_name(method.name)
        members = []
        for f in method.optional_fields:
            if member_name(f.name) == "request_opts":
                raise GenerationError(f"field {f.name} clashes with the generated member request_opts")
            ref = self.mapper.map_field(f, method.name)
            members.append(
                GeneratedOptsMember(
                    name=member_name(f.name),
                    annotation=ref.annotation,
                    default=zero_value(ref),
                    comment=comment(f.description),
                )
            )
        members.append(
            GeneratedOptsMember(
                name="request_opts",
                annotation="RequestOpts | None",
                default="None",
                comment="Transport options for this request, such as timeouts.",
            )
        )
        return GeneratedOpts(
            name=name,
            docstring=docstring(
                [f"{name} is the set of optional fields for {self.client_name}.{method_name(method.name)}."]
            ),
            members=members,
        )

    def _returns(self, method: MethodDescriptor) -> tuple[TypeRef, str, str]:
        """Return type, annotation and the decoding return statement."""
        ref = self.mapper.map_returns(method.returns)
        if len(method.returns) == 2:
            zero = zero_value(ref)
            annotation = ref.annotation + (" | None" if zero == "None" else "")
            return (
                ref,
                f"tuple[{annotation}, bool]",
                f"return decode_dual_result(_raw, {decoder(ref)}, {zero})",
            )
        if len(method.returns) > 2:
            raise GenerationError(f"no support for multiple return types: {method.returns}")
        return ref, ref.annotation, f"return decode_result(_raw, {decoder(ref)})"

    def _docstring(self, method: MethodDescriptor, opts: str) -> str:
        paragraphs = list(method.description)
        if paragraphs:
            paragraphs[0] = f"{method.name}: {paragraphs[0]}"
        else:
            paragraphs.append(f"{method.name}")

        params = []
        for f in method.required_fields:
            ref = self.mapper.map_field(f, method.name)
            params.append(f"- {param_name(f.name)} ({ref.annotation}): {comment(f.description)}")
        params.append(f"- opts ({opts}): All optional parameters.")
        paragraphs.append("\n".join(params))

        if method.href:
            paragraphs.append(method.href)
        return docstring(paragraphs)

    def compile_method(self, method: MethodDescriptor) -> GeneratedMethod:
        opts = opts_name(method.name)
        _, returns, return_stmt = self._returns(method)

        args = ["self"]
        body: list[str] = []
        uses_parts = False

        for f in method.required_fields:
            name = param_name(f.name)
            if name in RESERVED_PARAMS:
                raise GenerationError(f"field {f.name} clashes with the generated parameter {name}")
            ref = self.mapper.map_field(f, method.name)
            args.append(f"{name}: {ref.annotation}")
            encoding = self.encoder.encode(method, f, ref, name)
            uses_parts = uses_parts or encoding.strategy.uses_parts
            body.extend(encoding.lines)

        optionals = method.optional_fields
        if optionals:
            body.append("if opts is not None:")
            for f in optionals:
                ref = self.mapper.map_field(f, method.name)
                encoding = self.encoder.encode(method, f, ref, f"opts.{member_name(f.name)}")
                uses_parts = uses_parts or encoding.strategy.uses_parts
                body.extend("    " + line for line in encoding.lines)
        args.append(f"opts: {opts} | None = None")

        prelude = ["_params: dict[str, str] = {}"]
        if uses_parts:
            prelude.append("_parts: dict[str, NamedFile] = {}")

        body = prelude + body
        body.append("")
        body.append("_request_opts = opts.request_opts if opts is not None else None")
        parts_arg = "_parts" if uses_parts else "None"
        body.append(f'_raw = self.request("{method.name}", _params, {parts_arg}, _request_opts)')
        body.append(return_stmt)

        return GeneratedMethod(
            name=method_name(method.name),
            wire_name=method.name,
            signature=", ".join(args),
            returns=returns,
            docstring=self._docstring(method, opts),
            body="\n".join(body),
            uses_parts=uses_parts,
            dual_return=len(method.returns) == 2,
        )

    def compile(self) -> tuple[list[GeneratedOpts], list[GeneratedMethod]]:
        all_opts = []
        methods = []
        for name in self.api.method_names():
            method = self.api.methods[name]
            try:
                all_opts.append(self.compile_opts(method))
                methods.append(self.compile_method(method))
            except GenerationError as err:
                raise GenerationError(f"failed to generate method {name}: {err}") from err
            logger.debug("Compiled method %s", name)
        return all_opts, methods
