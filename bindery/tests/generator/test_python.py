"""Tests for Python binding generation."""

import json

import pytest

from bindery.generator import load, render
from bindery.generator.python import RUNTIME_FILES, runtime
from bindery.generator.types import GenerationError


def _render_with(types=None, methods=None, **kwargs):
    return render(load(json.dumps({"types": types or {}, "methods": methods or {}})), **kwargs)


def _method(name, returns, fields=None):
    return {name: {"name": name, "returns": returns, "fields": fields or []}}


def describe_render():
    def produces_valid_python(expect, api_text):
        code = render(load(api_text))
        compile(code, "bindings.py", "exec")

    def is_deterministic(expect, api_text):
        expect(render(load(api_text))) == render(load(api_text))

    def marks_output_as_generated(expect, api_text):
        code = render(load(api_text))
        expect(code.startswith("# THIS FILE IS AUTOGENERATED. DO NOT EDIT.")) == True

    def imports_the_runtime(expect, api_text):
        expect("from bindery_runtime import (" in render(load(api_text))) == True
        code = render(load(api_text), runtime_import="bindery.runtime")
        expect("from bindery.runtime import (" in code) == True

    def names_the_client(expect, api_text):
        code = render(load(api_text), client_name="TelegramBot")
        expect("class TelegramBot(BotBase):" in code) == True
        expect("set of optional fields for TelegramBot.send_message." in code) == True

    def emits_interfaces_before_structs(expect, api_text):
        code = render(load(api_text))
        expect(code.index("class ChatMember(Interface):") < code.index("class Chat(Struct):")) == True

    def skips_the_file_type(expect, api_text):
        expect("class InputFile" in render(load(api_text))) == False


def describe_structs():
    def renames_reserved_members(expect, api_text):
        code = render(load(api_text))
        expect('    from_: User | None = wire_field("from", default=None)' in code) == True
        expect("            from_=User.from_dict," in code) == True

    def defaults_required_aggregates(expect, api_text):
        code = render(load(api_text))
        expect('    chat: Chat = wire_field("chat", required=True, default_factory=lambda: Chat())' in code) == True

    def declares_file_members(expect, api_text):
        code = render(load(api_text))
        expect('    media: InputFile = wire_field("media", required=True, file=True, default=None)' in code) == True
        expect('    thumbnail: InputFile | None = wire_field("thumbnail", file=True, default=None)' in code) == True

    def inherits_implemented_interfaces(expect, api_text):
        code = render(load(api_text))
        expect("class InputMediaPhoto(MediaStruct, InputMedia):" in code) == True
        expect("class ChatMemberOwner(Struct, ChatMember):" in code) == True

    def drops_the_media_type_member(expect, api_text):
        code = render(load(api_text))
        start = code.index("class InputMediaVideo(")
        body = code[start : code.index("class ", start + 1)]
        expect('wire_field("type"' in body) == False
        expect('return {"type": "video", **Struct.to_dict(self)}' in body) == True

    def defaults_sequences_on_encode(expect, api_text):
        code = render(load(api_text))
        start = code.index("class Message(Struct):")
        body = code[start : code.index("class ", start + 1)]
        expect("        shadow = replace(self)" in body) == True
        expect("        if shadow.entities is None:" in body) == True
        expect("            shadow.photo = []" in body) == True

    def keeps_the_default_encoder_otherwise(expect, api_text):
        code = render(load(api_text))
        start = code.index("class User(Struct):")
        body = code[start : code.index("class ", start + 1)]
        expect("def to_dict" in body) == False

    def documents_members(expect, api_text):
        code = render(load(api_text))
        expect("    #: Optional. User's or bot's username" in code) == True

    def registers_families(expect, api_text):
        code = render(load(api_text))
        chat_member = (
            "ChatMember.register(\n"
            "    implementers=(ChatMemberBanned, ChatMemberMember, ChatMemberOwner),\n"
            '    discriminator="status",\n'
            "    tags={\n"
            '        "creator": ChatMemberOwner,\n'
        )
        reply_markup = (
            "ReplyMarkup.register(\n"
            "    implementers=(ForceReply, InlineKeyboardMarkup, ReplyKeyboardRemove),\n"
            ")\n"
        )
        expect(chat_member in code) == True
        expect(reply_markup in code) == True

    def reports_unknown_types(expect):
        types = {
            "Broken": {
                "name": "Broken",
                "fields": [{"name": "sticker", "types": ["Sticker"], "required": True}],
            }
        }
        with pytest.raises(GenerationError, match="failed to generate type Broken: field sticker: Unknown type: Sticker"):
            _render_with(types=types)


def describe_methods():
    def takes_required_fields_positionally(expect, api_text):
        code = render(load(api_text))
        signature = "    def send_message(self, chat_id: int, text: str, opts: SendMessageOpts | None = None) -> Message:"
        expect(signature in code) == True
        expect("    def get_me(self, opts: GetMeOpts | None = None) -> User:" in code) == True

    def returns_value_and_flag_for_dual_returns(expect, api_text):
        code = render(load(api_text))
        expect("opts: EditMessageTextOpts | None = None) -> tuple[Message | None, bool]:" in code) == True
        expect("        return decode_dual_result(_raw, Message.from_dict, None)" in code) == True

    def decodes_sequences_of_interfaces(expect, api_text):
        code = render(load(api_text))
        expect("-> list[ChatMember]:" in code) == True
        expect("        return decode_result(_raw, list_of(ChatMember.from_dict))" in code) == True

    def generates_options_for_every_method(expect, api_text):
        code = render(load(api_text))
        expect("class GetMeOpts:" in code) == True
        expect("    correct_option_id: int = 0" in code) == True
        expect("    icon_custom_emoji_id: str | None = None" in code) == True
        expect("    request_opts: RequestOpts | None = None" in code) == True

    def sends_parts_only_for_file_methods(expect, api_text):
        code = render(load(api_text))
        expect('_raw = self.request("sendPhoto", _params, _parts, _request_opts)' in code) == True
        expect('_raw = self.request("sendMessage", _params, None, _request_opts)' in code) == True

    def allows_strings_for_union_file_fields(expect, api_text):
        code = render(load(api_text))
        expect('attach_file("photo", photo, _params, _parts, allow_string=True)' in code) == True
        expect('attach_file("sticker", sticker, _params, _parts, allow_string=False)' in code) == True

    def encodes_the_quiz_override(expect, api_text):
        code = render(load(api_text))
        expect('            if opts.type == "quiz" or opts.correct_option_id != 0:' in code) == True
        expect("            if opts.open_period != 0:" in code) == True

    def documents_methods(expect, api_text):
        code = render(load(api_text))
        expect("sendMessage: Use this method to send text messages." in code) == True
        expect("- opts (SendMessageOpts): All optional parameters." in code) == True
        expect("https://core.telegram.org/bots/api#sendmessage" in code) == True

    def reports_unknown_return_types(expect):
        with pytest.raises(GenerationError, match="failed to generate method getPoll: return type: Unknown type: Poll"):
            _render_with(methods=_method("getPoll", ["Poll"]))

    def reports_reserved_parameter_names(expect):
        fields = [{"name": "opts", "types": ["String"], "required": True}]
        with pytest.raises(GenerationError, match="clashes with the generated parameter opts"):
            _render_with(methods=_method("sendThing", ["True"], fields))

    def reports_missing_override_sibling(expect):
        fields = [{"name": "correct_option_id", "types": ["Integer"]}]
        with pytest.raises(GenerationError, match="depends on optional field type"):
            _render_with(methods=_method("sendPoll", ["True"], fields))


def describe_runtime():
    def returns_all_runtime_files(expect):
        files = runtime()
        expect(sorted(files)) == sorted(RUNTIME_FILES)
        expect("class BotBase" in files["client.py"]) == True
        expect("def attach_media_list" in files["serialization.py"]) == True
