"""Tests for CLI interface."""

import json
import os
import tempfile

from click.testing import CliRunner

from bindery.generator.cli import cli

BROKEN_API = {
    "types": {
        "Broken": {
            "name": "Broken",
            "fields": [{"name": "sticker", "types": ["Sticker"], "required": True}],
        }
    }
}


def _write_temp(content, suffix=".json"):
    with tempfile.NamedTemporaryFile("w", suffix=suffix, delete=False) as f:
        f.write(content)
        return f.name


def describe_gen_command():
    def generates_python_code(expect, api_path):
        runner = CliRunner()
        with tempfile.NamedTemporaryFile(suffix=".py", delete=False) as f:
            output_file = f.name

        try:
            result = runner.invoke(cli, ["gen", "-i", api_path, "-o", output_file])
            expect(result.exit_code) == 0
            with open(output_file) as f:
                content = f.read()
            expect("class Bot(BotBase):" in content) == True
            expect("from bindery_runtime import (" in content) == True
        finally:
            os.unlink(output_file)

    def imports_the_installed_runtime_without_a_value(expect, api_path):
        runner = CliRunner()
        with tempfile.NamedTemporaryFile(suffix=".py", delete=False) as f:
            output_file = f.name

        try:
            result = runner.invoke(cli, ["gen", "-i", api_path, "-o", output_file, "--runtime-import"])
            expect(result.exit_code) == 0
            with open(output_file) as f:
                content = f.read()
            expect("from bindery.runtime import (" in content) == True
        finally:
            os.unlink(output_file)

    def accepts_a_custom_runtime_and_client(expect, api_path):
        runner = CliRunner()
        with tempfile.NamedTemporaryFile(suffix=".py", delete=False) as f:
            output_file = f.name

        try:
            result = runner.invoke(
                cli,
                [
                    "gen",
                    "-i",
                    api_path,
                    "-o",
                    output_file,
                    "--runtime-import",
                    "mybot.runtime",
                    "--client-name",
                    "TelegramBot",
                ],
            )
            expect(result.exit_code) == 0
            with open(output_file) as f:
                content = f.read()
            expect("from mybot.runtime import (" in content) == True
            expect("class TelegramBot(BotBase):" in content) == True
        finally:
            os.unlink(output_file)

    def fails_on_invalid_description(expect):
        input_file = _write_temp('{"methods": {"getMe": {"name": "getMe", "returns": []}}}')
        try:
            result = CliRunner().invoke(cli, ["gen", "-i", input_file, "-o", "/tmp/out.py"])
            expect(result.exit_code) == 1
            expect("Invalid API description" in result.output) == True
        finally:
            os.unlink(input_file)

    def fails_without_writing_on_generation_error(expect):
        input_file = _write_temp(json.dumps(BROKEN_API))
        with tempfile.TemporaryDirectory() as tmpdir:
            output_file = os.path.join(tmpdir, "bindings.py")
            try:
                result = CliRunner().invoke(cli, ["gen", "-i", input_file, "-o", output_file])
                expect(result.exit_code) == 1
                expect("Generation failed" in result.output) == True
                expect("Unknown type: Sticker" in result.output) == True
                expect(os.path.exists(output_file)) == False
            finally:
                os.unlink(input_file)


def describe_runtime_command():
    def generates_runtime_files(expect):
        runner = CliRunner()
        with tempfile.TemporaryDirectory() as tmpdir:
            result = runner.invoke(cli, ["runtime", "-o", tmpdir])
            expect(result.exit_code) == 0
            runtime_dir = os.path.join(tmpdir, "bindery_runtime")
            expect(os.path.isdir(runtime_dir)) == True
            expect(os.path.exists(os.path.join(runtime_dir, "__init__.py"))) == True
            expect(os.path.exists(os.path.join(runtime_dir, "serialization.py"))) == True
            expect(os.path.exists(os.path.join(runtime_dir, "client.py"))) == True

    def uses_custom_folder_name(expect):
        runner = CliRunner()
        with tempfile.TemporaryDirectory() as tmpdir:
            result = runner.invoke(cli, ["runtime", "-o", tmpdir, "--name", "tg_runtime"])
            expect(result.exit_code) == 0
            expect(os.path.isdir(os.path.join(tmpdir, "tg_runtime"))) == True


def describe_info_command():
    def displays_families_and_methods(expect, api_path):
        result = CliRunner().invoke(cli, ["info", "-i", api_path])
        expect(result.exit_code) == 0
        expect("Families" in result.output) == True
        expect("ChatMember" in result.output) == True
        expect("sendMessage" in result.output) == True

    def outputs_json(expect, api_path):
        result = CliRunner().invoke(cli, ["info", "-i", api_path, "--json"])
        expect(result.exit_code) == 0
        data = json.loads(result.stdout)
        expect(data["families"]["ChatMember"]["discriminator"]) == "status"
        expect(data["families"]["ReplyMarkup"]["discriminator"]) == None
        expect(data["methods"]["editMessageText"]["dual_return"]) == True
        expect(data["methods"]["sendMessage"]["required"]) == ["chat_id", "text"]
        expect(data["methods"]["sendPhoto"]["multipart"]) == True
        expect(data["methods"]["sendMessage"]["multipart"]) == False
        expect(data["methods"]["sendMediaGroup"]["multipart"]) == True
        expect(data["types"]["InputMediaPhoto"]["subtype_of"]) == ["InputMedia"]

    def fails_on_invalid_description(expect):
        input_file = _write_temp("not json")
        try:
            result = CliRunner().invoke(cli, ["info", "-i", input_file])
            expect(result.exit_code) == 1
            expect("Invalid API description" in result.output) == True
        finally:
            os.unlink(input_file)
