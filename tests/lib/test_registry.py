import unittest

from rerunctl.lib.core.metadata import read_record
from rerunctl.lib.core.models import OptionDeclaration
from rerunctl.lib.errors import (
    CommandNotFound,
    MalformedRecord,
    ModuleNotFound,
    OptionAlreadyDeclared,
    OptionNotDeclared,
)
from test_utils import modules_env, write_command


def jumps(**overrides) -> OptionDeclaration:
    fields = dict(
        name="jumps", description="number of times to jump", short="j", default="1"
    )
    fields.update(overrides)
    return OptionDeclaration(**fields)


class CommandOptionsTests(unittest.TestCase):
    def test_missing_command_raises(self) -> None:
        with modules_env() as env:
            with self.assertRaises(CommandNotFound) as ctx:
                env.registry.get_command_options("freddy", "sing")
            self.assertEqual(ctx.exception.command, "sing")
            self.assertIn("freddy:sing", str(ctx.exception))

    def test_command_without_options_key_is_empty(self) -> None:
        with modules_env() as env:
            self.assertEqual(env.registry.get_command_options("freddy", "dance"), [])

    def test_set_preserves_other_keys_and_drops_duplicates(self) -> None:
        with modules_env() as env:
            cmd_dir = write_command(env.root, "freddy", "pop", options="")
            with open(cmd_dir / "metadata", "a", encoding="utf-8") as f:
                f.write("CUSTOM='keep me'\n")

            stored = env.registry.set_command_options("freddy", "pop", ["a", "b", "a", "c"])
            self.assertEqual(stored, ["a", "b", "c"])

            record = read_record(cmd_dir / "metadata")
            self.assertEqual(record["OPTIONS"], "a b c")
            self.assertEqual(record["CUSTOM"], "keep me")
            self.assertEqual(record["DESCRIPTION"], "mock pop command")

    def test_list_commands_using_scans_every_command(self) -> None:
        with modules_env(commands=("dance", "pop", "sing")) as env:
            env.registry.set_command_options("freddy", "dance", ["jumps"])
            env.registry.set_command_options("freddy", "pop", ["music", "jumps"])
            env.registry.set_command_options("freddy", "sing", ["music"])
            self.assertEqual(env.registry.list_commands_using("freddy", "jumps"), {"dance", "pop"})
            self.assertEqual(env.registry.list_commands_using("freddy", "height"), set())

    def test_list_commands_ignores_dirs_without_metadata(self) -> None:
        with modules_env() as env:
            (env.root / "freddy" / "commands" / "scratch").mkdir()
            self.assertEqual(env.registry.list_commands("freddy"), ["dance"])


class DeclarationTests(unittest.TestCase):
    def test_get_missing_declaration_raises(self) -> None:
        with modules_env() as env:
            with self.assertRaises(OptionNotDeclared):
                env.registry.get_declaration("freddy", "jumps")

    def test_declare_writes_record(self) -> None:
        with modules_env() as env:
            self.assertTrue(env.registry.declare_option("freddy", jumps()))
            record = read_record(env.root / "freddy" / "options" / "jumps" / "metadata")
            self.assertEqual(
                record,
                {
                    "NAME": "jumps",
                    "DESCRIPTION": "number of times to jump",
                    "ARG": "true",
                    "LONG": "jumps",
                    "SHORT": "j",
                    "REQUIRED": "false",
                    "EXPORT": "false",
                    "DEFAULT": "1",
                },
            )
            self.assertEqual(env.registry.get_declaration("freddy", "jumps"), jumps())

    def test_identical_redeclare_is_noop(self) -> None:
        with modules_env() as env:
            env.registry.declare_option("freddy", jumps())
            self.assertFalse(env.registry.declare_option("freddy", jumps()))

    def test_conflicting_redeclare_raises(self) -> None:
        with modules_env() as env:
            env.registry.declare_option("freddy", jumps())
            with self.assertRaises(OptionAlreadyDeclared) as ctx:
                env.registry.declare_option("freddy", jumps(default="2", required=True))
            self.assertEqual(ctx.exception.differing, ["default", "required"])
            self.assertEqual(env.registry.get_declaration("freddy", "jumps").default, "1")

    def test_undeclare_removes_directory_without_checking_use(self) -> None:
        with modules_env() as env:
            env.registry.declare_option("freddy", jumps())
            env.registry.set_command_options("freddy", "dance", ["jumps"])
            env.registry.undeclare_option("freddy", "jumps")
            self.assertFalse((env.root / "freddy" / "options" / "jumps").exists())
            self.assertEqual(env.registry.get_command_options("freddy", "dance"), ["jumps"])

    def test_bad_boolean_in_declaration(self) -> None:
        with modules_env() as env:
            path = env.root / "freddy" / "options" / "jumps" / "metadata"
            path.parent.mkdir(parents=True)
            path.write_text("NAME=jumps\nREQUIRED=maybe\n", encoding="utf-8")
            with self.assertRaises(MalformedRecord):
                env.registry.get_declaration("freddy", "jumps")

    def test_declaration_defaults_from_sparse_record(self) -> None:
        with modules_env() as env:
            path = env.root / "freddy" / "options" / "verbose" / "metadata"
            path.parent.mkdir(parents=True)
            path.write_text("NAME=verbose\nARG=false\n", encoding="utf-8")
            decl = env.registry.get_declaration("freddy", "verbose")
            self.assertEqual(decl.long, "verbose")
            self.assertEqual(decl.short, "")
            self.assertFalse(decl.arg)
            self.assertFalse(decl.required)

    def test_find_orphans(self) -> None:
        with modules_env() as env:
            env.registry.declare_option("freddy", jumps())
            env.registry.declare_option("freddy", OptionDeclaration(name="height"))
            env.registry.set_command_options("freddy", "dance", ["height"])
            self.assertEqual(env.registry.find_orphans("freddy"), ["jumps"])


class ModuleTests(unittest.TestCase):
    def test_get_module_and_list_modules(self) -> None:
        with modules_env() as env:
            info = env.registry.get_module("freddy")
            self.assertEqual(info.name, "freddy")
            self.assertEqual(info.description, "mock module")
            self.assertEqual(env.registry.list_modules(), ["freddy"])

    def test_missing_module(self) -> None:
        with modules_env() as env:
            with self.assertRaises(ModuleNotFound):
                env.registry.get_module("nobody")
