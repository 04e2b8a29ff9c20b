# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

import argparse
import importlib
import io
import unittest
import unittest.mock
from contextlib import ExitStack, redirect_stderr, redirect_stdout
from io import StringIO

from rich.console import Console

from rerunctl.cli.commands.option import cmd_list_options, parse_bool, resolve_target
from rerunctl.cli.main import main
from rerunctl.lib.core.metadata import read_record
from rerunctl.lib.errors import UsageError
from test_utils import modules_env, parse_meta_value, write_command


def run_cli(*argv: str, stdin: str | None = None) -> tuple[str, str]:
    """Run ``rerunctl *argv``; returns (stdout, stderr)."""
    out, err = StringIO(), StringIO()
    with ExitStack() as stack:
        stack.enter_context(redirect_stdout(out))
        stack.enter_context(redirect_stderr(err))
        if stdin is not None:
            stack.enter_context(unittest.mock.patch("sys.stdin", io.StringIO(stdin)))
        main(list(argv))
    return out.getvalue(), err.getvalue()


class CliModuleTests(unittest.TestCase):
    def test_cli_main_is_callable(self) -> None:
        module = importlib.import_module("rerunctl.cli.main")
        self.assertTrue(callable(getattr(module, "main", None)))


class CliArgumentTests(unittest.TestCase):
    def test_parse_bool(self) -> None:
        self.assertTrue(parse_bool("TRUE"))
        self.assertFalse(parse_bool("no"))
        with self.assertRaises(argparse.ArgumentTypeError):
            parse_bool("maybe")

    def test_resolve_target(self) -> None:
        ns = argparse.Namespace(target="freddy:dance", module=None, command=None)
        self.assertEqual(resolve_target(ns), ("freddy", "dance"))
        ns = argparse.Namespace(target=None, module="freddy", command="dance")
        self.assertEqual(resolve_target(ns), ("freddy", "dance"))

    def test_resolve_target_errors(self) -> None:
        for target, module, command in (
            ("freddy", None, None),
            ("freddy:dance", "other", None),
            (None, "freddy", None),
            ("freddy:da nce", None, None),
        ):
            with self.subTest(target=target, module=module, command=command):
                ns = argparse.Namespace(target=target, module=module, command=command)
                with self.assertRaises(UsageError):
                    resolve_target(ns)


class CliOptionCommandTests(unittest.TestCase):
    def test_add_option_writes_metadata_and_parser(self) -> None:
        with modules_env() as env:
            out, _ = run_cli(
                "add-option",
                "freddy:dance",
                "--option",
                "jumps",
                "--desc",
                "number of times to jump",
                "--default",
                "1",
                "--required",
                "false",
                "--export",
                "false",
            )
            self.assertIn("Assigned --jumps to freddy:dance", out)

            cmd_meta = (env.root / "freddy" / "commands" / "dance" / "metadata").read_text()
            self.assertEqual(parse_meta_value(cmd_meta, "OPTIONS"), "jumps")
            opt = read_record(env.root / "freddy" / "options" / "jumps" / "metadata")
            self.assertEqual(opt["DEFAULT"], "1")
            self.assertEqual(opt["SHORT"], "j")
            script = env.root / "freddy" / "commands" / "dance" / "options.sh"
            self.assertIn("-j|--jumps)", script.read_text(encoding="utf-8"))

    def test_add_option_twice_reports_existing(self) -> None:
        with modules_env() as env:
            run_cli("add-option", "-m", "freddy", "-c", "dance", "-o", "jumps", "--default", "1")
            out, _ = run_cli("add-option", "freddy:dance", "-o", "jumps", "--default", "1")
            self.assertIn("freddy:dance already has --jumps", out)
            self.assertEqual(env.registry.get_command_options("freddy", "dance"), ["jumps"])

    def test_add_option_prompts_for_name(self) -> None:
        with modules_env() as env:
            _, err = run_cli("add-option", "freddy:dance", stdin="\nheight\n")
            self.assertIn("Option: ", err)
            self.assertEqual(env.registry.get_command_options("freddy", "dance"), ["height"])

    def test_add_option_to_missing_command_fails_before_prompt(self) -> None:
        with modules_env():
            with self.assertRaises(SystemExit) as ctx:
                run_cli("add-option", "freddy:sing", stdin="jumps\n")
            self.assertEqual(str(ctx.exception.code), "rerunctl: command not found: freddy:sing")

    def test_conflicting_add_option_fails_and_reuse_succeeds(self) -> None:
        with modules_env(commands=("dance", "pop")) as env:
            run_cli("add-option", "freddy:dance", "-o", "jumps", "--default", "1")
            with self.assertRaises(SystemExit) as ctx:
                run_cli("add-option", "freddy:pop", "-o", "jumps", "--default", "2")
            self.assertIn("different default", str(ctx.exception.code))

            run_cli("add-option", "freddy:pop", "-o", "jumps", "--default", "2", "--reuse")
            self.assertEqual(env.registry.get_declaration("freddy", "jumps").default, "1")
            self.assertEqual(env.registry.get_command_options("freddy", "pop"), ["jumps"])

    def test_add_option_rejects_unsafe_flags(self) -> None:
        with modules_env() as env:
            with self.assertRaises(SystemExit) as ctx:
                run_cli("add-option", "freddy:dance", "-o", "jumps", "--short=*")
            self.assertIn("short flag must be a single letter or digit", str(ctx.exception.code))
            with self.assertRaises(SystemExit) as ctx:
                run_cli("add-option", "freddy:dance", "-o", "jumps", "--long=x) echo INJECTED ;; --y")
            self.assertIn("long flag", str(ctx.exception.code))
            self.assertEqual(env.registry.get_command_options("freddy", "dance"), [])

    def test_add_option_reports_flag_collision(self) -> None:
        with modules_env() as env:
            run_cli("add-option", "freddy:dance", "-o", "jumps")
            with self.assertRaises(SystemExit) as ctx:
                run_cli("add-option", "freddy:dance", "-o", "jive")
            self.assertIn("flag -j of jive is already used by jumps", str(ctx.exception.code))
            run_cli("add-option", "freddy:dance", "-o", "jive", "--short", "J")
            self.assertEqual(env.registry.get_command_options("freddy", "dance"), ["jumps", "jive"])

    def test_rm_option_interactive(self) -> None:
        with modules_env(commands=()) as env:
            write_command(env.root, "freddy", "dance", options="'jumps height'")
            for name, short, default in (("jumps", "j", "1"), ("height", "h", "5")):
                opt_dir = env.root / "freddy" / "options" / name
                opt_dir.mkdir(parents=True)
                (opt_dir / "metadata").write_text(
                    f"NAME={name}\nSHORT={short}\nDEFAULT={default}\n", encoding="utf-8"
                )

            out, err = run_cli("rm-option", "freddy:dance", stdin="jumps\n")
            self.assertIn("1) jumps", err)
            self.assertIn("Removed jumps from freddy:dance", out)
            self.assertIn("no command uses it", out)

            cmd_meta = (env.root / "freddy" / "commands" / "dance" / "metadata").read_text()
            self.assertEqual(parse_meta_value(cmd_meta, "OPTIONS"), "height")
            self.assertFalse((env.root / "freddy" / "options" / "jumps").exists())
            self.assertTrue((env.root / "freddy" / "options" / "height" / "metadata").is_file())

            script = (env.root / "freddy" / "commands" / "dance" / "options.sh").read_text()
            self.assertNotIn("--jumps)", script)
            self.assertIn("-h|--height)", script)

    def test_rm_option_keeps_shared_declaration(self) -> None:
        with modules_env(commands=("dance", "pop")) as env:
            run_cli("add-option", "freddy:dance", "-o", "jumps")
            run_cli("add-option", "freddy:pop", "-o", "jumps")
            out, _ = run_cli("rm-option", "freddy:pop", "--option", "jumps")
            self.assertIn("still used by: dance", out)
            self.assertTrue(env.registry.has_declaration("freddy", "jumps"))

    def test_rm_unassigned_option_fails(self) -> None:
        with modules_env():
            with self.assertRaises(SystemExit) as ctx:
                run_cli("rm-option", "freddy:dance", "--option", "jumps")
            self.assertIn("option not assigned to freddy:dance: jumps", str(ctx.exception.code))

    def test_generate_options(self) -> None:
        with modules_env() as env:
            run_cli("add-option", "freddy:dance", "-o", "jumps")
            script = env.root / "freddy" / "commands" / "dance" / "options.sh"
            script.unlink()
            out, _ = run_cli("generate-options", "freddy:dance")
            self.assertIn(str(script), out)
            self.assertTrue(script.is_file())

    def test_modules_dir_flag_overrides_env(self) -> None:
        with modules_env() as env:
            with modules_env(module="other") as other:
                run_cli("-M", str(env.root), "add-option", "freddy:dance", "-o", "jumps")
                self.assertEqual(env.registry.get_command_options("freddy", "dance"), ["jumps"])
                self.assertEqual(other.registry.list_declarations("other"), [])


class CliListOptionsTests(unittest.TestCase):
    def test_table_shows_declarations_and_orphans(self) -> None:
        with modules_env(commands=("dance", "pop")) as env:
            run_cli("add-option", "freddy:dance", "-o", "jumps", "--default", "1")
            run_cli("add-option", "freddy:pop", "-o", "jumps", "--default", "1")
            env.registry.set_command_options("freddy", "pop", ["jumps", "ghost"])
            opt_dir = env.root / "freddy" / "options" / "stale"
            opt_dir.mkdir(parents=True)
            (opt_dir / "metadata").write_text("NAME=stale\n", encoding="utf-8")

            buffer = StringIO()
            console = Console(file=buffer, width=200)
            cmd_list_options(
                argparse.Namespace(module="freddy", modules_dir=None), console=console
            )
            text = buffer.getvalue()
            self.assertIn("-j|--jumps <value>", text)
            self.assertIn("dance, pop", text)
            self.assertIn("none (orphan)", text)
            self.assertIn("ghost is assigned to pop but not declared", text)

    def test_unknown_module(self) -> None:
        with modules_env():
            with self.assertRaises(SystemExit) as ctx:
                run_cli("list-options", "nobody")
            self.assertEqual(str(ctx.exception.code), "rerunctl: module not found: nobody")


class CliConfigTests(unittest.TestCase):
    def test_config_lists_modules_and_defaults(self) -> None:
        with modules_env() as env:
            env.config_file.write_text("defaults:\n  export: true\n", encoding="utf-8")
            with unittest.mock.patch(
                "rerunctl.cli.commands.info._supports_color", return_value=False
            ):
                out, _ = run_cli("config")
            self.assertIn(f"- Modules root: {env.root.resolve()}", out)
            self.assertIn("  • freddy", out)
            self.assertIn("required=false, export=true, arg=true", out)
