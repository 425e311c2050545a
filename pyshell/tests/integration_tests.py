#!/usr/bin/env python3
"""
PyShell Integration Tests

Runs command lines through a complete shell session: executor,
builtins, aliases, scopes, error reporting and the console loop.

Run with: python -m pytest pyshell/tests/integration_tests.py -v

Author: YSNRFD
Version: 1.0.0
"""

import io
import os
import sys
import tempfile
import unittest

from pyshell.core.action import ActionScope, CommandAction, CommandDescriptor
from pyshell.core.config_loader import Config
from pyshell.shell.executor import ExecutionStatus
from pyshell.shell.io import IO
from pyshell.shell.shell import create_shell


class ScopeProbeCommand(CommandAction):
    name = 'probe'
    description = 'Set a variable in the per-call scope'

    def execute(self, context):
        context.variables.set('probe', 'x')
        return context.variables.get('probe')


class FailingCommand(CommandAction):
    name = 'fail'

    def execute(self, context):
        raise ValueError("boom")


class TickCommand(CommandAction):
    name = 'tick'
    scope = ActionScope.PROTOTYPE

    def __init__(self):
        self.calls = 0

    def execute(self, context):
        self.calls += 1
        return self.calls


class NestedCommand(CommandAction):
    name = 'nested'
    opaque_arguments = True

    def execute(self, context):
        context.variables.set('inner', 'visible')
        return context.shell.execute('echo ${inner}')


class ShellTestCase(unittest.TestCase):
    """Creates an open shell writing to in-memory streams."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = os.path.realpath(self._tmp.name)
        self.home = os.path.join(self.tmp, 'home')
        os.mkdir(self.home)

        self.config = Config()
        self.config.shell.user_home = self.home
        self.config.shell.user_dir = self.tmp
        self.configure(self.config)

        self.out = io.StringIO()
        self.err = io.StringIO()
        self.shell = create_shell(self.config, IO(self.out, self.err))
        self.shell.open()

    def tearDown(self):
        self.shell.close()
        self._tmp.cleanup()

    def configure(self, config):
        pass

    def execute(self, line):
        return self.shell.execute(line)

    def take_output(self):
        text = self.out.getvalue()
        self.out.seek(0)
        self.out.truncate()
        return text


class TestExecutor(ShellTestCase):
    """Test the execution state machine."""

    def test_success_sets_last_result(self):
        """Test a successful command and its last result."""
        result = self.execute('echo hello world')

        self.assertEqual(result.status, ExecutionStatus.SUCCESS)
        self.assertEqual(result.value, 'hello world')
        self.assertEqual(self.out.getvalue(), 'hello world\n')
        self.assertEqual(self.shell.variables.get('shell.last.result'), 'hello world')

    def test_sequence_sees_earlier_commands(self):
        """Test later commands are substituted after earlier ones ran."""
        result = self.execute('set x 5; echo ${x}')

        self.assertEqual(result.status, ExecutionStatus.SUCCESS)
        self.assertEqual(self.out.getvalue(), '5\n')

    def test_failure_stops_sequence(self):
        """Test the first failure stops the line."""
        from pyshell.exceptions import CommandError

        result = self.execute('nosuch; echo hi')

        self.assertEqual(result.status, ExecutionStatus.FAILURE)
        self.assertIsInstance(result.error, CommandError)
        self.assertEqual(self.out.getvalue(), '')

    def test_parse_error_runs_nothing(self):
        """Test a syntax error anywhere runs nothing."""
        from pyshell.exceptions import ParseError

        result = self.execute('echo first; echo "abc')

        self.assertEqual(result.status, ExecutionStatus.FAILURE)
        self.assertIsInstance(result.error, ParseError)
        self.assertEqual(self.out.getvalue(), '')

    def test_empty_line(self):
        """Test blank input succeeds without output."""
        result = self.execute('   ')

        self.assertEqual(result.status, ExecutionStatus.SUCCESS)
        self.assertIsNone(result.value)

    def test_help_skips_execution(self):
        """Test --help renders usage and does not run the command."""
        result = self.execute('exit --help')

        self.assertEqual(result.status, ExecutionStatus.USAGE)
        self.assertIn('usage: exit', self.out.getvalue())

    def test_usage_error(self):
        """Test binding failures render usage on the error stream."""
        from pyshell.exceptions import UsageError

        result = self.execute('exit notanumber')

        self.assertEqual(result.status, ExecutionStatus.FAILURE)
        self.assertIsInstance(result.error, UsageError)
        self.assertIn('usage: exit', self.err.getvalue())

    def test_exit(self):
        """Test exit becomes an EXIT result with its code."""
        result = self.execute('exit 3; echo never')

        self.assertEqual(result.status, ExecutionStatus.EXIT)
        self.assertEqual(result.exit_code, 3)
        self.assertEqual(self.out.getvalue(), '')

    def test_unexpected_exception_is_wrapped(self):
        """Test non-shell exceptions become ExecutionError with the cause kept."""
        from pyshell.exceptions import ExecutionError

        self.shell.commands.register('fail', CommandDescriptor.of(FailingCommand))
        with self.assertLogs('pyshell.executor', level='ERROR') as logs:
            result = self.execute('fail')

        self.assertEqual(result.status, ExecutionStatus.FAILURE)
        self.assertIsInstance(result.error, ExecutionError)
        self.assertIsInstance(result.error.original, ValueError)

        record = logs.records[0]
        self.assertEqual(record.getMessage(), 'Command failed: fail')
        self.assertEqual(list(record.context['arguments']), [])
        self.assertEqual(record.context['error'], 'boom')

    def test_per_call_scope(self):
        """Test command scopes do not leak into the session."""
        self.shell.commands.register('probe', CommandDescriptor.of(ScopeProbeCommand))

        result = self.execute('probe')

        self.assertEqual(result.value, 'x')
        self.assertFalse(self.shell.variables.contains('probe'))

    def test_nested_call_uses_command_scope(self):
        """Test shell calls made from a command see that command's scope."""
        self.shell.commands.register('nested', CommandDescriptor.of(NestedCommand))

        result = self.execute('nested')

        self.assertEqual(result.status, ExecutionStatus.SUCCESS)
        self.assertEqual(self.out.getvalue(), 'visible\n')
        self.assertFalse(self.shell.variables.contains('inner'))

    def test_prototype_commands(self):
        """Test prototype commands get a fresh instance per call."""
        self.shell.commands.register('tick', CommandDescriptor.of(TickCommand))

        self.assertEqual(self.execute('tick').value, 1)
        self.assertEqual(self.execute('tick').value, 1)

    def test_execute_command(self):
        """Test running pre-split arguments."""
        result = self.shell.execute_command('echo', 'a b', '${x}')

        self.assertEqual(result.value, 'a b ${x}')


class TestAliases(ShellTestCase):
    """Test alias behaviour through the shell."""

    def test_alias_matches_target(self):
        """Test an alias produces the same output as its expansion."""
        for name in ('b.txt', 'a.txt'):
            with open(os.path.join(self.tmp, name), 'w', encoding='utf-8') as f:
                f.write('data')

        self.execute("alias ll 'ls -l'")
        self.take_output()

        direct = self.execute(f'ls -l {self.tmp}')
        direct_output = self.take_output()
        aliased = self.execute(f'll {self.tmp}')
        aliased_output = self.take_output()

        self.assertEqual(direct.status, ExecutionStatus.SUCCESS)
        self.assertEqual(aliased.status, ExecutionStatus.SUCCESS)
        self.assertEqual(aliased_output, direct_output)
        self.assertIn('a.txt', direct_output)

    def test_alias_cycle(self):
        """Test an alias loop fails instead of recursing."""
        from pyshell.exceptions import CommandError

        self.shell.aliases.register_alias('a', 'b')
        self.shell.aliases.register_alias('b', 'a')

        result = self.execute('a')

        self.assertEqual(result.status, ExecutionStatus.FAILURE)
        self.assertIsInstance(result.error, CommandError)

    def test_exit_through_alias(self):
        """Test exit passes through an alias."""
        self.execute("alias q 'exit 4'")

        result = self.execute('q')

        self.assertEqual(result.status, ExecutionStatus.EXIT)
        self.assertEqual(result.exit_code, 4)

    def test_alias_and_unalias_commands(self):
        """Test listing and removing aliases."""
        self.execute('alias -- greet echo hi')
        self.execute('alias')
        self.assertIn("greet='echo hi'", self.out.getvalue())

        self.assertEqual(self.execute('unalias greet').status, ExecutionStatus.SUCCESS)
        self.assertEqual(self.execute('unalias greet').status, ExecutionStatus.FAILURE)

    def test_configured_aliases(self):
        """Test aliases from configuration are defined on open."""
        config = Config()
        config.aliases = {'ll': 'ls -l'}
        shell = create_shell(config, IO(io.StringIO(), io.StringIO()))
        shell.open()

        self.assertEqual(shell.aliases.get('ll'), 'ls -l')
        self.assertIn('ll', shell.completer.complete('l'))
        shell.close()


class TestBuiltins(ShellTestCase):
    """Test the built-in commands."""

    def test_cd_nonexistent(self):
        """Test cd to a missing directory fails and keeps the directory."""
        from pyshell.exceptions import ExecutionError

        result = self.execute('cd /nonexistent/pyshell-dir')

        self.assertEqual(result.status, ExecutionStatus.FAILURE)
        self.assertIsInstance(result.error, ExecutionError)
        self.assertIsInstance(result.error.original, FileNotFoundError)
        self.assertEqual(self.shell.variables.get('shell.user.dir'), self.tmp)

    def test_cd_home(self):
        """Test cd without a path goes to the user home."""
        result = self.execute('cd')

        self.assertEqual(result.status, ExecutionStatus.SUCCESS)
        self.assertEqual(self.shell.variables.get('shell.user.dir'), self.home)

    def test_cd_relative_and_pwd(self):
        """Test relative paths resolve against the working directory."""
        os.mkdir(os.path.join(self.tmp, 'sub'))

        self.execute('cd sub')
        self.execute('pwd')

        self.assertEqual(self.out.getvalue(), os.path.join(self.tmp, 'sub') + '\n')

    def test_cd_to_file(self):
        """Test cd to a regular file fails."""
        path = os.path.join(self.tmp, 'file.txt')
        with open(path, 'w', encoding='utf-8') as f:
            f.write('x')

        result = self.execute(f'cd {path}')

        self.assertIsInstance(result.error.original, NotADirectoryError)

    def test_ls(self):
        """Test listing, hidden entries and the long format."""
        os.mkdir(os.path.join(self.tmp, 'dir'))
        for name in ('.hidden', 'file.txt'):
            with open(os.path.join(self.tmp, name), 'w', encoding='utf-8') as f:
                f.write('12345')

        result = self.execute('ls')
        self.assertEqual(result.value, ['dir/', 'file.txt', 'home/'])

        result = self.execute('ls -a')
        self.assertIn('.hidden', result.value)

        self.take_output()
        self.execute('ls -l file.txt')
        line = self.take_output().strip()
        self.assertTrue(line.startswith('-'))
        self.assertTrue(line.endswith('5 file.txt'))

    def test_set_and_unset(self):
        """Test session variables."""
        self.execute('set greeting hello there')
        self.assertEqual(self.shell.variables.get('greeting'), 'hello there')

        self.execute('set greeting')
        self.assertIn('greeting=hello there', self.out.getvalue())

        self.execute('unset greeting')
        self.assertFalse(self.shell.variables.contains('greeting'))

        self.assertEqual(self.execute('unset never-defined').status, ExecutionStatus.SUCCESS)

    def test_immutable_variables(self):
        """Test reserved and read-only variables cannot be changed."""
        from pyshell.exceptions import VariableError

        result = self.execute('set shell.version 2')
        self.assertIsInstance(result.error, VariableError)
        self.assertEqual(self.shell.variables.get('shell.version'), '1.0.0')

        self.execute('set -r V 1')
        result = self.execute('set V 2')
        self.assertEqual(result.status, ExecutionStatus.FAILURE)
        self.assertEqual(self.shell.variables.get('V'), '1')

        result = self.execute('set shell.last.result hacked')
        self.assertIsInstance(result.error, VariableError)
        self.assertFalse(self.shell.variables.is_mutable('shell.last.result'))

    def test_echo_options(self):
        """Test echo -n and the stop flag."""
        self.execute('echo -n a; echo -- -n b')

        self.assertEqual(self.out.getvalue(), 'a-n b\n')

    def test_source(self):
        """Test source runs each line and stops on exit."""
        path = os.path.join(self.tmp, 'script.psh')
        with open(path, 'w', encoding='utf-8') as f:
            f.write("# setup\necho a\n\nexit 7\necho b\n")

        result = self.execute(f'source {path}')

        self.assertEqual(result.status, ExecutionStatus.EXIT)
        self.assertEqual(result.exit_code, 7)
        self.assertEqual(self.out.getvalue(), 'a\n')

    def test_source_stops_on_failure(self):
        """Test source returns the first failure."""
        path = os.path.join(self.tmp, 'script.psh')
        with open(path, 'w', encoding='utf-8') as f:
            f.write("nosuch\necho b\n")

        result = self.execute(f'source {path}')

        self.assertEqual(result.status, ExecutionStatus.FAILURE)
        self.assertEqual(self.out.getvalue(), '')

    def test_eval(self):
        """Test eval re-parses its arguments."""
        result = self.execute("eval echo 'x y'")

        self.assertEqual(result.status, ExecutionStatus.SUCCESS)
        self.assertEqual(self.out.getvalue(), 'x y\n')

    def test_groups(self):
        """Test changing the current command group."""
        self.shell.commands.register('tools/probe', CommandDescriptor.of(ScopeProbeCommand))

        self.assertEqual(self.execute('probe').status, ExecutionStatus.FAILURE)

        self.execute('group tools')
        self.assertEqual(self.shell.variables.get('shell.group'), '/tools')
        self.assertEqual(self.execute('probe').status, ExecutionStatus.SUCCESS)

        self.execute('group ..')
        self.assertEqual(self.shell.variables.get('shell.group'), '/')
        self.assertEqual(self.execute('group nosuch').status, ExecutionStatus.FAILURE)

    def test_help(self):
        """Test the command list, topics and per-command usage."""
        self.execute('help')
        listing = self.take_output()
        self.assertIn('echo', listing)
        self.assertIn('Topics:', listing)

        self.execute('help variables')
        self.assertIn('${name}', self.take_output())

        self.execute('help cd')
        self.assertIn('usage: cd', self.take_output())

        self.assertEqual(self.execute('help frob').status, ExecutionStatus.FAILURE)


class TestShellSession(ShellTestCase):
    """Test the session lifecycle and console loop."""

    def configure(self, config):
        profile = os.path.join(self.tmp, 'profile.psh')
        with open(profile, 'w', encoding='utf-8') as f:
            f.write("set greeting hi\n")
        config.shell.profile_scripts = [profile, os.path.join(self.tmp, 'missing.psh')]
        config.shell.prompt = '${shell.program}> '

    def test_open_seeds_variables(self):
        """Test reserved variables and profile scripts."""
        variables = self.shell.variables

        self.assertEqual(variables.get('shell.program'), 'pyshell')
        self.assertEqual(variables.get('shell.user.home'), self.home)
        self.assertEqual(variables.get('shell.group'), '/')
        self.assertFalse(variables.is_mutable('shell.home'))
        self.assertEqual(variables.get('greeting'), 'hi')
        self.assertEqual(self.shell.prompt(), 'pyshell> ')

    def test_reopen_after_close(self):
        """Test a closed session can be opened again."""
        self.shell.execute('echo before')
        self.shell.close()
        self.assertFalse(self.shell.is_open)

        self.shell.open()

        variables = self.shell.variables
        self.assertTrue(self.shell.is_open)
        self.assertEqual(variables.get('shell.program'), 'pyshell')
        self.assertFalse(variables.is_mutable('shell.home'))
        self.assertIsNone(variables.get('shell.last.result'))
        self.assertEqual(self.shell.execute('echo after').status, ExecutionStatus.SUCCESS)
        self.assertIn('echo', self.shell.completer.complete('ec'))

    def test_run_loop(self):
        """Test failures are reported and exit ends the loop."""
        lines = iter(['echo one', 'nosuch', 'exit 2', 'echo never'])

        code = self.shell.run(lambda prompt: next(lines))

        self.assertEqual(code, 2)
        self.assertIn('one', self.out.getvalue())
        self.assertNotIn('never', self.out.getvalue())
        self.assertIn('ERROR CommandError: Unable to resolve command: nosuch', self.err.getvalue())

    def test_run_until_eof(self):
        """Test end of input ends the loop with code 0."""
        def read(prompt):
            raise EOFError

        self.assertEqual(self.shell.run(read), 0)
        self.assertFalse(self.shell.running)

    def test_completion_follows_registry(self):
        """Test the session completer sees new and removed commands."""
        self.assertIn('echo', self.shell.completer.complete('ec'))

        self.shell.commands.register('probe', CommandDescriptor.of(ScopeProbeCommand))
        self.assertIn('probe', self.shell.completer.complete('pr'))

        self.shell.commands.unregister('probe')
        self.assertNotIn('probe', self.shell.completer.complete('pr'))


class TestErrorHandler(ShellTestCase):
    """Test console error reporting."""

    def test_short_form(self):
        """Test the one-line report names the original exception."""
        self.shell.commands.register('fail', CommandDescriptor.of(FailingCommand))
        result = self.execute('fail')

        self.shell.handle_error(result.error)

        self.assertEqual(self.err.getvalue(), 'ERROR ValueError: boom\n')

    def test_stacktrace(self):
        """Test the full chain is printed when requested."""
        self.shell.commands.register('fail', CommandDescriptor.of(FailingCommand))
        self.execute('set shell.show.stacktrace true')
        result = self.execute('fail')

        self.shell.handle_error(result.error)

        report = self.err.getvalue()
        self.assertTrue(report.startswith('ERROR ValueError: boom\n'))
        self.assertIn('Traceback', report)
        self.assertIn('ExecutionError', report)


class TestMain(unittest.TestCase):
    """Test the command line entry point."""

    def tearDown(self):
        from pyshell.core.config_loader import ConfigLoader
        ConfigLoader().reset()

    def test_command_exit_code(self):
        """Test -c returns the exit code."""
        from pyshell.main import main

        self.assertEqual(main(['-c', 'exit 5']), 5)

    def test_missing_config(self):
        """Test a bad configuration path fails early."""
        from pyshell.main import main

        self.assertEqual(main(['--config', '/nonexistent/pyshell.json', '-c', 'pwd']), 2)


def run_tests():
    """Run all tests."""
    loader = unittest.TestLoader()
    suite = loader.loadTestsFromModule(sys.modules[__name__])

    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)

    return 0 if result.wasSuccessful() else 1


if __name__ == '__main__':
    sys.exit(run_tests())
