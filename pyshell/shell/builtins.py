"""
Shell Built-in Commands

Implements the standard command set.

Author: YSNRFD
Version: 1.0.0
"""

import os
import stat
from pathlib import Path
from typing import Any, List

from pyshell.cli import HandlerType, HelpPrinter
from pyshell.core.action import ActionScope, CommandAction, CommandContext
from pyshell.core.paths import CommandPath, ROOT
from pyshell.core.variables import VariableNames
from pyshell.exceptions import CommandError, ExitNotification


def resolve_file(context: CommandContext, path: Path) -> Path:
    """Resolve path against the session's working directory."""
    if path.is_absolute():
        return path
    base = context.variables.get(VariableNames.USER_DIR) or os.getcwd()
    return Path(base) / path


class HelpCommand(CommandAction):
    """List commands, or show help for one command or topic."""

    name = 'help'
    description = 'Display help for commands and topics'

    @classmethod
    def declare(cls, params):
        params.argument('topic', description='Command or help topic')

    def execute(self, context: CommandContext) -> Any:
        shell = context.shell
        topic = context.arguments.topic
        io = context.io

        if topic is None:
            io.println("Commands:")
            rows = [(d.name, d.description) for d in shell.commands.descriptors()]
            rows += [(name, f"Alias to: {target}") for name, target in shell.aliases.aliases().items()]
            width = max((len(name) for name, _ in rows), default=0)
            for name, text in sorted(rows):
                io.println(f"  {name.ljust(width)}  {text}")

            pages = shell.help_pages.pages()
            if pages:
                io.println()
                io.println("Topics:")
                width = max(len(p.name) for p in pages)
                for page in pages:
                    io.println(f"  {page.name.ljust(width)}  {page.description}")
            return None

        page = shell.help_pages.get_page(topic)
        if page is not None:
            io.println(page.text or page.description)
            return page.name

        descriptor = shell.resolver.resolve(topic, context.variables)
        HelpPrinter(descriptor.parameters).print_usage(io.out, topic, descriptor.description)
        return descriptor.name


class ExitCommand(CommandAction):
    """Exit the shell."""

    name = 'exit'
    description = 'Exit the shell'

    @classmethod
    def declare(cls, params):
        params.argument('code', handler=HandlerType.INTEGER, default=0, description='Exit code')

    def execute(self, context: CommandContext) -> Any:
        raise ExitNotification(context.arguments.code)


class EchoCommand(CommandAction):
    """Print arguments."""

    name = 'echo'
    description = 'Print arguments'

    @classmethod
    def declare(cls, params):
        params.option('no_newline', '-n', handler=HandlerType.BOOLEAN,
                      description='Do not print the trailing newline')
        params.option('stop', '--', handler=HandlerType.STOP,
                      description='Treat everything after as text')
        params.argument('text', handler=HandlerType.REST, description='Text to print')

    def execute(self, context: CommandContext) -> Any:
        text = ' '.join(context.arguments.text)
        context.io.println(text, end='' if context.arguments.no_newline else '\n')
        return text


class SetCommand(CommandAction):
    """Show or define session variables."""

    name = 'set'
    description = 'List, show or set session variables'

    @classmethod
    def declare(cls, params):
        params.option('readonly', '-r', '--readonly', handler=HandlerType.BOOLEAN,
                      description='Make the variable immutable')
        params.argument('name', description='Variable name')
        params.argument('value', handler=HandlerType.REST, description='Value')

    def execute(self, context: CommandContext) -> Any:
        session = context.shell.variables
        name = context.arguments.name
        value = context.arguments.value

        if name is None:
            for key, current in context.variables.items():
                context.io.println(f"{key}={'' if current is None else current}")
            return None

        if not value:
            current = context.variables.get(name)
            if current is None and not context.variables.contains(name):
                context.io.println(f"{name} is not set")
                return None
            context.io.println(f"{name}={'' if current is None else current}")
            return current

        text = ' '.join(value)
        session.set(name, text, mutable=not context.arguments.readonly)
        return text


class UnsetCommand(CommandAction):
    """Remove a session variable."""

    name = 'unset'
    description = 'Remove a session variable'

    @classmethod
    def declare(cls, params):
        params.argument('name', required=True, description='Variable name')

    def execute(self, context: CommandContext) -> Any:
        context.shell.variables.unset(context.arguments.name)
        return None


class AliasCommand(CommandAction):
    """Show or define aliases."""

    name = 'alias'
    description = 'List, show or define aliases'

    @classmethod
    def declare(cls, params):
        params.option('stop', '--', handler=HandlerType.STOP,
                      description='Treat everything after as the target')
        params.argument('name', description='Alias name')
        params.argument('target', handler=HandlerType.REST, description='Command line to run')

    def execute(self, context: CommandContext) -> Any:
        aliases = context.shell.aliases
        name = context.arguments.name
        target = context.arguments.target

        if name is None:
            for alias, text in aliases.aliases().items():
                context.io.println(f"{alias}='{text}'")
            return None

        if not target:
            text = aliases.get(name)
            if text is None:
                raise CommandError(f"Alias not defined: {name}", name=name)
            context.io.println(f"{name}='{text}'")
            return text

        text = ' '.join(target)
        aliases.register_alias(name, text)
        return text


class UnaliasCommand(CommandAction):
    """Remove an alias."""

    name = 'unalias'
    description = 'Remove an alias'

    @classmethod
    def declare(cls, params):
        params.argument('name', required=True, description='Alias name')

    def execute(self, context: CommandContext) -> Any:
        context.shell.aliases.remove_alias(context.arguments.name)
        return None


class ChangeDirectoryCommand(CommandAction):
    """Change the session working directory."""

    name = 'cd'
    description = 'Change the working directory'

    @classmethod
    def declare(cls, params):
        params.argument('path', handler=HandlerType.FILE, description='Directory; defaults to the user home')

    def execute(self, context: CommandContext) -> Any:
        path = context.arguments.path
        if path is None:
            path = Path(context.variables.get(VariableNames.USER_HOME) or os.path.expanduser('~'))

        target = resolve_file(context, path)
        if not target.exists():
            raise FileNotFoundError(f"No such directory: {target}")
        if not target.is_dir():
            raise NotADirectoryError(f"Not a directory: {target}")

        directory = str(target.resolve())
        context.shell.variables.set(VariableNames.USER_DIR, directory)
        return directory


class PrintWorkingDirectoryCommand(CommandAction):
    """Print the session working directory."""

    name = 'pwd'
    description = 'Print the working directory'

    def execute(self, context: CommandContext) -> Any:
        directory = context.variables.get(VariableNames.USER_DIR) or os.getcwd()
        context.io.println(directory)
        return directory


class ListDirectoryCommand(CommandAction):
    """List directory contents."""

    name = 'ls'
    description = 'List directory contents'

    @classmethod
    def declare(cls, params):
        params.option('long', '-l', '--long', handler=HandlerType.BOOLEAN,
                      description='Long listing format')
        params.option('all', '-a', '--all', handler=HandlerType.BOOLEAN,
                      description='Include hidden entries')
        params.argument('path', handler=HandlerType.FILE, description='Directory or file')

    def execute(self, context: CommandContext) -> Any:
        args = context.arguments
        target = resolve_file(context, args.path if args.path is not None else Path('.'))

        if not target.exists():
            raise FileNotFoundError(f"No such file or directory: {target}")

        if target.is_dir():
            entries = sorted(target.iterdir(), key=lambda p: p.name)
            if not args.all:
                entries = [e for e in entries if not e.name.startswith('.')]
        else:
            entries = [target]

        names: List[str] = []
        for entry in entries:
            name = entry.name
            if entry.is_dir():
                name += '/'
            names.append(name)

            if args.long:
                info = entry.stat()
                # Format: permissions size name
                perm = stat.filemode(info.st_mode)
                size = str(info.st_size).rjust(8)
                context.io.println(f"{perm} {size} {name}")
            else:
                context.io.println(name)

        return names


class SourceCommand(CommandAction):
    """Run the commands in a file."""

    name = 'source'
    description = 'Execute commands from a file'
    scope = ActionScope.PROTOTYPE

    @classmethod
    def declare(cls, params):
        params.argument('file', handler=HandlerType.FILE, required=True, description='Script file')

    def execute(self, context: CommandContext) -> Any:
        script = resolve_file(context, context.arguments.file)
        if not script.is_file():
            raise FileNotFoundError(f"No such file: {script}")

        text = script.read_text(encoding='utf-8')
        return context.shell.run_script(text, variables=context.variables)


class EvalCommand(CommandAction):
    """Execute the arguments as a command line."""

    name = 'eval'
    description = 'Execute arguments as a command line'
    opaque_arguments = True

    def execute(self, context: CommandContext) -> Any:
        line = ' '.join(context.arguments)
        return context.shell.execute(line, variables=context.variables)


class GroupCommand(CommandAction):
    """Show or change the current command group."""

    name = 'group'
    description = 'Show or change the current command group'

    @classmethod
    def declare(cls, params):
        params.argument('path', description="Group path ('/', '..', 'name', '/a/b')")

    def execute(self, context: CommandContext) -> Any:
        current = str(context.variables.get(VariableNames.GROUP) or ROOT)
        path = context.arguments.path

        if path is None:
            context.io.println(current)
            return current

        group = CommandPath.absolute(path, current)
        if group != ROOT and group.lstrip('/') not in context.shell.commands.groups():
            raise CommandError(f"No such command group: {group}", name=path)

        context.shell.variables.set(VariableNames.GROUP, group)
        return group


BUILTIN_COMMANDS = (
    HelpCommand,
    ExitCommand,
    EchoCommand,
    SetCommand,
    UnsetCommand,
    AliasCommand,
    UnaliasCommand,
    ChangeDirectoryCommand,
    PrintWorkingDirectoryCommand,
    ListDirectoryCommand,
    SourceCommand,
    EvalCommand,
    GroupCommand,
)
