"""
Usage Rendering

Formats a command's parameter table as usage text.

Author: YSNRFD
Version: 1.0.0
"""

from typing import List, Optional, TextIO

from .descriptors import CommandParameters, OptionDescriptor, ArgumentDescriptor


class HelpPrinter:
    """
    Renders usage for a parameter table.

    Output:
        usage: ls [options] [PATH]

        Arguments:
          PATH         Directory to list

        Options:
          -l, --long   Use a long listing format
    """

    def __init__(self, parameters: CommandParameters):
        self._parameters = parameters

    def syntax(self, name: str) -> str:
        """One-line synopsis, e.g. 'cd [options] [PATH]'."""
        parts = [name]
        if self._parameters.options:
            parts.append('[options]')
        for argument in self._parameters.arguments:
            label = argument.metavar
            if argument.is_rest:
                label += ' ...'
            parts.append(label if argument.required else f"[{label}]")
        return ' '.join(parts)

    def render(self, name: str, description: Optional[str] = None) -> str:
        """Full usage text."""
        lines: List[str] = []
        if description:
            lines.append(description)
            lines.append('')

        lines.append(f"usage: {self.syntax(name)}")

        arguments = [(a.metavar, self._describe(a)) for a in self._parameters.arguments]
        options = [(self._option_label(o), self._describe(o)) for o in self._parameters.options]

        column = max((len(label) for label, _ in arguments + options), default=0) + 4

        if arguments:
            lines.append('')
            lines.append('Arguments:')
            lines.extend(self._rows(arguments, column))

        if options:
            lines.append('')
            lines.append('Options:')
            lines.extend(self._rows(options, column))

        return '\n'.join(lines) + '\n'

    def print_usage(self, out: TextIO, name: str, description: Optional[str] = None) -> None:
        out.write(self.render(name, description))

    def _option_label(self, option: OptionDescriptor) -> str:
        label = ', '.join(option.flags)
        if option.takes_value:
            label += f" {option.metavar}"
        return label

    def _describe(self, param) -> str:
        text = param.description
        if param.choices:
            text = f"{text} ({'|'.join(param.choices)})".strip()
        if param.required and isinstance(param, ArgumentDescriptor):
            text = f"{text} (required)".strip()
        return text

    def _rows(self, rows, column: int) -> List[str]:
        result = []
        for label, text in rows:
            line = f"  {label}".ljust(column) + text
            result.append(line.rstrip())
        return result
