"""Test suite for tibr."""

from tibr.errors import CommandFailedError
from tibr.process import CommandResult


class CommandRecorder:
    """Stand-in for tibr.process.run_command that records calls instead of running them."""

    def __init__(self):
        self.calls = []
        self.returncodes = {}

    def __call__(self, command, args=(), inherit_io=True, cwd=None, check=False):
        args = [str(a) for a in args]
        self.calls.append((command, args, cwd))
        result = CommandResult(command, args, self.returncodes.get(command, 0))
        if check and not result.success:
            raise CommandFailedError(result.command_line, result.returncode)
        return result

    @property
    def command_lines(self):
        return [" ".join([command, *args]) for command, args, _ in self.calls]


def statements_starting_with(statements, prefix):
    """Helper: statements whose text begins with prefix."""
    return [s for s in statements if s.startswith(prefix)]
