"""
Command interpreter for the file system service.

This service parses a user's command line, runs the matching console
operation under the context lock, and reports the outcome together with the
notification to broadcast when the tree changed.
"""

import logging
import shlex
import time
from typing import Callable, Dict, List, Optional

from vfsapi.filesystem.errors import FileSystemError, InvalidArgumentError
from vfsapi.schemas.commands import CommandPerformed
from vfsapi.services.context import FileSystemContext
from vfsapi.services.sessions import Session

logger = logging.getLogger(__name__)


class CommandResult:
    """
    Outcome of a successful command.

    Attributes:
        current_directory: Session's current directory after the command
        response_message: Text to show the user
        notification: Broadcast payload, set only when the tree was mutated
    """

    def __init__(
        self,
        current_directory: str,
        response_message: str,
        notification: Optional[CommandPerformed] = None,
    ):
        self.current_directory = current_directory
        self.response_message = response_message
        self.notification = notification


class Command:
    """Description of one console command"""

    def __init__(
        self,
        name: str,
        handler: Callable[["CommandService", Session, List[str]], str],
        min_args: int,
        max_args: int,
        mutating: bool,
        usage: str,
        aliases: tuple = (),
    ):
        self.name = name
        self.handler = handler
        self.min_args = min_args
        self.max_args = max_args
        self.mutating = mutating
        self.usage = usage
        self.aliases = aliases


def split_command_line(command_line: str) -> List[str]:
    """
    Split a command line into words.

    Double or single quotes group words containing spaces. Backslashes are
    kept as-is since they are valid path separators.

    Raises:
        InvalidArgumentError: If the line is empty or a quote is unbalanced
    """
    if command_line is None or not command_line.strip():
        raise InvalidArgumentError("Command line is empty.")

    lexer = shlex.shlex(command_line, posix=True)
    lexer.whitespace_split = True
    lexer.escape = ""
    lexer.commenters = ""
    try:
        return list(lexer)
    except ValueError as e:
        raise InvalidArgumentError(f"Cannot parse command line: {e}.") from e


class CommandService:
    """
    Service for running command lines against the shared file system.

    Args:
        context: Shared file system context
        print_root: Whether PRINT shows the root line
    """

    def __init__(self, context: FileSystemContext, print_root: bool = False):
        self.context = context
        self.print_root = print_root

    @property
    def console(self):
        return self.context.console

    # Handlers; each returns the response message

    def _make_directory(self, session: Session, args: List[str]) -> str:
        path = self.console.make_directory(session.current_directory, args[0])
        return f"Directory '{path}' created."

    def _change_directory(self, session: Session, args: List[str]) -> str:
        if args:
            session.current_directory = self.console.change_directory(session.current_directory, args[0])
        return session.current_directory

    def _remove_directory(self, session: Session, args: List[str]) -> str:
        path = self.console.remove_directory(session.current_directory, args[0])
        return f"Directory '{path}' removed."

    def _delete_tree(self, session: Session, args: List[str]) -> str:
        path = self.console.delete_tree(session.current_directory, args[0])
        return f"Directory tree '{path}' deleted."

    def _make_file(self, session: Session, args: List[str]) -> str:
        path = self.console.make_file(session.current_directory, args[0])
        return f"File '{path}' created."

    def _delete_file(self, session: Session, args: List[str]) -> str:
        path = self.console.delete_file(session.current_directory, args[0])
        return f"File '{path}' deleted."

    def _lock_file(self, session: Session, args: List[str]) -> str:
        path = self.console.lock_file(session.user_name, session.current_directory, args[0])
        return f"File '{path}' locked by {session.user_name}."

    def _unlock_file(self, session: Session, args: List[str]) -> str:
        path = self.console.unlock_file(session.user_name, session.current_directory, args[0])
        return f"File '{path}' unlocked by {session.user_name}."

    def _copy(self, session: Session, args: List[str]) -> str:
        self.console.copy(session.current_directory, args[0], args[1])
        return f"'{args[0]}' copied to '{args[1]}'."

    def _move(self, session: Session, args: List[str]) -> str:
        self.console.move(session.current_directory, args[0], args[1])
        return f"'{args[0]}' moved to '{args[1]}'."

    def _print_tree(self, session: Session, args: List[str]) -> str:
        return self.console.print_tree(self.print_root)

    def find_command(self, name: str) -> Command:
        command = COMMANDS_BY_NAME.get(name.upper())
        if command is None:
            raise InvalidArgumentError(f"Unknown command '{name}'.")
        return command

    def perform(self, session: Session, command_line: str) -> CommandResult:
        """
        Run one command line on behalf of a session.

        Args:
            session: Authorized session issuing the command
            command_line: Raw command line, e.g. 'md C:/docs'

        Returns:
            CommandResult for the caller

        Raises:
            FileSystemError: If the command is malformed or a precondition fails;
                the tree is left unchanged
        """
        start_time = time.time()
        try:
            words = split_command_line(command_line)
            command = self.find_command(words[0])
            args = words[1:]
            if not command.min_args <= len(args) <= command.max_args:
                raise InvalidArgumentError(f"Usage: {command.usage}")
        except InvalidArgumentError as e:
            logger.debug(f"Unparseable command from {session.user_name}: {command_line!r}: {e}")
            raise

        lock = self.context.write_locked() if command.mutating else self.context.read_locked()
        try:
            with lock:
                message = command.handler(self, session, args)
        except FileSystemError as e:
            logger.warning(f"Command rejected for {session.user_name}: {command_line!r}: {e}")
            raise

        notification = None
        if command.mutating:
            notification = CommandPerformed(user_name=session.user_name, command_line=command_line)

        process_time = (time.time() - start_time) * 1000  # ms
        logger.info(f"{command.name} processed in {process_time:.2f}ms for {session.user_name}: {command_line!r}")

        return CommandResult(
            current_directory=session.current_directory,
            response_message=message,
            notification=notification,
        )


COMMANDS: List[Command] = [
    Command("MD", CommandService._make_directory, 1, 1, True, "MD <path>", ("MKDIR",)),
    Command("CD", CommandService._change_directory, 0, 1, False, "CD [path]", ("CHDIR",)),
    Command("RD", CommandService._remove_directory, 1, 1, True, "RD <path>", ("RMDIR",)),
    Command("DELTREE", CommandService._delete_tree, 1, 1, True, "DELTREE <path>"),
    Command("MF", CommandService._make_file, 1, 1, True, "MF <path>"),
    Command("DEL", CommandService._delete_file, 1, 1, True, "DEL <path>"),
    Command("LOCK", CommandService._lock_file, 1, 1, True, "LOCK <path>"),
    Command("UNLOCK", CommandService._unlock_file, 1, 1, True, "UNLOCK <path>"),
    Command("COPY", CommandService._copy, 2, 2, True, "COPY <source> <destination>"),
    Command("MOVE", CommandService._move, 2, 2, True, "MOVE <source> <destination>"),
    Command("PRINT", CommandService._print_tree, 0, 0, False, "PRINT"),
]

COMMANDS_BY_NAME: Dict[str, Command] = {
    name: command for command in COMMANDS for name in (command.name,) + command.aliases
}
