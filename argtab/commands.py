"""
Argtab command layer: subcommand trees and the CLI wrapper.

What this module provides
- Command: a named node holding an argument table, child commands, a help
  line and an optional handler. run(argv) walks the tree along argv and
  parses the remaining tokens at the selected node.
- invoke(target, argv): run a Command or a Parser the way a program's main
  would, printing help or errors and returning an exit status.

Dispatch
- Tokens after argv[0] are scanned until "--help"/"-h" (help for the current
  node), "--" (no further dispatch) or the first token not starting with "-".
- When that token names a child, dispatch continues in the child with
  argv[i:] and the path "<path> <child>".
- When it names no child and the node has children but no positionals, the
  token is an unknown command.
- Otherwise the node parses argv with its own table and calls its handler.

Quick start
    from argtab import Argument, Command, Kind, invoke

    add = Command(
        "add",
        arguments=(Argument("name", Kind.POSITIONAL, required=True),),
        help="Add a remote",
        handler=lambda parser, argv: print(parser.positional("name")),
    )
    git = Command("git", commands=(Command("remote", commands=(add,)),))

    if __name__ == "__main__":
        raise SystemExit(invoke(git))
"""
import dataclasses
import functools
import logging
import operator
import re
import shlex
import sys
from collections.abc import Iterable

from .faults import *
from .help import *
from .parsers import *
from .styles import *
from .tables import *
from .utils import *

logger = logging.getLogger(__name__)


class CommandType(type):
    """
    Metaclass giving commands stable introspection.

    - Exposes every name in __introspectable__ as a read-only property mirroring
      the private "_<name>" field.
    - Provides __repr__/__rich_repr__ restricted to __displayable__ when set.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _attach(error, command, path, /):
    """
    Internal: remember the node (and its path) where a dispatch error happened.
    """
    if getattr(error, "command", None) is None:
        error.command = command
        error.path = path
    return error


class Command(metaclass=CommandType):
    """
    Node of a command tree.

    Parameters
    - name: command name, matched against argv tokens by its parent.
    - arguments: argument table, validated on construction.
    - commands: child commands; names must be unique.
    - help: one-line description, also used as the help description when
      config.description is empty.
    - handler: callable(parser, argv) run after a successful parse.
    - config: HelpConfig used for this node's parser and help screen.
    """

    __introspectable__ = (
        "name",
        "arguments",
        "commands",
        "help",
        "handler",
        "config",
    )
    __displayable__ = (
        "name",
        "help",
        "arguments",
        "commands",
    )

    def __new__(cls, name, /, arguments=(), commands=(), help="", handler=None, config=HelpConfig()):
        if not isinstance(name, str):
            raise TypeError("command name must be a string")
        if not re.fullmatch(r"[^\s-][^\s]*", name):
            raise ValueError("command name must be non-empty, without spaces or a leading '-'")
        if not isinstance(help, str):
            raise TypeError("command help must be a string")
        if handler is not None and not callable(handler):
            raise TypeError("command handler must be callable")
        if not isinstance(config, HelpConfig):
            raise TypeError("command config must be a help-config")
        if not isinstance(commands, Iterable):
            raise TypeError("command children must be an iterable of commands")

        children = {}
        for command in commands:
            if not isinstance(command, Command):
                raise TypeError("command children must only contain commands, got %r" % (command,))
            if children.setdefault(command.name, command) is not command:
                raise DuplicateDefinitionError(
                    "command %r has more than one child named %r" % (name, command.name),
                    token=command.name,
                )

        self = super().__new__(cls)
        self._name = name
        self._arguments = validate(arguments)
        self._commands = tuple(children.values())
        self._children = children
        self._help = help.strip()
        self._handler = handler
        self._config = config
        return self

    def child(self, name, /):
        return self._children.get(name)

    def _positional(self):
        return any(not argument.named for argument in self._arguments)

    def _select(self, argv, path, /):
        """
        Internal: walk the tree along argv.

        Returns (node, argv, path, helped) where argv is the slice owned by
        node and helped tells whether "--help"/"-h" stopped the walk.
        """
        node = self
        while True:
            child = None
            for index, token in enumerate(argv[1:], 1):
                if token == "--":
                    break
                if token in ("--help", "-h"):
                    logger.debug("help requested at %r", path)
                    return node, argv, path, True
                if token.startswith("-"):
                    continue
                child = node.child(token)
                if child is None and node._children and not node._positional():
                    raise _attach(UnknownCommandError(token=token), node, path)
                break
            if child is None:
                return node, argv, path, False
            logger.debug("dispatch %r -> %r", path, child.name)
            node, argv, path = child, argv[index:], "%s %s" % (path, child.name)

    def _configure(self, path, /, **overrides):
        return dataclasses.replace(
            self._config,
            program_name=path,
            description=self._config.description or self._help,
            **overrides,
        )

    def _render(self, path, /, **overrides):
        return render_help(self._arguments, self._configure(path, **overrides), self._commands)

    def run(self, argv, /):
        """
        dispatch argv (argv[0] being the program name) and run the selected node.

        Returns the handler's result, or the node's Parser when it has no handler.
        Raises ShowHelp, UnknownCommandError or any ParseError of the node's parser.
        """
        argv = tuple(argv)
        node, argv, path, helped = self._select(argv, argv[0] if argv else self._name)
        if helped:
            raise _attach(ShowHelp(token="--help"), node, path)

        parser = Parser(node._arguments, node._configure(path))
        try:
            parser.parse(argv)
        except ParseError as error:
            _attach(error, node, path)
            raise

        logger.debug("running %r", path)
        if node._handler is None:
            return parser
        return node._handler(parser, argv)

    def help_for(self, argv, /):
        """
        help text of the node argv selects (UnknownCommandError like run()).
        """
        argv = tuple(argv)
        node, argv, path, _ = self._select(argv, argv[0] if argv else self._name)
        return node._render(path)

    def help_text(self):
        """
        help text of this node under its own name.
        """
        return self._render(self._name)

    def format_error(self, error, /, config=FormatConfig()):
        """
        format a dispatch error.

        Unknown commands are matched against the child names of the node that
        failed, everything else against that node's long forms.
        """
        node = getattr(error, "command", None) or self
        if error.context.kind is ErrorKind.UNKNOWN_COMMAND:
            candidates = [command.name for command in node._commands]
        else:
            candidates = [
                name
                for argument in node._arguments
                for name in (argument.long, *argument.aliases)
                if name is not None
            ]
        return format_error(error, candidates, config)


def invoke(target, argv=None, /, stdout=None, stderr=None, color=ColorMode.AUTO):
    """
    Run a Command or a Parser the way a program entry point would.

    Parameters
    - target: Command or Parser.
    - argv: full argument vector (program name first); sys.argv when None.
      A string is split shell-style.
    - stdout/stderr: text sinks; sys.stdout/sys.stderr when None.
    - color: ColorMode for everything written.

    Behavior
    - help requested: help on stdout, status 0.
    - any other ParseError: error message and help on stderr, status 2.
    - success: status 0.

    Never calls sys.exit; the caller decides what to do with the status.
    """
    if argv is None:
        argv = sys.argv
    elif isinstance(argv, str):
        argv = shlex.split(argv)
    argv = tuple(argv)
    stdout = stdout if stdout is not None else sys.stdout
    stderr = stderr if stderr is not None else sys.stderr

    def helper(error, stream):
        if isinstance(target, Command):
            node = getattr(error, "command", None) or target
            path = getattr(error, "path", None) or (argv[0] if argv else target.name)
            return node._render(path, color=color, stream=stream)
        return render_help(target.arguments, dataclasses.replace(target.config, color=color, stream=stream))

    if isinstance(target, Command):
        run = target.run
    elif isinstance(target, Parser):
        run = target.parse
    else:
        raise TypeError("invoke() argument must be a command or a parser")

    try:
        run(argv)
    except ShowHelp as error:
        stdout.write(helper(error, stdout))
        return 0
    except ParseError as error:
        message = target.format_error(error, FormatConfig(color=color, stream=stderr))
        stderr.write(message + "\n\n" + helper(error, stderr))
        return 2
    return 0


__all__ = (
    "Command",
    "invoke",
)

# Not part of the public API.
del CommandType
