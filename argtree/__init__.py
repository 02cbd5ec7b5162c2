__version__ = "0.0.0"

__all__ = [
    "Action",
    "Arg",
    "ArgtreeError",
    "Command",
    "CommandCollisionError",
    "CommandTreeError",
    "ContextView",
    "Default",
    "EOF",
    "Flag",
    "InvalidValueError",
    "Kind",
    "MissingOperandError",
    "MissingRequiredError",
    "Parser",
    "Resolution",
    "Scanner",
    "Settable",
    "Token",
    "TokenType",
    "UnexpectedArgumentError",
    "UnknownCommandError",
    "UnknownFlagError",
    "Value",
    "ValueNotSettableError",
    "error_panel",
    "format_usage",
    "help_command",
    "help_flag",
    "values",
    "with_default",
]

from argtree import values
from argtree.command import Action, Arg, Command, Flag
from argtree.context import ContextView
from argtree.exceptions import (
    ArgtreeError,
    CommandCollisionError,
    CommandTreeError,
    InvalidValueError,
    MissingOperandError,
    MissingRequiredError,
    UnexpectedArgumentError,
    UnknownCommandError,
    UnknownFlagError,
    ValueNotSettableError,
)
from argtree.help import format_usage, help_command, help_flag
from argtree.panel import error_panel
from argtree.parser import Parser, Resolution
from argtree.scanner import Scanner
from argtree.token import EOF, Token, TokenType
from argtree.value import Default, Kind, Settable, Value, with_default
