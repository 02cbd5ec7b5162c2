from typing import TYPE_CHECKING

from attrs import evolve, field

from argtree.utils import frozen

if TYPE_CHECKING:
    from argtree.command import Arg, Command, Flag


@frozen(kw_only=True)
class ContextView:
    """Everything the parser may match while ``command`` is the active context.

    Views are immutable; entering a subcommand builds a new one with :meth:`of`.
    """

    command: "Command"

    commands: dict[str, "Command"] = field(factory=dict, hash=False)
    """Immediate subcommands by name."""

    flags: dict[str, "Flag"] = field(factory=dict, hash=False)
    """Visible flags by long name, including those inherited from ancestors."""

    shorts: dict[str, "Flag"] = field(factory=dict, hash=False)
    """Visible flags by short character, including those inherited from ancestors."""

    args: tuple["Arg", ...] = ()
    """Positional arguments not yet filled. Only the active command's own arguments are ever queued."""

    @classmethod
    def of(cls, command: "Command") -> "ContextView":
        flags, shorts = {}, {}
        # Root first, so that a subcommand's flag shadows an ancestor's flag of the same name.
        for ancestor in command.ancestors():
            for flag in ancestor.flags:
                if flag.name:
                    flags[flag.name] = flag
                if flag.short:
                    shorts[flag.short] = flag

        return cls(
            command=command,
            commands={child.name: child for child in command.commands},
            flags=flags,
            shorts=shorts,
            args=command.args,
        )

    @property
    def has_commands(self) -> bool:
        return bool(self.commands)

    def consume_arg(self) -> tuple["Arg", "ContextView"]:
        """Match the next positional slot.

        Returns the matched argument, and the view to continue with.
        An aggregate argument stays at the head of the queue, capturing every later positional token.

        Raises
        ------
        IndexError
            No positional slots remain.
        """
        arg = self.args[0]
        if arg.is_aggregate:
            return arg, self
        return arg, self.evolve(args=self.args[1:])

    def evolve(self, **kwargs) -> "ContextView":
        return evolve(self, **kwargs)

    def flag_names(self) -> list[str]:
        """Command-line spellings of every visible, non-hidden flag."""
        names = [f"--{name}" for name, flag in self.flags.items() if not flag.hidden]
        names.extend(f"-{short}" for short, flag in self.shorts.items() if not flag.hidden)
        return names

    def command_names(self) -> list[str]:
        """Names of every visible subcommand."""
        return [name for name, command in self.commands.items() if not command.hidden]
