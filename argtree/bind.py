"""Apply parsed resolutions to their values, then fill in defaults and check required entities."""

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Union

from argtree.exceptions import InvalidValueError, MissingRequiredError
from argtree.parser import Entity, Resolution
from argtree.value import Default

if TYPE_CHECKING:
    from argtree.command import Arg, Command, Flag


def invoke_pre_actions(context: "Command", encountered: Iterable[Entity]) -> None:
    """Invoke the pre-action of every matched command, flag and argument, in encounter order.

    Parameters
    ----------
    context: Command
        Active context; passed to every pre-action.
    encountered: Iterable[Command | Flag | Arg]
        Matched entities, as collected by :attr:`.Parser.encountered`.
    """
    for entity in encountered:
        if entity.pre_action is not None:
            entity.pre_action(context)


def apply_values(context: "Command", resolutions: Sequence[Resolution]) -> None:
    """Set every resolved value, then validate and default everything left unset.

    Values are not rolled back on error; anything set before the failure stays set.

    Parameters
    ----------
    context: Command
        Active context. Flags and arguments of it and all of its ancestors are validated.
    resolutions: Sequence[Resolution]
        Output of :meth:`.Parser.parse`.

    Raises
    ------
    InvalidValueError
        A raw string (or a default) could not be converted.
    MissingRequiredError
        A required flag or argument never appeared, and the context has :attr:`~.Command.check_required` set.
    """
    # An entity set to its zero-value still counts as seen.
    seen: set[Entity] = set()
    for resolution in resolutions:
        seen.add(resolution.entity)
        value = resolution.entity.value
        if value is None or resolution.value is None:
            continue
        try:
            value.set(resolution.value)
        except (ValueError, TypeError) as e:
            raise InvalidValueError(name=resolution.name, value=resolution.value, command=context) from e

    # Root to leaf, so errors for parents are reported before errors for children.
    for command in context.ancestors():
        for entity in (*command.flags, *command.args):
            if entity in seen:
                continue
            if entity.required:
                if context.check_required:
                    raise MissingRequiredError(entity=entity, command=context)
                continue
            _apply_default(context, entity)


def _apply_default(context: "Command", entity: Union["Flag", "Arg"]) -> None:
    if not isinstance(entity.value, Default):
        return
    try:
        entity.value.apply_default()
    except (ValueError, TypeError) as e:
        from argtree.command import Flag

        name = entity.display_name if isinstance(entity, Flag) else entity.name
        raise InvalidValueError(
            name=name,
            value=", ".join(entity.value.defaults),
            command=context,
        ) from e
