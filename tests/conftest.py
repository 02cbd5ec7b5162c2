import pytest
from rich.console import Console

from argtree import Command, values


@pytest.fixture
def console():
    return Console(width=70, force_terminal=True, highlight=False, color_system=None, legacy_windows=False)


@pytest.fixture
def root():
    return Command("root", print_error=False, exit_on_error=False)


@pytest.fixture
def typed_root(root):
    """Root command with ``-i/--int``, ``-b/--bool`` and ``-s/--string`` flags.

    Returns the command and the backing values, keyed by flag name.
    """
    flag_values = {
        "int": values.Int(),
        "bool": values.Bool(),
        "string": values.String("default"),
    }
    for name, value in flag_values.items():
        root.add_flag(name, short=name[0], value=value)
    return root, flag_values
