from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rich.panel import Panel

    from argtree.exceptions import ArgtreeError


def error_panel(error: "ArgtreeError") -> "Panel":
    """Box a runtime error for the error console.

    .. code-block:: text

        ╭─ Error ──────────────────────────────────╮
        │ Unknown flag: "--verbos".                │
        ╰──────────────────────────────────────────╯

    In verbose mode, the body starts with the error's class name and context.
    """
    from rich import box
    from rich.panel import Panel
    from rich.text import Text

    return Panel(
        Text(str(error), "default"),
        title="Error",
        title_align="left",
        box=box.ROUNDED,
        border_style="red",
        expand=True,
    )
