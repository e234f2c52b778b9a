"""Command 'version' of taskboard"""

from taskboard import __version__
from taskboard.utils.ui.console import get_console

console = get_console(highlight=False)


def version() -> None:
    """Show version information"""
    console.print(__version__)
