"""
Console helpers
Plain rich consoles for status lines: stdout for results, stderr for problems
"""

from rich.console import Console


def create_console() -> Console:
    """Console for success lines on stdout."""
    return Console(highlight=False, markup=False, emoji=False, soft_wrap=True)


def create_error_console() -> Console:
    """Console for warnings and errors on stderr."""
    return Console(
        stderr=True, highlight=False, markup=False, emoji=False, soft_wrap=True
    )
