"""Utilities for handling KeyboardInterrupt in try-except blocks.

Compilations run on worker threads; a Ctrl-C observed there must still reach
the main thread so the whole build stops.
"""

import _thread


def handle_keyboard_interrupt_properly(ke: KeyboardInterrupt) -> None:
    """Handle KeyboardInterrupt by propagating it to the main thread.

    Usage:
        try:
            run_tool(cmd, "compile main.c")
        except KeyboardInterrupt as ke:
            handle_keyboard_interrupt_properly(ke)

    Args:
        ke: The KeyboardInterrupt exception to handle

    Raises:
        KeyboardInterrupt: Always re-raises the exception after handling
    """
    _thread.interrupt_main()
    raise ke
