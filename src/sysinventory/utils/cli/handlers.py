# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Signal handlers and interrupt management for CLI operations.

Handled signals are converted into KeyboardInterrupt so that context managers
(temporary workspace, log handlers) unwind on every exit path.
"""

import logging
import signal
from contextlib import contextmanager
from typing import Iterator

from sysinventory.utils.core import shared_state

logger = logging.getLogger(__name__)

HANDLED_SIGNALS = (signal.SIGINT, signal.SIGTERM, signal.SIGHUP)


def handle_interrupt(sig, frame):
    """
    Global signal handler for various interrupts.
    Records the signal in shared_state and raises KeyboardInterrupt.
    """

    logger.debug(f"handle_interrupt called with signal: {sig}, frame: {frame}")
    signal_names = {
        signal.SIGINT: "SIGINT (Keyboard Interrupt)",
        signal.SIGTERM: "SIGTERM (Termination)",
        signal.SIGHUP: "SIGHUP (Hangup)",
    }

    signal_name = signal_names.get(sig, f"Signal {sig}")

    shared_state.INTERRUPT_OCCURRED = True
    shared_state.INTERRUPT_SIGNAL = sig
    shared_state.INTERRUPT_SIGNAL_NAME = signal_name

    logger.warning(f"Interrupt detected: {signal_name}. Stopping inventory.")
    raise KeyboardInterrupt()


def interrupt_exit_code() -> int:
    """
    Exit code for an interrupted run.

    Returns:
        int: 128 + signal number of the recorded signal; 130 (SIGINT) when
        the interrupt did not come through handle_interrupt
    """
    if shared_state.INTERRUPT_OCCURRED and shared_state.INTERRUPT_SIGNAL is not None:
        return 128 + int(shared_state.INTERRUPT_SIGNAL)
    return 128 + int(signal.SIGINT)


@contextmanager
def interrupt_handlers() -> Iterator[None]:
    """Install handle_interrupt for the duration of a run, restoring previous handlers afterwards."""
    previous = {}
    for sig in HANDLED_SIGNALS:
        try:
            previous[sig] = signal.signal(sig, handle_interrupt)
        except ValueError:
            # Not in the main thread
            logger.debug(f"Cannot install handler for signal {sig}")
    try:
        yield
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)
