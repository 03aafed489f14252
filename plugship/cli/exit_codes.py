# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI exit codes.

A failed build stage is the exception: its own exit code is passed through
unchanged, so CI sees exactly what the toolchain returned.
"""

SUCCESS: int = 0
USER_ERROR: int = 1
CONFIG_ERROR: int = 2
RUNTIME_ERROR: int = 3
VALIDATION_ERROR: int = 4

# Largest exit status a process can portably report.
MAX_EXIT_CODE: int = 255


def stage_exit_code(child_exit_code: int) -> int:
    """
    Exit code to report for a failed stage.

    Codes a shell can represent (1..255) pass through. Negative codes (killed
    by a signal) and out-of-range Windows status values become RUNTIME_ERROR.
    """
    if 0 < child_exit_code <= MAX_EXIT_CODE:
        return child_exit_code
    return RUNTIME_ERROR
