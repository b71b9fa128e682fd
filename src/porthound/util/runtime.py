# (c) Copyright IBM Corp. 2025

import os
import platform
from typing import Tuple

from porthound.log import logger

# Default mount point of the process information pseudo-filesystem
PROC_ROOT = "/proc"


def procfs_available(proc_root: str = PROC_ROOT) -> bool:
    """
    Determines if a procfs is mounted at <proc_root>.

    Hosts without one (macOS, Windows, most BSDs) can't be inspected and
    discovery returns nothing there.
    """
    return os.path.isdir(proc_root)


def get_runtime_env_info() -> Tuple[str, str, str]:
    """
    Returns information about the current runtime environment.

    Returns:
        Tuple[str, str, str]: A tuple containing:
            - Operating system name (e.g., 'Linux', 'Darwin')
            - Machine type (e.g., 'x86_64', 'arm64')
            - Python version string
    """
    system = platform.system()
    machine = platform.machine()
    python_version = platform.python_version()

    return system, machine, python_version


def log_runtime_env_info() -> None:
    """Logs debug information about the current runtime environment."""
    system, machine, python_version = get_runtime_env_info()
    logger.debug(
        f"Runtime environment: System: {system}, Machine: {machine}, Python version: {python_version}"
    )
