# (c) Copyright IBM Corp. 2025

import os

from porthound.discovery.models import ProcessInfo, ProcessInventory
from porthound.log import logger


def read_process(proc_root: str, pid: int) -> ProcessInfo:
    """
    Reads the working directory and command line of <pid>.

    /proc/<pid>/cmdline holds NUL separated arguments such as
    "/usr/bin/python\0-m\0http.server\0".  The NULs are turned into spaces.
    @raise OSError: the process is gone or not ours to inspect
    """
    process_dir = os.path.join(proc_root, str(pid))
    cwd = os.readlink(os.path.join(process_dir, "cwd"))
    with open(
        os.path.join(process_dir, "cmdline"), "r", encoding="utf-8", errors="replace"
    ) as cmdline:
        cmd = cmdline.read().replace("\0", " ").rstrip()

    return ProcessInfo(pid=pid, cwd=cwd, cmd=cmd)


def scan_processes(proc_root: str) -> ProcessInventory:
    """Collects a ProcessInfo for every live process under <proc_root>."""
    inventory = ProcessInventory()

    try:
        entries = os.listdir(proc_root)
    except OSError:
        logger.debug(f"Unable to list {proc_root}: ", exc_info=True)
        return inventory

    for entry in entries:
        if not entry.isdecimal():
            continue

        try:
            if not os.path.isdir(os.path.join(proc_root, entry)):
                continue
            inventory.add(read_process(proc_root, int(entry)))
        except OSError as exc:
            # Processes come and go while we scan
            logger.debug(f"Skipping process {entry}: {exc}")

    return inventory
