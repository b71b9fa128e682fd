# (c) Copyright IBM Corp. 2025

"""Resolution of socket inodes to the pids holding them open."""

import os
import re
import shlex
import signal
import subprocess

from porthound.discovery.models import SocketOwnerMap, SocketOwnership
from porthound.log import logger

# Matches "... /proc/<pid>/fd/<fd> -> socket:[<inode>]" in `ls -l` output
SOCKET_FD_PATTERN = re.compile(r"/(\d+)/fd/\d+ -> socket:\[(\d+)\]")


def socket_listing_command(proc_root: str) -> str:
    return f"ls -l {shlex.quote(proc_root)}/[0-9]*/fd/[0-9]* 2>/dev/null | grep socket:"


def list_socket_descriptors(proc_root: str, timeout: float) -> str:
    """
    Lists the socket file descriptors of every process we're allowed to see.

    Returns the raw `ls -l` lines, or an empty string when the listing
    couldn't be produced within <timeout> seconds.
    """
    try:
        # The pipeline gets its own process group so a timeout stops ls and grep too
        proc = subprocess.Popen(
            socket_listing_command(proc_root),
            shell=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            start_new_session=True,
        )
    except OSError:
        logger.debug("Socket listing could not be started: ", exc_info=True)
        return ""

    try:
        # grep exits with 1 when nothing matched, which is fine here
        out, _ = proc.communicate(timeout=timeout)
    except subprocess.TimeoutExpired:
        logger.debug(f"Socket listing did not finish within {timeout} seconds")
        _kill_process_group(proc)
        return ""

    return out or ""


def _kill_process_group(proc: subprocess.Popen) -> None:
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except OSError:
        logger.debug(f"Unable to kill socket listing process group {proc.pid}: ", exc_info=True)
    proc.communicate()


def parse_socket_owners(text: str) -> SocketOwnerMap:
    """
    Builds the inode -> pid map from socket listing lines.

    Lines without a pid and bracketed inode are skipped.  If several lines
    name the same inode, the last one wins.
    """
    owners = SocketOwnerMap()
    for line in text.splitlines():
        match = SOCKET_FD_PATTERN.search(line)
        if match is None:
            continue
        owners.add(SocketOwnership(inode=int(match.group(2)), pid=int(match.group(1))))
    return owners
