# (c) Copyright IBM Corp. 2025

"""
The entry point used by the port forwarding UI to look for candidate ports.

Every call takes a fresh snapshot of the host:
  - the kernel TCP tables (/proc/net/tcp, /proc/net/tcp6)
  - the socket file descriptors of every visible process
  - the working directory and command line of every visible process
and joins them into a list of (port, command line) pairs.  Nothing is cached
between calls.
"""

import asyncio
from typing import Any, Dict, List, Optional

from porthound.discovery.connection_table import (
    load_connection_records,
    read_connection_tables,
)
from porthound.discovery.correlation import SelfExclusion, correlate
from porthound.discovery.models import CandidatePort
from porthound.discovery.process_inventory import scan_processes
from porthound.discovery.socket_owners import (
    list_socket_descriptors,
    parse_socket_owners,
)
from porthound.log import logger, update_log_level
from porthound.options import DiscoveryOptions
from porthound.util.runtime import log_runtime_env_info, procfs_available


class CandidatePortFinder(object):
    """
    Finds the TCP ports listened on by user processes on this host.

    Discovery is best effort: unsupported platforms and unreadable data
    produce a shorter (possibly empty) list, never an exception.
    """

    def __init__(self, options: Optional[DiscoveryOptions] = None) -> None:
        self.options = options if options is not None else DiscoveryOptions()
        update_log_level(self.options.log_level)
        log_runtime_env_info()

    def find_candidate_ports(self) -> List[CandidatePort]:
        proc_root = self.options.proc_root

        if not procfs_available(proc_root):
            logger.debug(f"No procfs at {proc_root}; candidate port discovery unsupported")
            return []

        try:
            return self._snapshot(proc_root)
        except Exception:
            logger.debug("find_candidate_ports: ", exc_info=True)
            return []

    async def find_candidate_ports_async(self) -> List[CandidatePort]:
        """Runs find_candidate_ports in the loop's default executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.find_candidate_ports)

    def _snapshot(self, proc_root: str) -> List[CandidatePort]:
        records = load_connection_records(*read_connection_tables(proc_root))
        owners = parse_socket_owners(
            list_socket_descriptors(proc_root, self.options.socket_listing_timeout)
        )
        inventory = scan_processes(proc_root)

        logger.debug(
            f"Snapshot: {len(records)} connections, {len(owners)} sockets, {len(inventory)} processes"
        )

        candidates = correlate(
            records,
            owners,
            inventory,
            exclusion=SelfExclusion(self.options.exclude_patterns),
            surface_unattributed=self.options.surface_unattributed,
        )
        logger.debug(f"Found {len(candidates)} candidate ports")
        return candidates


def discover_candidate_ports(
    options: Optional[DiscoveryOptions] = None,
) -> List[CandidatePort]:
    return CandidatePortFinder(options).find_candidate_ports()


def find_candidate_ports(
    options: Optional[DiscoveryOptions] = None,
) -> List[Dict[str, Any]]:
    """
    The "find candidate ports" remote call.

    @return: [{"port": 8080, "detail": "/usr/bin/myserver --port 8080"}, ...]
    """
    return [candidate.to_dict() for candidate in discover_candidate_ports(options)]
