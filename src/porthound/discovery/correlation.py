# (c) Copyright IBM Corp. 2025

"""
Joins listening sockets to the processes that own them.

  ConnectionRecord --inode--> SocketOwnerMap --pid--> ProcessInventory
"""

import re
from typing import Dict, Iterable, List, Optional, Sequence

from porthound.discovery.connection_table import decode_address
from porthound.discovery.models import (
    UNKNOWN_DETAIL,
    CandidatePort,
    ConnectionRecord,
    ListeningPort,
    ProcessInventory,
    SocketOwnerMap,
)
from porthound.log import logger

# The remote agent's installation directory, e.g. ~/.vscode-server-insiders/bin/<commit>/node
AGENT_DIRECTORY_PATTERN = r"\.vscode-server-[a-zA-Z]+/bin"
# The remote agent's server entry point
AGENT_ENTRY_SCRIPT = "out/vs/server/main.js"


def listening_ports(records: Iterable[ConnectionRecord]) -> List[ListeningPort]:
    """Keeps the listening records and decodes their local address."""
    ports = []
    for record in records:
        if not record.is_listening:
            continue

        hex_ip, _, hex_port = record.local_address.rpartition(":")
        try:
            port = int(hex_port, 16)
        except ValueError:
            logger.debug(f"Skipping record with bad local address {record.local_address!r}")
            continue
        if not hex_ip or not 0 <= port <= 0xFFFF:
            logger.debug(f"Skipping record with bad local address {record.local_address!r}")
            continue

        ports.append(ListeningPort(port=port, ip=decode_address(hex_ip), inode=record.inode))
    return ports


class SelfExclusion(object):
    """
    Recognizes command lines that belong to the remote agent itself.

    Its sockets are the agent's own control channel and never something a
    user wants forwarded.
    """

    def __init__(self, extra_patterns: Optional[Sequence[str]] = None) -> None:
        self.patterns: List[re.Pattern] = [
            re.compile(AGENT_DIRECTORY_PATTERN),
            re.compile(re.escape(AGENT_ENTRY_SCRIPT)),
        ]

        for pattern in extra_patterns or []:
            try:
                self.patterns.append(re.compile(pattern))
            except re.error as exc:
                logger.warning(f"Ignoring invalid exclude pattern {pattern!r}: {exc}")

    def matches(self, cmd: str) -> bool:
        return any(pattern.search(cmd) for pattern in self.patterns)


def correlate(
    records: Iterable[ConnectionRecord],
    owners: SocketOwnerMap,
    inventory: ProcessInventory,
    exclusion: Optional[SelfExclusion] = None,
    surface_unattributed: bool = False,
) -> List[CandidatePort]:
    """
    Attributes every listening socket to its process' command line.

    A socket with no known owner, or whose owner isn't in the inventory, is
    dropped unless <surface_unattributed> is set, in which case it is reported
    with an "unknown" detail.  At most one candidate is returned per port; the
    last attributed one seen wins, and an "unknown" one only fills a port
    nothing else claimed.
    """
    if exclusion is None:
        exclusion = SelfExclusion()

    candidates: Dict[int, CandidatePort] = {}
    for listening in listening_ports(records):
        pid = owners.get(listening.inode)
        process = inventory.get(pid) if pid is not None else None

        if process is None:
            if surface_unattributed:
                # Never shadows an attributed socket on the same port
                candidates.setdefault(
                    listening.port, CandidatePort(port=listening.port, detail=UNKNOWN_DETAIL)
                )
            else:
                logger.debug(
                    f"Dropping port {listening.port}: no owner for socket {listening.inode}"
                )
            continue

        if exclusion.matches(process.cmd):
            logger.debug(f"Excluding port {listening.port} held by agent process {pid}")
            continue

        candidates[listening.port] = CandidatePort(port=listening.port, detail=process.cmd)

    return list(candidates.values())
