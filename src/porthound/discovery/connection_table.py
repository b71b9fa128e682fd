# (c) Copyright IBM Corp. 2025

"""
Parsing of the kernel TCP connection tables (/proc/net/tcp and /proc/net/tcp6).

A table looks like:

  sl  local_address rem_address   st tx_queue rx_queue tr tm->when retrnsmt   uid  timeout inode
   0: 0100007F:1F90 00000000:0000 0A 00000000:00000000 00:00000000 00000000  1000        0 12345 1 ...

The "tx_queue rx_queue" and "tr tm->when" header pairs each cover a single
colon joined value, so "rx_queue" and "tm->when" are dropped from the header
before the values are aligned to it.
"""

import os
import socket
import sys
from typing import Dict, List

from porthound.discovery.models import ConnectionRecord
from porthound.log import logger

# Header names that don't have a value column of their own
MERGED_COLUMNS = ("rx_queue", "tm->when")

TCP_TABLES = ("net/tcp", "net/tcp6")


def parse_connection_table(text: str) -> List[Dict[str, str]]:
    """
    Parses one connection table into rows of column name -> raw value.

    Values past the last named column are kept under their positional index.
    Rows with fewer values than there are named columns are skipped.
    """
    lines = [line for line in text.strip().splitlines() if line.strip()]
    if not lines:
        return []

    names = [name for name in lines.pop(0).split() if name not in MERGED_COLUMNS]

    rows = []
    for line in lines:
        values = line.split()
        if len(values) < len(names):
            logger.debug(
                f"Skipping connection table row with {len(values)} of {len(names)} columns: {line!r}"
            )
            continue

        row = dict(zip(names, values))
        for i in range(len(names), len(values)):
            row[str(i)] = values[i]
        rows.append(row)

    return rows


def load_connection_records(*tables: str) -> List[ConnectionRecord]:
    """Parses and merges any number of connection tables, keeping their order."""
    records = []
    for table in tables:
        for row in parse_connection_table(table):
            try:
                records.append(
                    ConnectionRecord(
                        local_address=row["local_address"],
                        state=row["st"],
                        inode=int(row["inode"]),
                    )
                )
            except (KeyError, ValueError):
                logger.debug(f"Skipping unusable connection table row: {row}")
    return records


def read_connection_tables(proc_root: str) -> List[str]:
    """Reads the IPv4 and IPv6 TCP tables under <proc_root>, skipping unreadable ones."""
    tables = []
    for name in TCP_TABLES:
        path = os.path.join(proc_root, name)
        try:
            with open(path, "r") as table:
                tables.append(table.read())
        except OSError:
            logger.debug(f"Unable to read connection table {path}: ", exc_info=True)
    return tables


def decode_address(hex_ip: str) -> str:
    """
    Converts an address as stored in the connection tables into text form.

    The kernel writes the address as 32 bit words in host byte order:
    "0100007F" is 127.0.0.1 on a little endian host.  Input that isn't an
    IPv4 or IPv6 address is returned as is.
    """
    try:
        packed = bytes.fromhex(hex_ip)
    except ValueError:
        return hex_ip

    if len(packed) == 4:
        family = socket.AF_INET
    elif len(packed) == 16:
        family = socket.AF_INET6
    else:
        return hex_ip

    if sys.byteorder == "little":
        packed = b"".join(packed[i:i + 4][::-1] for i in range(0, len(packed), 4))

    return socket.inet_ntop(family, packed)
