# (c) Copyright IBM Corp. 2025

"""
porthound finds the TCP ports being listened on by user processes on a
Linux host, so they can be offered for port forwarding.

    from porthound import discover_candidate_ports

    for candidate in discover_candidate_ports():
        print(candidate.port, candidate.detail)
"""

from porthound.discovery.models import CandidatePort
from porthound.finder import (
    CandidatePortFinder,
    discover_candidate_ports,
    find_candidate_ports,
)
from porthound.options import DiscoveryOptions
from porthound.version import VERSION

__all__ = [
    "VERSION",
    "CandidatePort",
    "CandidatePortFinder",
    "DiscoveryOptions",
    "discover_candidate_ports",
    "find_candidate_ports",
]
