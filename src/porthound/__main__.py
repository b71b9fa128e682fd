# (c) Copyright IBM Corp. 2025

"""
This module provides "python -m porthound" functionality: take one snapshot
of the candidate ports on this host and print it as JSON.

Supported arguments:
 - --pretty: indent the output
 - --debug:  log discovery details to stderr
"""

import logging
import sys

from porthound.finder import discover_candidate_ports
from porthound.options import DiscoveryOptions
from porthound.util import to_json, to_pretty_json


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv

    options = DiscoveryOptions()
    if "--debug" in argv:
        options.debug = True
        options.log_level = logging.DEBUG

    candidates = discover_candidate_ports(options)

    if "--pretty" in argv:
        print(to_pretty_json(candidates))
    else:
        print(to_json(candidates).decode())
    return 0


if __name__ == "__main__":
    sys.exit(main())
