# (c) Copyright IBM Corp. 2025

"""
Option class for porthound discovery

Values are resolved in this order (first wins):
  - keyword arguments passed to the constructor (in-code configuration)
  - environment variables (PORTHOUND_*)
  - the "discovery" section of the YAML file named by PORTHOUND_CONFIG_PATH
  - defaults
"""

import logging
import os
from typing import Any, Dict

from porthound.log import logger
from porthound.util.config import (
    get_discovery_config_from_yaml,
    is_truthy,
    parse_exclude_patterns,
    parse_timeout,
)
from porthound.util.runtime import PROC_ROOT

DEFAULT_SOCKET_LISTING_TIMEOUT = 5.0


class DiscoveryOptions(object):
    """Settings that drive a single candidate port discovery"""

    def __init__(self, **kwds: Dict[str, Any]) -> None:
        self.debug = False
        self.log_level = logging.WARN
        self.proc_root = PROC_ROOT
        self.socket_listing_timeout = DEFAULT_SOCKET_LISTING_TIMEOUT
        # Unattributable listening sockets are dropped unless this is set
        self.surface_unattributed = False
        # Regexes matched against command lines, on top of the agent defaults
        self.exclude_patterns = []

        self.set_from_yaml()
        self.set_from_env()

        self.__dict__.update(kwds)

    def set_from_yaml(self) -> None:
        """
        Set discovery configurations from the file named by PORTHOUND_CONFIG_PATH.
        @return: None
        """
        if "PORTHOUND_CONFIG_PATH" not in os.environ:
            return

        section = get_discovery_config_from_yaml(os.environ["PORTHOUND_CONFIG_PATH"])

        if "proc_root" in section:
            if isinstance(section["proc_root"], str) and section["proc_root"]:
                self.proc_root = section["proc_root"]
            else:
                logger.warning(
                    f"Ignoring invalid proc_root in configuration file: {section['proc_root']!r}"
                )

        if "socket_listing_timeout" in section:
            self._set_timeout(section["socket_listing_timeout"], "configuration file")

        if "surface_unattributed" in section:
            self.surface_unattributed = is_truthy(section["surface_unattributed"])

        if "exclude_patterns" in section:
            self.exclude_patterns = parse_exclude_patterns(section["exclude_patterns"])

    def set_from_env(self) -> None:
        """
        Set discovery configurations from the environment variables.
        @return: None
        """
        if "PORTHOUND_DEBUG" in os.environ:
            self.log_level = logging.DEBUG
            self.debug = True

        if os.environ.get("PORTHOUND_PROC_ROOT"):
            self.proc_root = os.environ["PORTHOUND_PROC_ROOT"]

        if "PORTHOUND_SOCKET_LISTING_TIMEOUT" in os.environ:
            self._set_timeout(
                os.environ["PORTHOUND_SOCKET_LISTING_TIMEOUT"],
                "PORTHOUND_SOCKET_LISTING_TIMEOUT env var",
            )

        if "PORTHOUND_SURFACE_UNATTRIBUTED" in os.environ:
            self.surface_unattributed = is_truthy(
                os.environ["PORTHOUND_SURFACE_UNATTRIBUTED"]
            )

        if "PORTHOUND_EXCLUDE_PATTERNS" in os.environ:
            self.exclude_patterns = parse_exclude_patterns(
                os.environ["PORTHOUND_EXCLUDE_PATTERNS"]
            )

    def _set_timeout(self, value: Any, source: str) -> None:
        timeout = parse_timeout(value)
        if timeout is None:
            logger.warning(f"Couldn't parse socket listing timeout from {source}: {value!r}")
            return
        self.socket_listing_timeout = timeout
