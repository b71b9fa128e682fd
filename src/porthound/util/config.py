# (c) Copyright IBM Corp. 2025

from typing import Any, Dict, List, Optional, Union

from porthound.log import logger
from porthound.util.config_reader import ConfigReader

# Top level section of the YAML configuration file read by porthound
CONFIG_SECTION = "discovery"


def is_truthy(value: Any) -> bool:
    """
    Check if a value is truthy, accepting various formats.

    @param value: The value to check
    @return: True if the value is considered truthy, False otherwise

    Accepts the following as True:
    - True (Python boolean)
    - "True", "true" (case-insensitive string)
    - "1" (string)
    - 1 (integer)
    """
    if value is None:
        return False

    if isinstance(value, bool):
        return value

    if isinstance(value, int):
        return value == 1

    if isinstance(value, str):
        value_lower = value.lower()
        return value_lower == "true" or value == "1"

    return False


def parse_exclude_patterns(params: Union[str, List[Any], None]) -> List[str]:
    """
    Parses input to prepare a list of command line exclusion patterns.

    @param params: Can be either:
        - String: "pattern1;pattern2"
        - List: ["pattern1", "pattern2"]
    @return: List of non-empty pattern strings
    """
    if not params:
        return []

    if isinstance(params, str):
        return [pattern.strip() for pattern in params.split(";") if pattern.strip()]

    if isinstance(params, list):
        patterns = []
        for pattern in params:
            if isinstance(pattern, str) and pattern.strip():
                patterns.append(pattern.strip())
            else:
                logger.debug(f"parse_exclude_patterns: Skipping invalid pattern {pattern!r}")
        return patterns

    logger.debug(f"parse_exclude_patterns: Invalid params type: {type(params)}")
    return []


def parse_timeout(value: Any) -> Optional[float]:
    """
    Parses a timeout in seconds.

    @param value: number or numeric string
    @return: the timeout as a positive float or None if it is not usable
    """
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        return None

    if timeout <= 0:
        return None
    return timeout


def get_discovery_config_from_yaml(file_path: str) -> Dict[str, Any]:
    """
    Reads the discovery section of the YAML configuration file.

    @param file_path: path of the YAML file
    @return: the section as a dict, empty when missing or malformed
    """
    config_reader = ConfigReader(file_path)
    section = config_reader.data.get(CONFIG_SECTION)

    if section is None:
        logger.debug(f"No '{CONFIG_SECTION}' section in {file_path}")
        return {}

    if not isinstance(section, dict):
        logger.warning(
            f"Ignoring '{CONFIG_SECTION}' section of {file_path}: expected a mapping"
        )
        return {}

    return section
