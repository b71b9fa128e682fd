# (c) Copyright IBM Corp. 2025

from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterator, MutableMapping, TypeVar, Union

# State code of a listening socket in the kernel TCP tables
LISTENING_STATE = "0A"

# Detail given to a surfaced port whose owner couldn't be resolved
UNKNOWN_DETAIL = "unknown"

V = TypeVar("V")


@dataclass
class ConnectionRecord:
    local_address: str  # HEXIP:HEXPORT, as found in the table
    state: str  # hex state code, "0A" when listening
    inode: int  # the socket inode, 0 for sockets in TIME_WAIT and the like

    @property
    def is_listening(self) -> bool:
        return self.state.upper() == LISTENING_STATE


@dataclass
class ListeningPort:
    port: int
    ip: str
    inode: int


@dataclass
class SocketOwnership:
    inode: int
    pid: int


@dataclass
class ProcessInfo:
    pid: int
    cwd: str
    cmd: str  # the command line, arguments separated by spaces


@dataclass
class CandidatePort:
    port: int
    detail: str  # the owning command line or UNKNOWN_DETAIL

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def validate_key(key: Union[int, str]) -> int:
    """
    Converts a pid or inode key into a non-negative int.

    Decimal strings are accepted since both show up as text in /proc.
    @raise TypeError: for anything but int or str (bool included)
    @raise ValueError: for negative or non-decimal values
    """
    if isinstance(key, bool) or not isinstance(key, (int, str)):
        raise TypeError(f"Expected an int or decimal string key, got {type(key).__name__}")

    if isinstance(key, str):
        key = key.strip()
        if not key.isdecimal():
            raise ValueError(f"Not a decimal key: {key!r}")
        return int(key)

    if key < 0:
        raise ValueError(f"Negative key: {key}")
    return key


class IntKeyedMap(MutableMapping[int, V]):
    """
    Mapping whose keys are validated, non-negative ints.

    "42" and 42 address the same entry.  Looking up an invalid key raises
    KeyError so that get() and `in` behave like a plain dict.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        self._data: Dict[int, V] = {}
        self.update(*args, **kwargs)

    def __getitem__(self, key: Union[int, str]) -> V:
        try:
            return self._data[validate_key(key)]
        except (TypeError, ValueError):
            raise KeyError(key) from None

    def __setitem__(self, key: Union[int, str], value: V) -> None:
        self._data[validate_key(key)] = value

    def __delitem__(self, key: Union[int, str]) -> None:
        try:
            del self._data[validate_key(key)]
        except (TypeError, ValueError):
            raise KeyError(key) from None

    def __iter__(self) -> Iterator[int]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._data!r})"


class SocketOwnerMap(IntKeyedMap[int]):
    """socket inode -> owning pid"""

    def add(self, ownership: SocketOwnership) -> None:
        self[ownership.inode] = validate_key(ownership.pid)


class ProcessInventory(IntKeyedMap[ProcessInfo]):
    """pid -> ProcessInfo"""

    def add(self, process: ProcessInfo) -> None:
        self[process.pid] = process
