# (c) Copyright IBM Corp. 2025

import os
from typing import Dict, List, Optional, Sequence, Tuple

TCP_HEADER = (
    "  sl  local_address rem_address   st tx_queue rx_queue tr tm->when retrnsmt"
    "   uid  timeout inode"
)
TCP_ROW_TAIL = " 1 0000000000000000 100 0 0 10 0"

AGENT_CMD = (
    "/home/dev/.vscode-server-insiders/bin/0123abcd/node"
    " /home/dev/.vscode-server-insiders/bin/0123abcd/out/vs/server/main.js --port 0"
)


def tcp_row(sl: int, local_address: str, state: str, inode: int) -> str:
    """A /proc/net/tcp line as the kernel writes it."""
    return (
        f"  {sl:>2}: {local_address} 00000000:0000 {state} 00000000:00000000"
        f" 00:00000000 00000000  1000        0 {inode}{TCP_ROW_TAIL}"
    )


def tcp_table(*rows: str) -> str:
    return "\n".join((TCP_HEADER,) + rows) + "\n"


def fd_line(pid: int, fd: int, inode: int) -> str:
    """An `ls -l /proc/*/fd/*` line for a socket."""
    return (
        f"lrwx------ 1 dev dev 64 Oct 18 10:00 /proc/{pid}/fd/{fd} -> socket:[{inode}]"
    )


def build_proc_root(
    root: str,
    tcp: Optional[str] = None,
    tcp6: Optional[str] = None,
    processes: Optional[Dict[int, Tuple[str, Sequence[str]]]] = None,
) -> str:
    """
    Lays out a fake procfs under <root>.

    @param processes: pid -> (cwd, argv)
    @return: the root, as a string
    """
    root = str(root)
    os.makedirs(os.path.join(root, "net"), exist_ok=True)

    if tcp is not None:
        with open(os.path.join(root, "net", "tcp"), "w") as f:
            f.write(tcp)
    if tcp6 is not None:
        with open(os.path.join(root, "net", "tcp6"), "w") as f:
            f.write(tcp6)

    for pid, (cwd, argv) in (processes or {}).items():
        add_process(root, pid, cwd, argv)

    return root


def add_process(root: str, pid: int, cwd: str, argv: List[str]) -> None:
    process_dir = os.path.join(str(root), str(pid))
    os.makedirs(process_dir, exist_ok=True)
    os.symlink(cwd, os.path.join(process_dir, "cwd"))
    with open(os.path.join(process_dir, "cmdline"), "w") as f:
        f.write("".join(f"{arg}\0" for arg in argv))
