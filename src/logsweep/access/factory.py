from __future__ import annotations

import logging
import socket
from dataclasses import dataclass
from typing import Literal

from logsweep.common.config import RemoteCfg

from .base import FileAccessor
from .local import LocalAccessor
from .remote import SshAccessor

log = logging.getLogger("logsweep.access")

TargetKind = Literal["local", "remote"]

LOOPBACK_NAMES: frozenset[str] = frozenset({"localhost", "127.0.0.1", "::1"})


@dataclass(frozen=True)
class TargetDecision:
    kind: TargetKind
    host: str
    reason: str


def local_identities() -> set[str]:
    names = set(LOOPBACK_NAMES)
    try:
        hn = socket.gethostname()
        fqdn = socket.getfqdn()
    except OSError:
        return names
    for n in (hn, fqdn):
        if n:
            names.add(n.lower())
            names.add(n.split(".", 1)[0].lower())
    return names


def resolve_target(host: str) -> TargetDecision:
    """
    Decide whether `host` is this machine.

    Rules:
    - "localhost" and loopback addresses are local.
    - The machine's own hostname, FQDN, or short hostname is local.
    - Anything else is remote.
    """
    h = (host or "").strip().lower()
    if not h or h in LOOPBACK_NAMES:
        return TargetDecision("local", host, "loopback name")
    if h in local_identities():
        return TargetDecision("local", host, "matches this machine's hostname")
    return TargetDecision("remote", host, "not this machine; using ssh")


def pick_accessor(host: str, remote: RemoteCfg | None = None) -> FileAccessor:
    decision = resolve_target(host)
    log.info("target selected: kind=%s host=%s reason=%s", decision.kind, decision.host, decision.reason)
    if decision.kind == "local":
        return LocalAccessor()
    remote = remote or RemoteCfg()
    return SshAccessor(
        host,
        ssh_binary=remote.ssh_binary,
        ssh_options=remote.ssh_options,
        user=remote.user,
    )
