from __future__ import annotations

import logging
import shlex
import subprocess
from datetime import datetime
from typing import Sequence

from logsweep.common.errors import RemoteChannelError
from logsweep.common.schema import display_path

from .base import DeleteResult, FileAccessor

log = logging.getLogger("logsweep.access.remote")

# ssh reserves 255 for its own failures; anything else is the remote command's status
SSH_CHANNEL_FAILURE = 255


class SshAccessor(FileAccessor):
    """
    Runs POSIX find/stat/rm on a remote host through the `ssh` client.

    Rules:
    - One ssh process per operation, always waited on.
    - Channel failures (exit 255, ssh binary missing) raise RemoteChannelError
      from list_files/get_modified_time; delete_file reports them as a failed
      deletion instead.
    - No timeout of our own: a hung connection hangs the run unless the
      ssh options carry ConnectTimeout / ServerAliveInterval.
    """

    def __init__(
        self,
        host: str,
        *,
        ssh_binary: str = "ssh",
        ssh_options: Sequence[str] = ("-o", "BatchMode=yes"),
        user: str | None = None,
    ) -> None:
        self.host = host
        self.ssh_binary = ssh_binary
        self.ssh_options = list(ssh_options)
        self.user = user

    @property
    def target(self) -> str:  # type: ignore[override]
        return f"{self.user}@{self.host}" if self.user else self.host

    def _run(self, *argv: str) -> subprocess.CompletedProcess[str]:
        remote_cmd = " ".join(shlex.quote(a) for a in argv)
        args = [self.ssh_binary, *self.ssh_options, self.target, remote_cmd]
        log.debug("ssh %s: %s", self.target, display_path(remote_cmd))
        try:
            r = subprocess.run(
                args,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors="surrogateescape",
                check=False,
            )
        except OSError as e:
            raise RemoteChannelError(self.host, f"cannot start {self.ssh_binary}: {e}") from e
        if r.returncode == SSH_CHANNEL_FAILURE:
            raise RemoteChannelError(self.host, (r.stderr or "").strip() or "ssh exited with status 255")
        return r

    def list_files(self, root: str) -> list[str]:
        # -H: a symlinked root is followed, as os.walk does locally
        r = self._run("find", "-H", root, "-type", "f", "-print0")
        if r.returncode != 0:
            # find still prints what it could reach (e.g. one unreadable subfolder)
            log.debug("remote find under %s exited %d: %s", display_path(root), r.returncode, (r.stderr or "").strip())
        return sorted(p for p in (r.stdout or "").split("\0") if p)

    def get_modified_time(self, path: str) -> datetime | None:
        r = self._run("stat", "-c", "%Y", "--", path)
        if r.returncode != 0:
            log.debug("remote stat failed for %s: %s", path, (r.stderr or "").strip())
            return None
        try:
            return datetime.fromtimestamp(int(r.stdout.strip()))
        except ValueError:
            log.debug("remote stat for %s returned unparseable output %r", path, r.stdout)
            return None

    def delete_file(self, path: str) -> DeleteResult:
        try:
            r = self._run("rm", "--", path)
        except RemoteChannelError as e:
            return DeleteResult(ok=False, reason=str(e))
        if r.returncode != 0:
            reason = (r.stderr or "").strip() or f"rm exited with status {r.returncode}"
            return DeleteResult(ok=False, reason=reason)
        return DeleteResult(ok=True)
