"""Hand written outputs over to the configured owner."""

import subprocess
from pathlib import Path
from typing import Protocol

from loguru import logger

from ..errors import OwnershipError


class OwnershipChanger(Protocol):
    def change(self, path: str | Path, user: str) -> None: ...


class ChownOwnershipChanger:
    """Runs ``chown user:user <path>``."""

    def __init__(self, command: str = "chown") -> None:
        self.command: str = command

    def change(self, path: str | Path, user: str) -> None:
        cmd = [self.command, f"{user}:{user}", str(path)]
        logger.debug(" ".join(cmd))

        try:
            process = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                check=False,
            )
        except OSError as exc:
            raise OwnershipError(f"failed to change ownership: {exc}") from exc

        if process.returncode != 0:
            raise OwnershipError(
                f"failed to change ownership: exit status {process.returncode}",
                output=process.stdout.strip(),
            )

        logger.info(f"Ownership changed for {path} to {user}")


def change_ownership(
    path: str | Path,
    user: str,
    changer: OwnershipChanger | None = None,
) -> None:
    """Change owner and group of ``path`` to ``user``.

    Raises:
        OwnershipError: If the underlying command fails
    """
    (changer or ChownOwnershipChanger()).change(path, user)
