"""Mirror the snapshot directory to a remote with rclone."""

import asyncio
from pathlib import Path
from typing import List

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from .._utils import logger
from ..config import MirrorConfig
from .errors import MirrorError


class RcloneMirror:
    """Run ``rclone sync <local> <remote>`` as a subprocess."""

    def __init__(self, config: MirrorConfig):
        self.config = config

    def build_command(self, local_dir: Path) -> List[str]:
        return [
            self.config.rclone_binary,
            "sync",
            str(local_dir),
            self.config.remote,
            "--transfers", str(self.config.transfers),
            "--checkers", str(self.config.checkers),
        ]

    async def sync(self, local_dir: Path) -> None:
        """Mirror ``local_dir`` to the configured remote.

        Retried with exponential backoff up to ``max_attempts`` times.

        Raises:
            MirrorError: rclone missing or exiting non-zero on the last attempt
        """
        if not self.config.enabled:
            logger.info("Remote sync disabled")
            return

        logger.info(f"Syncing {local_dir} to {self.config.remote}...")
        retrying = retry(
            stop=stop_after_attempt(self.config.max_attempts),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception_type(MirrorError),
            reraise=True,
        )
        await retrying(self._run)(Path(local_dir))
        logger.info("Sync completed")

    async def _run(self, local_dir: Path) -> None:
        command = self.build_command(local_dir)
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise MirrorError(f"rclone binary not found: {self.config.rclone_binary}") from e

        stdout, stderr = await process.communicate()
        stderr_text = stderr.decode(errors="replace").strip()

        if process.returncode != 0:
            logger.error(f"rclone exited with {process.returncode}: {stderr_text}")
            raise MirrorError(f"rclone sync failed with exit code {process.returncode}: {stderr_text}")

        if stderr_text:
            logger.warning(f"rclone warnings: {stderr_text}")
