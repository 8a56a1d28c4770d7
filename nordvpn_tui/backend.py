"""
VPN backend - runs the NordVPN command line client.
"""

import logging
import shutil
import subprocess
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


DEFAULT_NORDVPN_PATH = "nordvpn"
DEFAULT_TIMEOUT = 60.0


class BackendError(Exception):
    """Raised when a VPN client command fails."""
    pass


class VPNBackend(ABC):
    """
    Operations the session controller needs from a VPN client.
    
    Each failing operation raises BackendError with a human readable
    diagnostic.
    """

    @abstractmethod
    def list_regions(self) -> str:
        """Get the raw list of connectable regions, one per line."""

    @abstractmethod
    def query_status(self) -> str:
        """Get the raw connection status text."""

    @abstractmethod
    def connect(self, region_id: str) -> None:
        """Connect to the given region."""

    @abstractmethod
    def disconnect(self) -> None:
        """Tear down the current connection."""


class NordVPNBackend(VPNBackend):
    """Backend that shells out to the `nordvpn` executable."""

    def __init__(self, executable: str = DEFAULT_NORDVPN_PATH, timeout: float = DEFAULT_TIMEOUT):
        """
        Initialize the backend.
        
        Args:
            executable: Name or path of the nordvpn binary.
            timeout: Seconds to wait for a single command.
        """
        self.executable = executable
        self.timeout = timeout

    def is_available(self) -> bool:
        """Check whether the nordvpn executable can be found."""
        return shutil.which(self.executable) is not None

    def _run_command(self, args: list[str]) -> str:
        """
        Run a nordvpn subcommand.
        
        Args:
            args: Arguments passed after the executable.
            
        Returns:
            Captured standard output.
            
        Raises:
            BackendError: If the command cannot run or exits non-zero.
        """
        cmd = [self.executable, *args]
        logger.debug("Running %s", " ".join(cmd))

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.timeout,
                check=False
            )
        except FileNotFoundError as e:
            logger.warning("nordvpn executable missing: %s", e)
            raise BackendError(f"nordvpn command not found: {e}") from e
        except subprocess.TimeoutExpired as e:
            logger.warning("%s timed out", " ".join(cmd))
            raise BackendError(
                f"'{' '.join(cmd)}' timed out after {self.timeout:g}s"
            ) from e

        if result.returncode != 0:
            # The client prints most of its errors on stdout
            diagnostic = (result.stderr or "").strip() or (result.stdout or "").strip()
            if not diagnostic:
                diagnostic = f"exit status {result.returncode}"
            logger.warning("%s failed: %s", " ".join(cmd), diagnostic)
            raise BackendError(diagnostic)

        return result.stdout or ""

    def list_regions(self) -> str:
        return self._run_command(["countries"])

    def query_status(self) -> str:
        return self._run_command(["status"])

    def connect(self, region_id: str) -> None:
        self._run_command(["connect", region_id])

    def disconnect(self) -> None:
        self._run_command(["disconnect"])
