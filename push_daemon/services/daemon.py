import logging
import os
import subprocess
import sys
from pathlib import Path

from push_daemon.core.config import Settings

logger = logging.getLogger(__name__)

UNIT_TEMPLATE = """[Unit]
Description={description}
After=network-online.target

[Service]
ExecStart={exec_start}
Restart=on-failure

[Install]
WantedBy={wanted_by}
"""


class DaemonError(RuntimeError):
    pass


def default_executable() -> str:
    """Command that runs this CLI, preferring the installed console script."""
    script = Path(sys.argv[0]).resolve()
    if script.suffix != ".py" and script.is_file() and os.access(script, os.X_OK):
        return str(script)
    return f"{sys.executable} -m push_daemon.cli"


class SystemdServiceManager:
    """
    Registers and queries the daemon as a systemd unit.
    User mode talks to `systemctl --user`, otherwise to the system manager.
    """

    def __init__(
        self,
        name: str,
        description: str,
        unit_dir: Path,
        user_mode: bool = True,
        executable: str | None = None,
    ):
        self.name = name
        self.description = description
        self.unit_dir = Path(unit_dir)
        self.user_mode = user_mode
        self.executable = executable or default_executable()

    @classmethod
    def from_settings(cls, settings: Settings) -> "SystemdServiceManager":
        return cls(
            name=settings.SERVICE_NAME,
            description=settings.SERVICE_DESCRIPTION,
            unit_dir=settings.UNIT_DIR,
            user_mode=settings.SERVICE_USER_MODE,
        )

    @property
    def unit_name(self) -> str:
        return f"{self.name}.service"

    @property
    def unit_path(self) -> Path:
        return self.unit_dir / self.unit_name

    def is_installed(self) -> bool:
        return self.unit_path.exists()

    def render_unit(self) -> str:
        return UNIT_TEMPLATE.format(
            description=self.description,
            exec_start=f"{self.executable} start",
            wanted_by="default.target" if self.user_mode else "multi-user.target",
        )

    def _systemctl(self, *args: str, check: bool = True) -> subprocess.CompletedProcess:
        cmd = ["systemctl"]
        if self.user_mode:
            cmd.append("--user")
        cmd.extend(args)
        logger.debug(f"Running {' '.join(cmd)}")
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, check=False)
        except OSError as e:
            raise DaemonError(f"Could not run systemctl: {e}") from e
        if check and result.returncode != 0:
            raise DaemonError(
                f"{' '.join(cmd)} failed ({result.returncode}): {result.stderr.strip()}"
            )
        return result

    def install(self) -> str:
        status = f"Install {self.description}:"
        if self.is_installed():
            raise DaemonError(f"{status} failed, service is already installed")

        self.unit_dir.mkdir(parents=True, exist_ok=True)
        self.unit_path.write_text(self.render_unit())
        try:
            self._systemctl("daemon-reload")
            self._systemctl("enable", self.unit_name)
        except DaemonError:
            self.unit_path.unlink(missing_ok=True)
            raise
        logger.info(f"Installed unit {self.unit_path}")
        return f"{status} success"

    def remove(self) -> str:
        status = f"Removing {self.description}:"
        if not self.is_installed():
            raise DaemonError(f"{status} failed, service is not installed")

        self._systemctl("stop", self.unit_name, check=False)
        self._systemctl("disable", self.unit_name)
        self.unit_path.unlink()
        self._systemctl("daemon-reload")
        logger.info(f"Removed unit {self.unit_path}")
        return f"{status} success"

    def status(self) -> str:
        if not self.is_installed():
            raise DaemonError("Status unavailable, service is not installed")

        # is-active exits non-zero for anything but "active"
        result = self._systemctl("is-active", self.unit_name, check=False)
        state = result.stdout.strip() or "unknown"
        return f"{self.description} is {state}"
