import logging
import sys

from push_daemon.core.config import Settings, settings
from push_daemon.services import server
from push_daemon.services.daemon import DaemonError, SystemdServiceManager

logger = logging.getLogger(__name__)

USAGE = "Usage: push-daemon install | remove | start | stop | status"


def manage(
    args: list[str],
    app_settings: Settings = settings,
    manager: SystemdServiceManager | None = None,
) -> str:
    """
    Run the lifecycle command named by the first argument.
    Returns a status line; service-layer failures raise DaemonError.
    """
    if not args:
        return USAGE

    manager = manager or SystemdServiceManager.from_settings(app_settings)
    command = args[0]
    if command == "install":
        return manager.install()
    elif command == "remove":
        return manager.remove()
    elif command == "start":
        return server.serve(app_settings)
    elif command == "stop":
        return server.stop(app_settings)
    elif command == "status":
        status = manager.status()
        pid = server.read_pid(app_settings.PID_FILE)
        if pid is not None:
            status = f"{status} (server pid {pid})"
        return status
    return USAGE


def main() -> None:
    logging.basicConfig(level=settings.LOG_LEVEL.upper())
    try:
        status = manage(sys.argv[1:])
    except (DaemonError, OSError) as e:
        logger.critical(f"Error: {e}")
        sys.exit(1)
    print(status)


if __name__ == "__main__":
    main()
