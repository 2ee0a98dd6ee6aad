import logging
import os
import signal
from pathlib import Path

import uvicorn

from push_daemon.core.config import Settings
from push_daemon.main import create_app
from push_daemon.services.daemon import DaemonError

logger = logging.getLogger(__name__)


def read_pid(pid_file: Path) -> int | None:
    try:
        return int(pid_file.read_text().strip())
    except FileNotFoundError:
        return None
    except ValueError:
        logger.warning(f"Ignoring malformed pid file {pid_file}")
        return None


def build_server(settings: Settings) -> uvicorn.Server:
    config = uvicorn.Config(
        create_app(settings),
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
    return uvicorn.Server(config)


def serve(settings: Settings) -> str:
    """
    Block serving HTTP until the process receives SIGTERM or SIGINT.
    The pid file lets a separate `stop` invocation find this process.
    """
    pid = read_pid(settings.PID_FILE)
    if pid is not None and _is_running(pid):
        raise DaemonError(f"Server already running with pid {pid}")

    server = build_server(settings)
    settings.PID_FILE.write_text(str(os.getpid()))
    logger.info(f"Server started on {settings.HOST}:{settings.PORT} (pid {os.getpid()})")
    try:
        server.run()
    finally:
        settings.PID_FILE.unlink(missing_ok=True)
    return "Server shut down successfully"


def stop(settings: Settings) -> str:
    logger.info("Received request to stop the server. Shutting down gracefully...")
    pid = read_pid(settings.PID_FILE)
    if pid is None:
        return "Server is not running"

    try:
        os.kill(pid, signal.SIGTERM)
    except ProcessLookupError:
        settings.PID_FILE.unlink(missing_ok=True)
        return "Server is not running"
    logger.info(f"Sent SIGTERM to pid {pid}")
    return f"Stop signal sent to server (pid {pid})"


def _is_running(pid: int) -> bool:
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        return True
    return True
