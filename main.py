"""LedgerOS launcher: sanity-check the environment, then start the Streamlit UI."""
from __future__ import annotations
import os
import sys
import subprocess
from pathlib import Path
from typing import Optional

import httpx

# --- Ensure project root is in path ---
ROOT_DIR = Path(__file__).resolve().parent
if str(ROOT_DIR) not in sys.path:
    sys.path.append(str(ROOT_DIR))

from api.auth import AuthApi
from api.client import ApiClient
from api.session import Session
from core.config import config
from core.errors import LedgerError
from core.logger import get_logger
from core.storage import MemoryStorage

log = get_logger("main")

UI_ENTRYPOINT = ROOT_DIR / "ui" / "app.py"


def probe_backend(timeout: float = 3.0, transport: Optional[httpx.BaseTransport] = None) -> bool:
    """Ask the backend for its auth status; only logs, never blocks startup."""
    session = Session(MemoryStorage()).init()
    with ApiClient(session, timeout=timeout, transport=transport) as client:
        try:
            status = AuthApi(client).check()
        except LedgerError as e:
            log.warning(f"Backend not reachable at {client.base_url}: {e}")
            return False
    log.info(f"Backend answered at {config.api_base_url} (setup required: {status.setup_required})")
    return True


def verify_environment() -> None:
    """Check environment prerequisites before launching Streamlit."""
    log.info(f"Starting LedgerOS in '{config.environment}' mode")

    for d in (config.data_dir, config.logs_dir):
        if not d.exists():
            log.warning(f"Creating missing directory: {d}")
            d.mkdir(parents=True, exist_ok=True)

    if not os.getenv("BACKEND_URL"):
        log.warning(f"BACKEND_URL not set, falling back to {config.backend_url}")
    probe_backend()


def launch_streamlit() -> None:
    """Run ui/app.py under Streamlit on the configured port."""
    if not UI_ENTRYPOINT.exists():
        log.error(f"UI app not found at {UI_ENTRYPOINT}")
        sys.exit(1)

    port = os.getenv("PORT", config.app_port)
    command = [
        sys.executable, "-m", "streamlit", "run", str(UI_ENTRYPOINT),
        "--server.port", str(port),
        "--server.headless", "true",
        "--browser.gatherUsageStats", "false",
    ]
    log.info(f"Launching Streamlit on port {port}")

    try:
        subprocess.run(command, check=True, cwd=str(ROOT_DIR))
    except KeyboardInterrupt:
        log.info("LedgerOS stopped by user.")
    except subprocess.CalledProcessError as e:
        log.error(f"Streamlit exited with status {e.returncode}")
        sys.exit(1)


def main() -> None:
    verify_environment()
    launch_streamlit()


if __name__ == "__main__":
    main()
