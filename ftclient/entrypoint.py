#!/usr/bin/env python3
"""
Launcher for the ftclient streamlit UI.

Checks the environment and replaces the current process with
`streamlit run` on the bundled app.
"""

import os
import sys
import logging
import subprocess

from .config import ClientConfig
from .errors import ConfigError

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("ftclient-ui")

APP_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "ui", "app.py")


def verify_dependencies() -> bool:
    logger.info("Verifying dependencies...")
    try:
        __import__("streamlit")
    except ImportError:
        logger.error("✗ Missing required module: streamlit")
        logger.error("  Install it with: pip install streamlit")
        return False
    logger.info("✓ streamlit available")
    return True


def build_command(host: str, port: int):
    return [
        sys.executable, "-m", "streamlit",
        "run",
        APP_PATH,
        f"--server.port={port}",
        f"--server.address={host}",
        "--logger.level=info",
        "--client.showErrorDetails=true",
    ]


def main() -> int:
    try:
        config = ClientConfig.from_env()
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 2

    if not verify_dependencies():
        return 1

    os.environ['STREAMLIT_TELEMETRY_ENABLED'] = 'false'
    cmd = build_command(config.ui_host, config.ui_port)
    logger.info(f"Starting ftclient UI on {config.ui_host}:{config.ui_port}...")

    try:
        os.execv(cmd[0], cmd)
    except OSError as e:
        logger.error(f"Failed to exec streamlit: {e}")
        # exec is unavailable on some platforms, run as a child instead
        try:
            subprocess.run(cmd, check=True)
        except subprocess.CalledProcessError as e2:
            logger.error(f"Streamlit exited with error code {e2.returncode}")
            return e2.returncode
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
