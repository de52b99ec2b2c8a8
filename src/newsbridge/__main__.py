"""Entry point: python -m newsbridge"""

import asyncio
import sys
from pathlib import Path

from pydantic import ValidationError

from newsbridge.app import NewsBridge
from newsbridge.config import load_config
from newsbridge.logging_config import configure_logging


def main():
    try:
        config = load_config(Path("config/settings.yaml"))
    except ValidationError as e:
        print(f"Invalid configuration: {e}")
        print("Check config/settings.yaml and the PORT, NEWS_API_URL, POLL_INTERVAL_MINUTES variables")
        sys.exit(1)

    configure_logging(config.logging)

    bridge = NewsBridge(config)
    asyncio.run(bridge.start())


if __name__ == "__main__":
    main()
