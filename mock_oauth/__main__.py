from __future__ import annotations

import uvicorn

from mock_oauth.core.config import SETTINGS


def main() -> None:
    uvicorn.run(
        "mock_oauth.main:app",
        host=SETTINGS.host,
        port=SETTINGS.port,
        log_config=None,  # keep the handlers installed by setup_logging
        reload=SETTINGS.is_dev,
    )


if __name__ == "__main__":
    main()
