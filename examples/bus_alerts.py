"""Fetch Taichung bus alerts anonymously and save them to ``response.json``.

Anonymous access is limited to 20 requests per day. Set
``TDX_CREDENTIALS_FILE`` to a ``{"app_id": ..., "app_key": ...}`` file to use
your own quota instead.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from tdxproxy import TDXProxy, TDXProxyError

ENDPOINT = "v2/Bus/Alert/City/Taichung"


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    logger = logging.getLogger("bus_alerts")

    try:
        if os.environ.get("TDX_CREDENTIALS_FILE"):
            proxy = TDXProxy.from_credential_file(logger=logger)
        else:
            proxy = TDXProxy.anonymous(logger=logger)
        with proxy:
            response = proxy.get(ENDPOINT)
    except TDXProxyError as exc:
        logger.error("Error: %s", exc)
        return 1

    logger.info("headers: %s", dict(response.headers))
    Path("response.json").write_bytes(response.content)
    print(response.text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
