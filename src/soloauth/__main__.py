"""soloauth entrypoint.

Run with:
  python -m soloauth
"""

import logging
import os

import uvicorn


def main() -> None:
    logging.basicConfig(
        level=os.getenv("SOLOAUTH_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    host = os.getenv("SOLOAUTH_HOST", "127.0.0.1")
    port = int(os.getenv("SOLOAUTH_PORT", "8000"))
    reload = os.getenv("SOLOAUTH_RELOAD", "false").lower() in {"1", "true", "yes", "y"}
    uvicorn.run("soloauth.app:create_app", factory=True, host=host, port=port, reload=reload)


if __name__ == "__main__":
    main()
