"""
Run the Notepad API with uvicorn.

    python -m notepad          # or: notepad-server
    PORT=5000 STORE_BACKEND=sql python -m notepad
"""

import uvicorn

from notepad.config import settings


def main() -> None:
    uvicorn.run(
        "notepad.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
