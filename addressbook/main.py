"""ASGI entrypoint for the address book API.

Run with ``uvicorn addressbook.main:app`` or ``python -m addressbook.main``.
"""

import os

import uvicorn

from .core.app_factory import create_application

app = create_application()


def run() -> None:
    uvicorn.run(
        "addressbook.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        log_config=None,
    )


if __name__ == "__main__":
    run()

__all__ = ("app", "run")
