"""ASGI entrypoint: `uvicorn app:app`."""
from cashnib.api.main import app  # noqa: F401
