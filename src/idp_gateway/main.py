"""ASGI entry point: ``uvicorn idp_gateway.main:app``."""

from idp_gateway.api import create_application

app = create_application()
