# routes.py
from fastapi import FastAPI
from controller.queue_controller import queue_router


def register_routes(app: FastAPI) -> None:
    """Register controllers here; the Authorization gate in main.py covers all of them."""
    app.include_router(queue_router)
