# src/ps_app/core/registry.py
from importlib.metadata import entry_points

from fastapi import APIRouter

EP_GROUP = "ps_app.modules"


def load_module_routers() -> list[APIRouter]:
    routers: list[APIRouter] = []
    for ep in entry_points(group=EP_GROUP):
        router = ep.load()
        # Each entry point must resolve to an APIRouter; anything else is ignored
        if isinstance(router, APIRouter):
            routers.append(router)
    return routers
