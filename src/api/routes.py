"""Mounts the bundled call flows under the configured webhook path."""

from __future__ import annotations

from fastapi import APIRouter

from api.twism_routes import build_state_machine_router
from config.settings import get_settings
from flows import call_center, number_game, voice_record

FLOWS = {
    "numbergame": number_game.build_machine,
    "voicerecord": voice_record.build_machine,
    "callcenter": call_center.build_machine,
}


def build_router(mount_path: str | None = None) -> APIRouter:
    if mount_path is None:
        mount_path = get_settings().twism_mount_path
    router = APIRouter()
    for name, build_machine in FLOWS.items():
        router.include_router(
            build_state_machine_router(build_machine(), f"{mount_path}/{name}", tags=[name])
        )
    return router
