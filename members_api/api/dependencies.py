"""FastAPI dependency injection wiring."""
from fastapi import Request

from ..core.config import Settings
from ..media.uploader import MediaUploader
from ..storage.members import MemberStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_member_store(request: Request) -> MemberStore:
    return request.app.state.member_store


def get_media_uploader(request: Request) -> MediaUploader:
    return request.app.state.media_uploader
