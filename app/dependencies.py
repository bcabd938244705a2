from fastapi import Depends, Request

from core.config import Settings
from core.services.reconstruction import ReconstructionClient
from core.services.stl_converter import StlConverter
from core.services.storage import JsonDocumentStore, LocalFileStorage


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(settings: Settings = Depends(get_app_settings)) -> JsonDocumentStore:
    return JsonDocumentStore(settings.data_dir)


def get_file_storage(settings: Settings = Depends(get_app_settings)) -> LocalFileStorage:
    return LocalFileStorage(settings.files_dir, settings.files_base_url)


def get_reconstruction_client(settings: Settings = Depends(get_app_settings)) -> ReconstructionClient:
    return ReconstructionClient(settings)


def get_stl_converter(settings: Settings = Depends(get_app_settings)) -> StlConverter:
    return StlConverter(settings)
