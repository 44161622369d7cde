"""Search settings endpoints."""

from fastapi import APIRouter

from fetchmark.api.deps import SettingsRepositoryDep, TransportDep
from fetchmark.schemas.settings import (
    ConnectionTestRequest,
    ConnectionTestResult,
    SearchSettingsResponse,
    SearchSettingsUpdate,
)
from fetchmark.services import connectivity

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("", response_model=SearchSettingsResponse)
def get_settings(settings_repository: SettingsRepositoryDep) -> SearchSettingsResponse:
    """
    Get the current search settings.
    """
    return SearchSettingsResponse.from_config(settings_repository.get_settings())


@router.patch("", response_model=SearchSettingsResponse)
def update_settings(
    update_data: SearchSettingsUpdate,
    settings_repository: SettingsRepositoryDep,
) -> SearchSettingsResponse:
    """
    Update the search settings. Omitted fields are left unchanged.
    """
    settings_repository.update_settings(update_data)
    return SearchSettingsResponse.from_config(settings_repository.get_settings())


@router.post("/ollama/test", response_model=ConnectionTestResult)
async def test_ollama(
    request: ConnectionTestRequest,
    settings_repository: SettingsRepositoryDep,
    transport: TransportDep,
) -> ConnectionTestResult:
    """
    Check that Ollama is running and has the model installed.

    Uses the configured model when none is given.
    """
    model_name = request.model_name or settings_repository.get_settings().ollama_model
    return await connectivity.test_ollama_connection(model_name, transport=transport)
