from pathlib import Path
from typing import Optional
import os

from app.domain.models import DirectorySettings
from app.services.vote_client import VoteApiClient
from app.services.vote_session import VoteSession, open_vote_session
from app.storage.db_manager import CatalogManager
from app.storage.json_db_manager import JsonCatalogManager

DATA_ROOT_ENV_VAR = "APP_DIRECTORY_DATA_DIR"
_REPO_ROOT = Path(__file__).resolve().parents[2]
_DEFAULT_DATA_DIR = _REPO_ROOT / "data"

_settings: Optional[DirectorySettings] = None
_catalog_manager: Optional[CatalogManager] = None
_vote_session: Optional[VoteSession] = None
_vote_client: Optional[VoteApiClient] = None


def get_data_dir() -> Path:
    env_path = os.environ.get(DATA_ROOT_ENV_VAR)
    if env_path:
        d = Path(env_path).expanduser()
    else:
        d = _DEFAULT_DATA_DIR
    d.mkdir(parents=True, exist_ok=True)
    return d


def load_settings(data_dir: Optional[Path] = None) -> DirectorySettings:
    """Build settings from the environment; unset variables fall back to model defaults."""
    values = {"data_dir": data_dir or get_data_dir()}

    env_map = {
        "GITHUB_API_URL": "github_api_url",
        "GITHUB_TOKEN": "github_token",
        "VOTE_API_URL": "vote_api_url",
        "APP_DIRECTORY_REFRESH_HOUR": "refresh_hour",
        "APP_DIRECTORY_REFRESH_MINUTE": "refresh_minute",
    }
    for env_name, field in env_map.items():
        value = os.environ.get(env_name, "").strip()
        if value:
            values[field] = value

    return DirectorySettings(**values)


def get_settings() -> DirectorySettings:
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def get_catalog_manager() -> CatalogManager:
    global _catalog_manager
    if _catalog_manager is None:
        settings = get_settings()
        _catalog_manager = JsonCatalogManager(settings.catalog_path, settings.metadata_path)
    return _catalog_manager


def get_vote_session() -> VoteSession:
    """One vote session per process, shared by every widget."""
    global _vote_session
    if _vote_session is None:
        _vote_session = open_vote_session(get_settings().data_dir)
    return _vote_session


def get_vote_client() -> VoteApiClient:
    global _vote_client
    if _vote_client is None:
        _vote_client = VoteApiClient.for_base_url(get_settings().vote_api_url)
    return _vote_client
