"""
Data Models for the CFX Portal Upload Workflow

Dataclass-based models shared by the authentication layer, the portal
client and the upload orchestrator.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


DEFAULT_CHUNK_SIZE = 2 * 1024 * 1024  # 2 MiB
DEFAULT_REQUEST_TIMEOUT_MS = 30_000
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_BASE_DELAY_MS = 500
DEFAULT_RETRY_MAX_DELAY_MS = 5_000


class AuthMode(str, Enum):
    """How the session provider is selected"""
    AUTO = "auto"
    HTTP = "http"
    BROWSER = "browser"


class AuthSource(str, Enum):
    """Which provider produced a session"""
    HTTP = "http"
    BROWSER = "browser"


@dataclass(frozen=True)
class PortalEndpoints:
    """Portal URLs and endpoint templates"""
    api_url: str = "https://portal-api.cfx.re/v1/"
    sso: str = "auth/discourse?return="
    assets_search: str = "me/assets"
    reupload: str = "assets/{id}/re-upload"
    upload_chunk: str = "assets/{id}/upload-chunk"
    complete_upload: str = "assets/{id}/complete-upload"
    portal_domain: str = "portal.cfx.re"
    cookie_name: str = "_t"

    def for_asset(self, template: str, asset_id: str) -> str:
        return template.replace("{id}", asset_id)

    @property
    def sso_url(self) -> str:
        return f"{self.api_url}{self.sso}"


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded exponential backoff settings"""
    max_retries: int = DEFAULT_MAX_RETRIES
    base_delay_ms: int = DEFAULT_RETRY_BASE_DELAY_MS
    max_delay_ms: int = DEFAULT_RETRY_MAX_DELAY_MS


@dataclass(frozen=True)
class AuthSession:
    """Authenticated portal session"""
    cookie_header: str
    source: AuthSource


@dataclass(frozen=True)
class RunConfig:
    """Validated configuration for a single upload run"""
    cookie: str
    make_zip: bool = True
    asset_name: Optional[str] = None
    asset_id: Optional[str] = None
    zip_path: Optional[str] = None
    skip_upload: bool = False
    chunk_size: int = DEFAULT_CHUNK_SIZE
    auth_mode: AuthMode = AuthMode.AUTO
    request_timeout_ms: int = DEFAULT_REQUEST_TIMEOUT_MS
    retry_policy: RetryPolicy = field(default_factory=RetryPolicy)
    zip_exclude: List[str] = field(default_factory=list)
    workspace_path: str = "."


@dataclass
class Asset:
    """Asset entry returned by the portal search"""
    id: str
    name: str


@dataclass
class UploadResult:
    """Overall upload operation result"""
    skipped_upload: bool
    authenticated_with: AuthSource
    asset_id: Optional[str] = None
    asset_name: Optional[str] = None
    zip_path: Optional[str] = None
    uploaded_chunks: int = 0
