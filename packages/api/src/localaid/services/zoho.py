# This project was developed with assistance from AI tools.
"""Zoho CRM client.

OAuth2 refresh-token flow against the Zoho accounts server, with the access
token cached in memory until five minutes before it expires. Transient
failures (transport errors, 429, 5xx) are retried with exponential backoff.
"""

import logging
import time
from datetime import UTC, date, datetime
from urllib.parse import urlencode

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from ..core.config import settings

logger = logging.getLogger(__name__)

CONTRACTORS_MODULE = "Contractors"
PAGE_SIZE = 200
# Refresh this many seconds before Zoho says the token expires
TOKEN_EXPIRY_MARGIN = 300

_RETRYABLE_STATUS = {429, 500, 502, 503, 504}


class ZohoAPIError(Exception):
    """Non-success response from the Zoho CRM API."""

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ZohoAuthError(ZohoAPIError):
    """Missing credentials or a rejected token request."""


def _is_retryable(exc: BaseException) -> bool:
    if isinstance(exc, httpx.TransportError):
        return True
    return isinstance(exc, ZohoAPIError) and exc.status_code in _RETRYABLE_STATUS


def build_contractor_record(data: dict) -> dict:
    """Map a registration form payload onto Zoho Contractors fields."""
    services = data.get("services") or []
    qualifications = data.get("qualifications") or ""
    if isinstance(qualifications, list):
        qualifications = ", ".join(qualifications)
    photos = data.get("photos") or []

    description = (
        "New contractor registration from LocalAid platform.\n"
        f"Services: {', '.join(services)}\n"
        f"Qualifications: {qualifications}"
    )
    return {
        "First_Name": data.get("firstName"),
        "Last_Name": data.get("lastName"),
        "Email": data.get("email"),
        "Mobile": data.get("mobile"),
        "Title_Role": services[0] if services else "",
        "Location": data.get("location") or "",
        "Services_Offered": ", ".join(services),
        "Years_of_Experience": data.get("experience") or "",
        "Additional_Information": data.get("introduction") or "",
        "Qualifications_and_Certifications": qualifications,
        "Do_you_drive_and_have_access_to_vehicle": ["Yes" if data.get("hasVehicle") else "No"],
        "Photo_Submission": str(len(photos)),
        "Profile_Sharing_Consent": bool(data.get("consentProfileShare")),
        "Marketing_Consent": bool(data.get("consentMarketing")),
        "Registration_Source": "LocalAid Website",
        "Registration_Date": date.today().isoformat(),
        "Status": "New Application",
        "Description": description,
    }


class ZohoClient:
    """Async Zoho CRM v2 client."""

    def __init__(
        self,
        *,
        client_id: str | None = None,
        client_secret: str | None = None,
        refresh_token: str | None = None,
        redirect_uri: str | None = None,
        accounts_url: str | None = None,
        api_domain: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        retry_wait=None,
        max_attempts: int = 3,
    ):
        self.client_id = client_id or settings.ZOHO_CLIENT_ID
        self.client_secret = client_secret or settings.ZOHO_CLIENT_SECRET
        self.refresh_token = refresh_token or settings.ZOHO_REFRESH_TOKEN
        self.redirect_uri = redirect_uri or settings.ZOHO_REDIRECT_URI
        self.accounts_url = (accounts_url or settings.ZOHO_ACCOUNTS_URL).rstrip("/")
        self.api_url = f"{(api_domain or settings.ZOHO_API_DOMAIN).rstrip('/')}/crm/v2"
        self._transport = transport
        self._retry_wait = retry_wait or wait_exponential(multiplier=1, min=1, max=10)
        self._max_attempts = max_attempts
        self._access_token: str | None = None
        self._token_expires_at = 0.0

    @property
    def is_configured(self) -> bool:
        return bool(self.client_id and self.client_secret and self.refresh_token)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport, timeout=settings.ZOHO_TIMEOUT_SECONDS)

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=self._retry_wait,
            retry=retry_if_exception(_is_retryable),
            reraise=True,
        )

    # -- OAuth --

    def get_authorization_url(self) -> str:
        """URL an admin visits once to grant offline access."""
        params = {
            "response_type": "code",
            "client_id": self.client_id,
            "scope": ",".join(settings.ZOHO_SCOPES),
            "redirect_uri": self.redirect_uri,
            "access_type": "offline",
            "prompt": "consent",
        }
        return f"{self.accounts_url}/oauth/v2/auth?{urlencode(params)}"

    async def _token_request(self, data: dict) -> dict:
        async with self._client() as client:
            response = await client.post(f"{self.accounts_url}/oauth/v2/token", data=data)
        if response.status_code != 200:
            raise ZohoAuthError(
                f"Token request failed: {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )
        payload = response.json()
        # Zoho reports some auth failures as 200 with an error body
        if "error" in payload or "access_token" not in payload:
            raise ZohoAuthError(f"Token request rejected: {payload.get('error', 'no access_token')}")
        return payload

    async def exchange_code(self, code: str) -> dict:
        """Swap a one-time authorization code for access and refresh tokens."""
        if not self.client_id or not self.client_secret:
            raise ZohoAuthError("Zoho client credentials are not configured")
        payload = await self._token_request(
            {
                "grant_type": "authorization_code",
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "redirect_uri": self.redirect_uri,
                "code": code,
            }
        )
        self._store_token(payload)
        return payload

    def _store_token(self, payload: dict) -> None:
        self._access_token = payload["access_token"]
        expires_in = int(payload.get("expires_in", 3600))
        self._token_expires_at = time.time() + max(expires_in - TOKEN_EXPIRY_MARGIN, 0)

    async def refresh_access_token(self) -> str:
        if not self.is_configured:
            raise ZohoAuthError("Zoho credentials are not configured")
        async for attempt in self._retrying():
            with attempt:
                payload = await self._token_request(
                    {
                        "grant_type": "refresh_token",
                        "client_id": self.client_id,
                        "client_secret": self.client_secret,
                        "refresh_token": self.refresh_token,
                    }
                )
        self._store_token(payload)
        logger.info("Refreshed Zoho access token")
        return self._access_token

    async def get_access_token(self) -> str:
        if self._access_token and time.time() < self._token_expires_at:
            return self._access_token
        return await self.refresh_access_token()

    # -- REST --

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict | None = None,
        json: dict | None = None,
        headers: dict | None = None,
        allow_status: tuple[int, ...] = (),
    ) -> httpx.Response:
        url = path if path.startswith("http") else f"{self.api_url}/{path.lstrip('/')}"
        async for attempt in self._retrying():
            with attempt:
                token = await self.get_access_token()
                request_headers = {"Authorization": f"Zoho-oauthtoken {token}", **(headers or {})}
                async with self._client() as client:
                    response = await client.request(
                        method, url, params=params, json=json, headers=request_headers
                    )
                if response.status_code == 401:
                    # Token revoked or expired early; force a refresh on the next call
                    self._access_token = None
                if response.is_success or response.status_code in allow_status:
                    return response
                raise ZohoAPIError(
                    f"Zoho {method} {path} failed: {response.status_code}",
                    status_code=response.status_code,
                    body=response.text,
                )
        raise ZohoAPIError(f"Zoho {method} {path} failed")

    async def _paged(self, path: str, params: dict | None = None, headers: dict | None = None) -> list[dict]:
        records: list[dict] = []
        page = 1
        while True:
            response = await self._request(
                "GET",
                path,
                params={**(params or {}), "page": page, "per_page": PAGE_SIZE},
                headers=headers,
                allow_status=(204, 304),
            )
            if response.status_code in (204, 304):
                break
            body = response.json()
            records.extend(body.get("data") or [])
            if not (body.get("info") or {}).get("more_records"):
                break
            page += 1
        return records

    async def get_all_contractors(self, module: str = CONTRACTORS_MODULE) -> list[dict]:
        records = await self._paged(module)
        logger.info("Fetched %d records from Zoho %s", len(records), module)
        return records

    async def get_contact_by_id(self, record_id: str, module: str = CONTRACTORS_MODULE) -> dict | None:
        response = await self._request("GET", f"{module}/{record_id}", allow_status=(204, 404))
        if response.status_code in (204, 404):
            return None
        data = response.json().get("data") or []
        return data[0] if data else None

    async def search_records(self, module: str, criteria: str) -> list[dict]:
        """``criteria`` uses Zoho syntax, e.g. ``(Email:equals:a@b.com)``."""
        return await self._paged(f"{module}/search", params={"criteria": criteria})

    async def get_modified_since(self, since: datetime, module: str = CONTRACTORS_MODULE) -> list[dict]:
        if since.tzinfo is None:
            since = since.replace(tzinfo=UTC)
        header = since.isoformat(timespec="seconds")
        return await self._paged(module, headers={"If-Modified-Since": header})

    async def create_contractor(self, data: dict, module: str = CONTRACTORS_MODULE) -> dict:
        """Create one contractor record from a registration payload."""
        response = await self._request(
            "POST", module, json={"data": [build_contractor_record(data)]}
        )
        result = response.json()
        details = (result.get("data") or [{}])[0]
        if details.get("status") == "error":
            raise ZohoAPIError(
                f"Zoho rejected contractor record: {details.get('message')}",
                status_code=response.status_code,
                body=response.text,
            )
        return result

    async def get_modules(self) -> dict:
        response = await self._request("GET", "settings/modules")
        return response.json()

    async def get_module_fields(self, module: str) -> dict:
        response = await self._request("GET", "settings/fields", params={"module": module})
        return response.json()

    async def download(self, url: str) -> tuple[bytes, str]:
        """Fetch a file attached to a record. Returns (content, content type)."""
        response = await self._request("GET", url)
        content_type = response.headers.get("content-type", "application/octet-stream")
        return response.content, content_type.split(";")[0].strip()


_zoho_client: ZohoClient | None = None


def get_zoho_client() -> ZohoClient:
    global _zoho_client
    if _zoho_client is None:
        _zoho_client = ZohoClient()
    return _zoho_client
