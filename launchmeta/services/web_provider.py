"""
Web-based metadata provider.

Retrieves version information over HTTP. Documents are parsed by
launchmeta.parsers; raw operations return response bodies untouched.

Asset content lives on a separate resource host, addressed by hash:
    {resource_url}/{first two hash characters}/{hash}
"""

import logging

import httpx

from launchmeta.config import settings
from launchmeta.models.failure import NotFoundError, TransportError
from launchmeta.models.resource import Artifact, Asset, AssetCollection, AssetIndex
from launchmeta.models.version import Version, VersionManifest, VersionStub
from launchmeta.parsers.documents import (
    parse_asset_collection,
    parse_version,
    parse_version_manifest,
)
from launchmeta.services.provider import MetadataProvider

logger = logging.getLogger(__name__)


class WebMetadataProvider(MetadataProvider):
    """
    Metadata provider backed by the web.

    Failures are mapped onto the provider error taxonomy:
    - HTTP 404 → NotFoundError
    - Other HTTP errors, connection failures, timeouts → TransportError
    - Unparseable documents → MalformedDocumentError (raised by the parsers)
    """

    def __init__(
        self,
        manifest_url: str,
        resource_url: str,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> None:
        """
        Initialize the provider.

        Args:
            manifest_url: Location of the version manifest document
            resource_url: Base URL of the asset resource host
            client: Optional httpx client for connection reuse
            timeout: Request timeout in seconds. Defaults to settings.request_timeout.
        """
        self.manifest_url = manifest_url
        self.resource_url = resource_url.rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self._client = client

    @classmethod
    def official(cls, client: httpx.AsyncClient | None = None) -> "WebMetadataProvider":
        """Provider pointing at the official version manifest and resource host."""
        return cls(settings.manifest_url, settings.resource_url, client=client)

    def asset_url(self, asset: Asset) -> str:
        """URL an asset can be downloaded from."""
        return f"{self.resource_url}/{asset.hash[:2]}/{asset.hash}"

    async def _get(self, client: httpx.AsyncClient, url: str) -> bytes:
        response = await client.get(url)
        response.raise_for_status()
        return response.content

    async def _fetch(self, url: str) -> bytes:
        """
        Fetch a URL's body.

        Raises:
            NotFoundError: If the server answers 404
            TransportError: On any other HTTP or network failure
        """
        logger.debug("FETCH_STARTED", extra={"url": url})
        try:
            if self._client is not None:
                return await self._get(self._client, url)
            async with httpx.AsyncClient(
                timeout=self.timeout,
                headers={"User-Agent": settings.user_agent},
                follow_redirects=True,
            ) as client:
                return await self._get(client, url)
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.warning("FETCH_FAILED", extra={"url": url, "status_code": status_code})
            if status_code == 404:
                raise NotFoundError(f"Document not found: {url}", detail="HTTP 404") from e
            raise TransportError(f"Failed to fetch {url}: HTTP {status_code}") from e
        except httpx.RequestError as e:
            logger.warning("FETCH_FAILED", extra={"url": url, "error": type(e).__name__})
            raise TransportError(f"Failed to fetch {url}: {e}", detail=type(e).__name__) from e

    async def get_version_manifest(self) -> VersionManifest:
        return parse_version_manifest(await self._fetch(self.manifest_url))

    async def get_version(self, stub: VersionStub) -> Version:
        return parse_version(await self._fetch(stub.url), stub)

    async def get_version_document(self, stub: VersionStub) -> bytes:
        return await self._fetch(stub.url)

    async def get_asset_list(self, index: AssetIndex) -> AssetCollection:
        return parse_asset_collection(await self._fetch(index.resource.url))

    async def get_asset_list_document(self, index: AssetIndex) -> bytes:
        return await self._fetch(index.resource.url)

    async def get_asset_content(self, asset: Asset) -> bytes:
        return await self._fetch(self.asset_url(asset))

    async def get_artifact_content(self, artifact: Artifact) -> bytes:
        return await self._fetch(artifact.resource.url)
