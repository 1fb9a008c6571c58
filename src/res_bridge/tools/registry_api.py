"""
SOAP/HTTP transport to the RES nacional XDS.b registry.

This module provides the `HttpRegistryTransport` class, the default
implementation of the `RegistryTransport` protocol consumed by
`RegistryService`. It owns everything about the exchange itself: endpoint,
TLS verification, timeouts, the SOAP envelope and deserialization of the
reply. Any failure surfaces as `RegistryTransportError`.

Design goals:
- One self-contained exchange per call. A fresh `httpx.AsyncClient` is opened
  for each request so concurrent calls never share connection state.
- Connection failures may be retried (bounded by configuration); timeouts,
  HTTP errors and SOAP faults are reported once.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional, Protocol
from xml.etree import ElementTree as ET

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from res_bridge.core.config import get_config, is_http_url
from res_bridge.core.errors import RegistryTransportError
from res_bridge.core.models import AdhocQueryRequest, AdhocQueryResponse
from res_bridge.tools.ebxml import (
    EbXMLBindingError,
    SOAPFaultError,
    build_soap_envelope,
    extract_xml_part,
    parse_adhoc_query_response,
)

logger = logging.getLogger("RegistryTransport")

HeaderFactory = Callable[[], Iterable[ET.Element]]


class RegistryTransport(Protocol):
    """Sends a stored query and returns the deserialized registry response."""

    async def send(self, request: AdhocQueryRequest) -> AdhocQueryResponse:
        ...


class HttpRegistryTransport:
    """
    SOAP 1.2 over HTTP(S) transport for registry stored queries.

    Args:
        url: Registry endpoint. If omitted, loaded from config.
        soap_action: WS-Addressing / SOAP action. If omitted, loaded from config.
        timeout: Request timeout in seconds. If omitted, loaded from config.
        verify_tls: Whether to verify the server certificate.
        header_factory: Optional callable returning extra SOAP header blocks
            (credentials) for each request.
        http_transport: Optional httpx transport, e.g. `httpx.MockTransport`.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        soap_action: Optional[str] = None,
        timeout: Optional[float] = None,
        verify_tls: Optional[bool] = None,
        header_factory: Optional[HeaderFactory] = None,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = get_config()
        self.url = url or self.config.registry_url
        self.soap_action = soap_action or self.config.registry_soap_action
        self.timeout = float(timeout if timeout is not None else self.config.registry_timeout_seconds)
        self.verify_tls = self.config.registry_verify_tls if verify_tls is None else verify_tls
        self.header_factory = header_factory
        self._http_transport = http_transport

        if not self.verify_tls:
            logger.warning("TLS verification disabled for registry endpoint %s", self.url)

    def _headers(self) -> dict:
        return {
            "Content-Type": f'application/soap+xml; charset=UTF-8; action="{self.soap_action}"',
            "Accept": "application/soap+xml, multipart/related, text/xml",
        }

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(max(1, int(self.config.max_retry_attempts))),
            wait=wait_exponential(multiplier=self.config.retry_delay_multiplier, max=10),
            retry=retry_if_exception_type(httpx.ConnectError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

    async def _post(self, body: bytes) -> httpx.Response:
        async with httpx.AsyncClient(
            timeout=self.timeout,
            verify=self.verify_tls,
            transport=self._http_transport,
        ) as client:
            return await client.post(self.url, content=body, headers=self._headers())

    @staticmethod
    def _http_error_detail(response: httpx.Response) -> str:
        try:
            payload = extract_xml_part(response.content, response.headers.get("content-type", ""))
            parse_adhoc_query_response(payload)
        except SOAPFaultError as fault:
            return f"HTTP {response.status_code}, {fault}"
        except EbXMLBindingError:
            pass
        return f"HTTP {response.status_code}: {response.text[:300]}"

    async def send(self, request: AdhocQueryRequest) -> AdhocQueryResponse:
        """
        Execute one stored query exchange.

        Returns:
            The deserialized `AdhocQueryResponse`.

        Raises:
            RegistryTransportError: On configuration, network, HTTP, SOAP or
                payload failures.
        """
        if not is_http_url(self.url):
            raise RegistryTransportError(f"Malformed registry endpoint URL: {self.url!r}")

        extra_headers = list(self.header_factory()) if self.header_factory else []
        body = build_soap_envelope(
            request,
            action=self.soap_action,
            to=self.url,
            extra_headers=extra_headers,
        )
        logger.debug("Sending stored query %s to %s", request.query_id, self.url)

        try:
            async for attempt in self._retrying():
                with attempt:
                    response = await self._post(body)
        except httpx.TimeoutException as exc:
            raise RegistryTransportError(f"Registry request timeout: {exc}") from exc
        except httpx.InvalidURL as exc:
            raise RegistryTransportError(f"Malformed registry endpoint URL: {exc}") from exc
        except httpx.RequestError as exc:
            raise RegistryTransportError(f"Registry request error: {exc}") from exc

        if response.status_code >= 400:
            raise RegistryTransportError(
                self._http_error_detail(response),
                status_code=response.status_code,
            )

        try:
            payload = extract_xml_part(response.content, response.headers.get("content-type", ""))
            return parse_adhoc_query_response(payload)
        except EbXMLBindingError as exc:
            raise RegistryTransportError(str(exc), status_code=response.status_code) from exc
