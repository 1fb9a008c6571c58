"""
Registry query service for the RES nacional XDS.b registry.

`RegistryService` is the single entry point used by the rest of the bridge:
it builds the stored query for a `RegistryFilter`, hands it to a
`RegistryTransport`, validates the response status and parses the result in
the requested shape.

Usage:
    service = RegistryService()
    headers = await service.get_registries_header(RegistryFilter(patient_id="700000000000000"))
    uuids = await service.get_registries_ref(RegistryFilter(patient_id="700000000000000"))
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from res_bridge.core.errors import (
    RegistryProtocolError,
    RegistryTransportError,
)
from res_bridge.core.log_setup import RegistryErrorLogger
from res_bridge.core.models import (
    AdhocQueryResponse,
    QueryMode,
    RegistryFilter,
    RegistryItem,
    RegistryResponse,
)
from res_bridge.core.wire import REGISTRY_WIRE
from res_bridge.services.query_builder import build_request
from res_bridge.services.response_parser import RegistryResponseParser
from res_bridge.tools.registry_api import HttpRegistryTransport, RegistryTransport

logger = logging.getLogger("RegistryService")


class RegistryService:
    """
    Queries the registry for document entries of a patient.

    The service keeps no per-call state, so one instance can serve concurrent
    queries as long as its transport does.

    Args:
        transport: Transport used for the exchange. Defaults to an
            `HttpRegistryTransport` built from configuration.
        error_logger: Sink for registry error lists.
    """

    def __init__(
        self,
        transport: Optional[RegistryTransport] = None,
        error_logger: Optional[RegistryErrorLogger] = None,
    ) -> None:
        self.transport = transport or HttpRegistryTransport()
        self.error_logger = error_logger or RegistryErrorLogger(logger)

    async def _exchange(self, registry_filter: RegistryFilter, mode: QueryMode) -> AdhocQueryResponse:
        request = build_request(registry_filter, mode)
        try:
            return await self.transport.send(request)
        except RegistryTransportError as exc:
            logger.error("Registry request failed: %s", exc.detail, exc_info=exc)
            raise
        except Exception as exc:
            logger.error("Registry request failed", exc_info=exc)
            raise RegistryTransportError(f"{type(exc).__name__}: {exc}") from exc

    def _validate(self, response: AdhocQueryResponse) -> None:
        if response.status == REGISTRY_WIRE.response_success:
            return
        logger.error("Registry responded with status %s", response.status)
        self.error_logger.log_errors(response.errors)
        raise RegistryProtocolError(response.errors)

    async def query(
        self,
        registry_filter: RegistryFilter,
        mode: QueryMode = QueryMode.HEADERS,
    ) -> Union[RegistryResponse[RegistryItem], RegistryResponse[str]]:
        """
        Run one stored query and return results in the requested shape.

        Args:
            registry_filter: Search criteria.
            mode: `HEADERS` for `RegistryItem` results, `REFERENCES` for bare
                entry UUID strings.

        Returns:
            A `RegistryResponse`, possibly empty, never `None`.

        Raises:
            RegistryProtocolError: The registry answered with a non-success status.
            RegistryTransportError: The exchange could not be completed.
        """
        response = await self._exchange(registry_filter, mode)
        self._validate(response)

        if mode is QueryMode.REFERENCES:
            return RegistryResponseParser.parse_references(response)
        return RegistryResponseParser.parse_headers(response)

    async def get_registries_header(self, registry_filter: RegistryFilter) -> RegistryResponse[RegistryItem]:
        """Document entry headers matching the filter."""
        return await self.query(registry_filter, QueryMode.HEADERS)

    async def get_registries_ref(self, registry_filter: RegistryFilter) -> RegistryResponse[str]:
        """Entry UUIDs of the document entries matching the filter."""
        return await self.query(registry_filter, QueryMode.REFERENCES)
