"""
Conversion of successful `AdhocQueryResponse` objects into caller results.

Header mode projects every returned registry object into a `RegistryItem`;
reference mode keeps only the ids of `ObjectRef` entries. Neither mode raises
on missing metadata: absent fields come back as `None`.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from res_bridge.core.models import (
    AdhocQueryResponse,
    Classification,
    Code,
    ExtrinsicObject,
    Identifiable,
    ObjectRef,
    RegistryItem,
    RegistryObject,
    RegistryResponse,
)
from res_bridge.core.wire import (
    AUTHOR_SCHEME,
    CLASS_CODE_SCHEME,
    DOCUMENT_ENTRY_PATIENT_ID_SCHEME,
    DOCUMENT_ENTRY_UNIQUE_ID_SCHEME,
    EVENT_CODE_SCHEME,
    FACILITY_TYPE_CODE_SCHEME,
    FORMAT_CODE_SCHEME,
    PRACTICE_SETTING_CODE_SCHEME,
    TYPE_CODE_SCHEME,
)
from res_bridge.core.xds_time import parse_xds_timestamp

logger = logging.getLogger("RegistryResponseParser")


def _timestamp(raw: Optional[str]) -> Optional[datetime]:
    if not raw:
        return None
    try:
        return parse_xds_timestamp(raw)
    except ValueError:
        logger.debug(f"Ignoring malformed XDS timestamp: {raw!r}")
        return None


def _int(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return None


def _to_code(classification: Classification) -> Code:
    coding_scheme = classification.coding_scheme
    if coding_scheme is None:
        schemes = classification.slots.get("codingScheme") or []
        coding_scheme = schemes[0] if schemes else None
    return Code(
        code=classification.node_representation,
        scheme=coding_scheme,
        display_name=classification.display_name,
    )


def _first_code(obj: RegistryObject, scheme: str) -> Optional[Code]:
    matches = obj.classifications_for(scheme)
    return _to_code(matches[0]) if matches else None


def _author_slot(obj: RegistryObject, slot_name: str) -> Optional[str]:
    for author in obj.classifications_for(AUTHOR_SCHEME):
        values = author.slots.get(slot_name) or []
        if values:
            return values[0]
    return None


class RegistryResponseParser:
    """Stateless parser for successful registry responses."""

    @staticmethod
    def to_item(obj: Identifiable) -> RegistryItem:
        """Project one registry object into a `RegistryItem`."""
        if isinstance(obj, ObjectRef):
            return RegistryItem(entry_uuid=obj.id)

        return RegistryItem(
            entry_uuid=obj.id,
            unique_id=obj.external_identifier(DOCUMENT_ENTRY_UNIQUE_ID_SCHEME),
            repository_unique_id=obj.slot_value("repositoryUniqueId"),
            status=obj.status,
            object_type=obj.object_type,
            mime_type=obj.mime_type if isinstance(obj, ExtrinsicObject) else None,
            title=obj.name,
            patient_id=obj.external_identifier(DOCUMENT_ENTRY_PATIENT_ID_SCHEME),
            source_patient_id=obj.slot_value("sourcePatientId"),
            creation_time=_timestamp(obj.slot_value("creationTime")),
            service_start_time=_timestamp(obj.slot_value("serviceStartTime")),
            service_stop_time=_timestamp(obj.slot_value("serviceStopTime")),
            language_code=obj.slot_value("languageCode"),
            hash=obj.slot_value("hash"),
            size=_int(obj.slot_value("size")),
            class_code=_first_code(obj, CLASS_CODE_SCHEME),
            type_code=_first_code(obj, TYPE_CODE_SCHEME),
            format_code=_first_code(obj, FORMAT_CODE_SCHEME),
            healthcare_facility_type_code=_first_code(obj, FACILITY_TYPE_CODE_SCHEME),
            practice_setting_code=_first_code(obj, PRACTICE_SETTING_CODE_SCHEME),
            event_codes=[_to_code(c) for c in obj.classifications_for(EVENT_CODE_SCHEME)],
            author_institution=_author_slot(obj, "authorInstitution"),
            author_person=_author_slot(obj, "authorPerson"),
        )

    @classmethod
    def parse_headers(cls, response: AdhocQueryResponse) -> RegistryResponse[RegistryItem]:
        """One item per registry object, in registry order."""
        items: List[RegistryItem] = [cls.to_item(obj) for obj in response.registry_objects]
        logger.debug(f"Parsed {len(items)} registry header(s)")
        return RegistryResponse(items)

    @staticmethod
    def parse_references(response: AdhocQueryResponse) -> RegistryResponse[str]:
        """Ids of the `ObjectRef` entries, in registry order; other objects are skipped."""
        uuids: List[str] = []
        for obj in response.registry_objects:
            if isinstance(obj, ObjectRef):
                uuids.append(obj.id)
        skipped = len(response.registry_objects) - len(uuids)
        if skipped:
            logger.debug(f"Skipped {skipped} non-reference registry object(s)")
        return RegistryResponse(uuids)
