"""
Construction of XDS.b Registry Stored Query (ITI-18) requests.

Slots are produced from `SLOT_RULES`, an ordered table of
`(predicate, factory)` pairs evaluated in sequence: every rule whose predicate
holds for the filter contributes one slot. The order of the table is the order
of the slots on the wire.
"""

from __future__ import annotations

from typing import Callable, Iterable, List, Tuple

from res_bridge.core.models import (
    AdhocQueryRequest,
    QueryMode,
    RegistryFilter,
    ResponseOption,
    Slot,
)
from res_bridge.core.wire import REGISTRY_WIRE
from res_bridge.core.xds_time import format_xds_timestamp

SlotRule = Tuple[Callable[[RegistryFilter], bool], Callable[[RegistryFilter], Slot]]


def quote_value(value: str) -> str:
    """Wrap a slot value in single quotes, doubling any embedded quote."""
    return "'" + str(value).replace("'", "''") + "'"


def quote_list(values: Iterable[str]) -> str:
    """Render values as an ebRS multi-value list: `('a','b')`."""
    return "(" + ",".join(quote_value(v) for v in values) + ")"


def format_patient_id(patient_id: str) -> str:
    """Render a CNS as the quoted HL7 CX identifier the registry expects."""
    composite = REGISTRY_WIRE.patient_id_template.format(
        id=patient_id.strip(),
        oid=REGISTRY_WIRE.patient_assigning_authority,
    )
    return quote_value(composite)


def _patient_id_slot(f: RegistryFilter) -> Slot:
    return Slot(REGISTRY_WIRE.slot_patient_id, [format_patient_id(f.patient_id)])


def _creation_time_from_slot(f: RegistryFilter) -> Slot:
    return Slot(REGISTRY_WIRE.slot_creation_time_from, [format_xds_timestamp(f.start_date)])


def _creation_time_to_slot(f: RegistryFilter) -> Slot:
    return Slot(REGISTRY_WIRE.slot_creation_time_to, [format_xds_timestamp(f.end_date)])


def _entry_uuid_slot(f: RegistryFilter) -> Slot:
    return Slot(REGISTRY_WIRE.slot_entry_uuid, [quote_list(f.entry_uuids)])


def _status_slot(_: RegistryFilter) -> Slot:
    return Slot(REGISTRY_WIRE.slot_status, [quote_list([REGISTRY_WIRE.status_approved])])


SLOT_RULES: Tuple[SlotRule, ...] = (
    (RegistryFilter.has_patient_id, _patient_id_slot),
    (RegistryFilter.has_start_date, _creation_time_from_slot),
    (RegistryFilter.has_end_date, _creation_time_to_slot),
    (RegistryFilter.has_entry_uuids, _entry_uuid_slot),
    (lambda _: True, _status_slot),
)


def build_slots(registry_filter: RegistryFilter) -> List[Slot]:
    """Evaluate `SLOT_RULES` against a filter and return the included slots in order."""
    return [factory(registry_filter) for predicate, factory in SLOT_RULES if predicate(registry_filter)]


def select_query_id(registry_filter: RegistryFilter) -> str:
    """GetDocuments when explicit entry UUIDs are given, FindDocuments otherwise."""
    if registry_filter.has_entry_uuids():
        return REGISTRY_WIRE.get_documents_query_id
    return REGISTRY_WIRE.find_documents_query_id


def build_request(registry_filter: RegistryFilter, mode: QueryMode = QueryMode.HEADERS) -> AdhocQueryRequest:
    """
    Build the ad-hoc query request for a filter.

    Args:
        registry_filter: Caller search criteria.
        mode: `HEADERS` asks for leaf document entries, `REFERENCES` for
            object references only.

    Returns:
        A fully populated `AdhocQueryRequest`. This never fails.
    """
    return AdhocQueryRequest(
        query_id=select_query_id(registry_filter),
        response_option=ResponseOption(
            return_type=mode.return_type,
            return_composed_objects=True,
        ),
        slots=build_slots(registry_filter),
    )
