"""
Typed request/response objects for XDS.b registry stored queries.

These mirror the subset of the ebRS 3.0 query schema the client sends and
reads: `AdhocQueryRequest` on the way out, `AdhocQueryResponse` on the way
back, and the `RegistryItem` projection handed to callers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, Generic, List, Optional, TypeVar, Union

from res_bridge.core.wire import REGISTRY_WIRE

T = TypeVar("T")


class QueryMode(str, Enum):
    """Which response shape the caller wants back."""

    HEADERS = "headers"
    REFERENCES = "references"

    @property
    def return_type(self) -> str:
        if self is QueryMode.REFERENCES:
            return REGISTRY_WIRE.return_type_object_ref
        return REGISTRY_WIRE.return_type_leaf


@dataclass
class RegistryFilter:
    """Search criteria for one registry query."""

    patient_id: Optional[str] = None
    start_date: Optional[Union[date, datetime]] = None
    end_date: Optional[Union[date, datetime]] = None
    entry_uuids: List[str] = field(default_factory=list)

    def has_patient_id(self) -> bool:
        return bool(self.patient_id and self.patient_id.strip())

    def has_start_date(self) -> bool:
        return self.start_date is not None

    def has_end_date(self) -> bool:
        return self.end_date is not None

    def has_entry_uuids(self) -> bool:
        return bool(self.entry_uuids)


@dataclass(frozen=True)
class Slot:
    name: str
    values: List[str]


@dataclass(frozen=True)
class ResponseOption:
    return_type: str
    return_composed_objects: bool = True


@dataclass(frozen=True)
class AdhocQueryRequest:
    query_id: str
    response_option: ResponseOption
    slots: List[Slot] = field(default_factory=list)

    def slot(self, name: str) -> Optional[Slot]:
        """Return the first slot with the given name, if any."""
        for candidate in self.slots:
            if candidate.name == name:
                return candidate
        return None


@dataclass
class RegistryError:
    """One entry of an ebRS `RegistryErrorList`."""

    error_code: str
    code_context: str
    severity: str
    location: Optional[str] = None

    @property
    def is_warning(self) -> bool:
        return self.severity.endswith(":Warning") or self.severity == "Warning"


@dataclass
class Classification:
    scheme: str
    node_representation: Optional[str] = None
    coding_scheme: Optional[str] = None
    display_name: Optional[str] = None
    slots: Dict[str, List[str]] = field(default_factory=dict)


@dataclass
class ExternalIdentifier:
    scheme: str
    value: str


@dataclass
class RegistryObject:
    """
    Any identifiable ebRIM object returned in a `RegistryObjectList`.

    `kind` is the local element name (`RegistryPackage`, `Association`, ...).
    """

    id: str
    kind: str
    status: Optional[str] = None
    object_type: Optional[str] = None
    name: Optional[str] = None
    slots: Dict[str, List[str]] = field(default_factory=dict)
    classifications: List[Classification] = field(default_factory=list)
    external_identifiers: List[ExternalIdentifier] = field(default_factory=list)

    def slot_value(self, name: str) -> Optional[str]:
        values = self.slots.get(name) or []
        return values[0] if values else None

    def external_identifier(self, scheme: str) -> Optional[str]:
        for identifier in self.external_identifiers:
            if identifier.scheme == scheme:
                return identifier.value
        return None

    def classifications_for(self, scheme: str) -> List[Classification]:
        return [c for c in self.classifications if c.scheme == scheme]


@dataclass
class ExtrinsicObject(RegistryObject):
    """A document entry (`rim:ExtrinsicObject`)."""

    mime_type: Optional[str] = None


@dataclass
class ObjectRef:
    """A lightweight reference (`rim:ObjectRef`) to a registry object."""

    id: str
    home: Optional[str] = None


Identifiable = Union[RegistryObject, ObjectRef]


@dataclass
class AdhocQueryResponse:
    status: str
    registry_objects: List[Identifiable] = field(default_factory=list)
    errors: List[RegistryError] = field(default_factory=list)


@dataclass
class Code:
    code: Optional[str]
    scheme: Optional[str] = None
    display_name: Optional[str] = None


@dataclass
class RegistryItem:
    """Header-level view of one document entry, as consumed by the bridge."""

    entry_uuid: str
    unique_id: Optional[str] = None
    repository_unique_id: Optional[str] = None
    status: Optional[str] = None
    object_type: Optional[str] = None
    mime_type: Optional[str] = None
    title: Optional[str] = None
    patient_id: Optional[str] = None
    source_patient_id: Optional[str] = None
    creation_time: Optional[datetime] = None
    service_start_time: Optional[datetime] = None
    service_stop_time: Optional[datetime] = None
    language_code: Optional[str] = None
    hash: Optional[str] = None
    size: Optional[int] = None
    class_code: Optional[Code] = None
    type_code: Optional[Code] = None
    format_code: Optional[Code] = None
    healthcare_facility_type_code: Optional[Code] = None
    practice_setting_code: Optional[Code] = None
    event_codes: List[Code] = field(default_factory=list)
    author_institution: Optional[str] = None
    author_person: Optional[str] = None


@dataclass
class RegistryResponse(Generic[T]):
    items: List[T] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)
