"""
XDS.b registry wire contract.

Every literal that must reach the registry byte-for-byte lives in the
`REGISTRY_WIRE` table below. The table is a frozen dataclass so it can be
imported anywhere without risk of mutation.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RegistryWire:
    # Stored query identifiers (IHE ITI TF-2a 3.18.4.1.2.3.7)
    find_documents_query_id: str = "urn:uuid:14d4debf-8f97-4251-9a74-a90016b0af0d"
    get_documents_query_id: str = "urn:uuid:5c4f972b-d56b-40ac-a5fc-c8ca9b40b9d4"

    # Slot names
    slot_patient_id: str = "$XDSDocumentEntryPatientId"
    slot_creation_time_from: str = "$XDSDocumentEntryCreationTimeFrom"
    slot_creation_time_to: str = "$XDSDocumentEntryCreationTimeTo"
    slot_entry_uuid: str = "$XDSDocumentEntryEntryUUID"
    slot_status: str = "$XDSDocumentEntryStatus"

    # Status values
    status_approved: str = "urn:oasis:names:tc:ebxml-regrep:StatusType:Approved"
    response_success: str = "urn:oasis:names:tc:ebxml-regrep:ResponseStatusType:Success"

    # Patient identifier: '<cns>^^^&<oid>&ISO'
    patient_assigning_authority: str = "2.16.840.1.113883.13.236"
    patient_id_template: str = "{id}^^^&{oid}&ISO"

    # Response option return types
    return_type_leaf: str = "LeafClass"
    return_type_object_ref: str = "ObjectRef"

    # Compact XDS timestamp (UTC, no separators)
    timestamp_format: str = "%Y%m%d%H%M%S"


REGISTRY_WIRE = RegistryWire()


# ebXML namespaces
SOAP12_NS = "http://www.w3.org/2003/05/soap-envelope"
WSA_NS = "http://www.w3.org/2005/08/addressing"
QUERY_NS = "urn:oasis:names:tc:ebxml-regrep:xsd:query:3.0"
RIM_NS = "urn:oasis:names:tc:ebxml-regrep:xsd:rim:3.0"
RS_NS = "urn:oasis:names:tc:ebxml-regrep:xsd:rs:3.0"

# Error severities
ERROR_SEVERITY_ERROR = "urn:oasis:names:tc:ebxml-regrep:ErrorSeverityType:Error"
ERROR_SEVERITY_WARNING = "urn:oasis:names:tc:ebxml-regrep:ErrorSeverityType:Warning"

# XDSDocumentEntry metadata vocabulary (IHE ITI TF-3 4.2.5)
DOCUMENT_ENTRY_UNIQUE_ID_SCHEME = "urn:uuid:2e82c1f6-a085-4c72-9da3-8640a32e42ab"
DOCUMENT_ENTRY_PATIENT_ID_SCHEME = "urn:uuid:58a6f841-87b3-4a3e-92fd-a8ffeff98427"
AUTHOR_SCHEME = "urn:uuid:93606bcf-9494-43ec-9b4e-a7748d1a838d"
CLASS_CODE_SCHEME = "urn:uuid:41a5887f-8865-4c09-adf7-e362475b143a"
TYPE_CODE_SCHEME = "urn:uuid:f0306f51-975f-434e-a61c-c59651d33983"
FORMAT_CODE_SCHEME = "urn:uuid:a09d5840-386c-46f2-b5ad-9c3699a4309d"
FACILITY_TYPE_CODE_SCHEME = "urn:uuid:f33fb8ac-18af-42cc-ae0e-ed0b0bdb91e1"
PRACTICE_SETTING_CODE_SCHEME = "urn:uuid:cccf5598-8b07-4b77-a05e-ae952c785ead"
EVENT_CODE_SCHEME = "urn:uuid:2c6b8cb7-8b2a-4051-b291-b1ae6a575ef4"
