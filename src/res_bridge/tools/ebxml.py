"""
ebXML Registry (ebRS/ebRIM 3.0) binding for XDS.b stored queries.

Serializes `AdhocQueryRequest` objects into a SOAP 1.2 envelope and reads
`AdhocQueryResponse` payloads back into the typed objects of
`res_bridge.core.models`. Lookups on the response side are namespace-agnostic
(`{*}` wildcards) so registries that use unusual prefixes or omit the SOAP
envelope are still understood.
"""

from __future__ import annotations

import logging
import re
import uuid
from typing import Iterable, List, Optional, Union
from xml.etree import ElementTree as ET

from res_bridge.core.models import (
    AdhocQueryRequest,
    AdhocQueryResponse,
    Classification,
    ExternalIdentifier,
    ExtrinsicObject,
    Identifiable,
    ObjectRef,
    RegistryError,
    RegistryObject,
)
from res_bridge.core.wire import (
    ERROR_SEVERITY_ERROR,
    QUERY_NS,
    RIM_NS,
    SOAP12_NS,
    WSA_NS,
)

logger = logging.getLogger("EbXMLBinding")

ET.register_namespace("soap", SOAP12_NS)
ET.register_namespace("wsa", WSA_NS)
ET.register_namespace("query", QUERY_NS)
ET.register_namespace("rim", RIM_NS)

_BOUNDARY_RE = re.compile(r'boundary="?([^";]+)"?', re.IGNORECASE)


class EbXMLBindingError(Exception):
    """Raised when a registry payload cannot be read as an AdhocQueryResponse."""


class SOAPFaultError(EbXMLBindingError):
    """Raised when the registry answered with a SOAP fault."""

    def __init__(self, code: str, reason: str) -> None:
        self.code = code
        self.reason = reason
        super().__init__(f"SOAP fault {code}: {reason}")


def _q(ns: str, tag: str) -> str:
    return f"{{{ns}}}{tag}"


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


# ---------------------------------------------------------------------------
# Request side
# ---------------------------------------------------------------------------

def adhoc_query_request_element(request: AdhocQueryRequest) -> ET.Element:
    """Build the `query:AdhocQueryRequest` element for a request."""
    root = ET.Element(_q(QUERY_NS, "AdhocQueryRequest"))
    ET.SubElement(
        root,
        _q(QUERY_NS, "ResponseOption"),
        {
            "returnComposedObjects": "true" if request.response_option.return_composed_objects else "false",
            "returnType": request.response_option.return_type,
        },
    )
    query = ET.SubElement(root, _q(RIM_NS, "AdhocQuery"), {"id": request.query_id})
    for slot in request.slots:
        slot_el = ET.SubElement(query, _q(RIM_NS, "Slot"), {"name": slot.name})
        value_list = ET.SubElement(slot_el, _q(RIM_NS, "ValueList"))
        for value in slot.values:
            ET.SubElement(value_list, _q(RIM_NS, "Value")).text = value
    return root


def build_soap_envelope(
    request: AdhocQueryRequest,
    *,
    action: str,
    to: str,
    message_id: Optional[str] = None,
    extra_headers: Iterable[ET.Element] = (),
) -> bytes:
    """
    Wrap a query request in a SOAP 1.2 envelope with WS-Addressing headers.

    Args:
        request: The query to send.
        action: WS-Addressing action (also used as the SOAP action).
        to: Endpoint address.
        message_id: Message id; a fresh `urn:uuid:` is generated when omitted.
        extra_headers: Additional SOAP header blocks, e.g. security tokens.

    Returns:
        UTF-8 encoded envelope bytes with an XML declaration.
    """
    envelope = ET.Element(_q(SOAP12_NS, "Envelope"))
    header = ET.SubElement(envelope, _q(SOAP12_NS, "Header"))
    ET.SubElement(header, _q(WSA_NS, "Action"), {_q(SOAP12_NS, "mustUnderstand"): "1"}).text = action
    ET.SubElement(header, _q(WSA_NS, "MessageID")).text = message_id or f"urn:uuid:{uuid.uuid4()}"
    ET.SubElement(header, _q(WSA_NS, "To"), {_q(SOAP12_NS, "mustUnderstand"): "1"}).text = to
    for block in extra_headers:
        header.append(block)

    body = ET.SubElement(envelope, _q(SOAP12_NS, "Body"))
    body.append(adhoc_query_request_element(request))
    return ET.tostring(envelope, encoding="utf-8", xml_declaration=True)


# ---------------------------------------------------------------------------
# Response side
# ---------------------------------------------------------------------------

def extract_xml_part(payload: bytes, content_type: str = "") -> bytes:
    """
    Return the XML root part of an MTOM/XOP multipart body.

    Non-multipart payloads are returned unchanged.
    """
    if "multipart/related" not in (content_type or "").lower():
        return payload

    match = _BOUNDARY_RE.search(content_type)
    if not match:
        raise EbXMLBindingError("Multipart response without boundary parameter.")
    delimiter = b"--" + match.group(1).encode("ascii")

    for part in payload.split(delimiter):
        head, sep, body = part.partition(b"\r\n\r\n")
        if not sep:
            head, sep, body = part.partition(b"\n\n")
        if sep and b"<" in body:
            return body.strip()
    raise EbXMLBindingError("Multipart response without an XML part.")


def _slots(element: ET.Element) -> dict:
    slots = {}
    for slot in element.findall("{*}Slot"):
        name = slot.attrib.get("name")
        if not name:
            continue
        slots[name] = [(v.text or "").strip() for v in slot.findall("{*}ValueList/{*}Value")]
    return slots


def _localized_name(element: ET.Element) -> Optional[str]:
    node = element.find("{*}Name/{*}LocalizedString")
    if node is None:
        return None
    return node.attrib.get("value")


def _classification(element: ET.Element) -> Classification:
    slots = _slots(element)
    coding = slots.get("codingScheme") or []
    return Classification(
        scheme=element.attrib.get("classificationScheme", ""),
        node_representation=element.attrib.get("nodeRepresentation"),
        coding_scheme=coding[0] if coding else None,
        display_name=_localized_name(element),
        slots=slots,
    )


def _identifiable(element: ET.Element) -> Identifiable:
    kind = _local(element.tag)
    object_id = element.attrib.get("id", "")

    if kind == "ObjectRef":
        return ObjectRef(id=object_id, home=element.attrib.get("home"))

    common = dict(
        id=object_id,
        kind=kind,
        status=element.attrib.get("status"),
        object_type=element.attrib.get("objectType"),
        name=_localized_name(element),
        slots=_slots(element),
        classifications=[_classification(c) for c in element.findall("{*}Classification")],
        external_identifiers=[
            ExternalIdentifier(
                scheme=e.attrib.get("identificationScheme", ""),
                value=e.attrib.get("value", ""),
            )
            for e in element.findall("{*}ExternalIdentifier")
        ],
    )
    if kind == "ExtrinsicObject":
        return ExtrinsicObject(mime_type=element.attrib.get("mimeType"), **common)
    return RegistryObject(**common)


def _registry_errors(response: ET.Element) -> List[RegistryError]:
    errors: List[RegistryError] = []
    for node in response.findall("{*}RegistryErrorList/{*}RegistryError"):
        errors.append(
            RegistryError(
                error_code=node.attrib.get("errorCode", "Unknown"),
                code_context=node.attrib.get("codeContext") or (node.text or "").strip(),
                severity=node.attrib.get("severity", ERROR_SEVERITY_ERROR),
                location=node.attrib.get("location"),
            )
        )
    return errors


def _raise_on_fault(root: ET.Element) -> None:
    fault = root if _local(root.tag) == "Fault" else root.find(".//{*}Body/{*}Fault")
    if fault is None:
        return
    code = (
        fault.findtext("{*}Code/{*}Value")
        or fault.findtext("faultcode")
        or "Unknown"
    ).strip()
    reason = (
        fault.findtext("{*}Reason/{*}Text")
        or fault.findtext("faultstring")
        or "Unknown error"
    ).strip()
    raise SOAPFaultError(code, reason)


def parse_adhoc_query_response(payload: Union[bytes, str]) -> AdhocQueryResponse:
    """
    Deserialize an `AdhocQueryResponse`, bare or inside a SOAP envelope.

    Raises:
        SOAPFaultError: If the payload carries a SOAP fault.
        EbXMLBindingError: If the payload is not XML or holds no
            AdhocQueryResponse with a status.
    """
    try:
        root = ET.fromstring(payload)
    except ET.ParseError as exc:
        raise EbXMLBindingError(f"Failed to parse registry XML response: {exc}") from exc

    _raise_on_fault(root)

    if _local(root.tag) == "AdhocQueryResponse":
        response = root
    else:
        response = root.find(".//{*}AdhocQueryResponse")
    if response is None:
        raise EbXMLBindingError(f"No AdhocQueryResponse element in payload (root: {root.tag}).")

    status = response.attrib.get("status")
    if not status:
        raise EbXMLBindingError("AdhocQueryResponse is missing its status attribute.")

    objects: List[Identifiable] = []
    object_list = response.find("{*}RegistryObjectList")
    if object_list is not None:
        objects = [_identifiable(child) for child in object_list]

    errors = _registry_errors(response)
    logger.debug(
        f"Parsed AdhocQueryResponse: status={status}, objects={len(objects)}, errors={len(errors)}"
    )
    return AdhocQueryResponse(status=status, registry_objects=objects, errors=errors)
