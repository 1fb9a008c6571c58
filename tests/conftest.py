"""Shared fixtures and sample registry payloads."""

from typing import List, Optional

import pytest

from res_bridge.core.config import reload_config
from res_bridge.core.models import AdhocQueryRequest, AdhocQueryResponse

SUCCESS = "urn:oasis:names:tc:ebxml-regrep:ResponseStatusType:Success"
FAILURE = "urn:oasis:names:tc:ebxml-regrep:ResponseStatusType:Failure"

NAMESPACES = (
    'xmlns:query="urn:oasis:names:tc:ebxml-regrep:xsd:query:3.0" '
    'xmlns:rim="urn:oasis:names:tc:ebxml-regrep:xsd:rim:3.0" '
    'xmlns:rs="urn:oasis:names:tc:ebxml-regrep:xsd:rs:3.0"'
)


def extrinsic_object_xml(entry_uuid: str, unique_id: str = "2.16.840.1.113883.3.711.1") -> str:
    return f"""
    <rim:ExtrinsicObject id="{entry_uuid}" mimeType="text/xml"
        objectType="urn:uuid:7edca82f-054d-47f2-a032-9b2a5b5186c1"
        status="urn:oasis:names:tc:ebxml-regrep:StatusType:Approved">
      <rim:Slot name="creationTime"><rim:ValueList><rim:Value>20170315143000</rim:Value></rim:ValueList></rim:Slot>
      <rim:Slot name="serviceStartTime"><rim:ValueList><rim:Value>201703151400</rim:Value></rim:ValueList></rim:Slot>
      <rim:Slot name="repositoryUniqueId"><rim:ValueList><rim:Value>2.16.840.1.113883.3.711.2</rim:Value></rim:ValueList></rim:Slot>
      <rim:Slot name="sourcePatientId"><rim:ValueList><rim:Value>700000000000005^^^&amp;2.16.840.1.113883.13.236&amp;ISO</rim:Value></rim:ValueList></rim:Slot>
      <rim:Slot name="languageCode"><rim:ValueList><rim:Value>pt-BR</rim:Value></rim:ValueList></rim:Slot>
      <rim:Slot name="size"><rim:ValueList><rim:Value>2048</rim:Value></rim:ValueList></rim:Slot>
      <rim:Name><rim:LocalizedString value="Registro de Atendimento Clinico"/></rim:Name>
      <rim:Classification classificationScheme="urn:uuid:93606bcf-9494-43ec-9b4e-a7748d1a838d"
          classifiedObject="{entry_uuid}" id="urn:uuid:author-{entry_uuid[-4:]}" nodeRepresentation="">
        <rim:Slot name="authorInstitution"><rim:ValueList><rim:Value>2786680</rim:Value></rim:ValueList></rim:Slot>
        <rim:Slot name="authorPerson"><rim:ValueList><rim:Value>980016287385192</rim:Value></rim:ValueList></rim:Slot>
      </rim:Classification>
      <rim:Classification classificationScheme="urn:uuid:41a5887f-8865-4c09-adf7-e362475b143a"
          classifiedObject="{entry_uuid}" id="urn:uuid:class-{entry_uuid[-4:]}" nodeRepresentation="RAC">
        <rim:Slot name="codingScheme"><rim:ValueList><rim:Value>2.16.840.1.113883.13.237</rim:Value></rim:ValueList></rim:Slot>
        <rim:Name><rim:LocalizedString value="Registro de Atendimento"/></rim:Name>
      </rim:Classification>
      <rim:Classification classificationScheme="urn:uuid:2c6b8cb7-8b2a-4051-b291-b1ae6a575ef4"
          classifiedObject="{entry_uuid}" id="urn:uuid:event1-{entry_uuid[-4:]}" nodeRepresentation="J11">
        <rim:Slot name="codingScheme"><rim:ValueList><rim:Value>CID10</rim:Value></rim:ValueList></rim:Slot>
      </rim:Classification>
      <rim:Classification classificationScheme="urn:uuid:2c6b8cb7-8b2a-4051-b291-b1ae6a575ef4"
          classifiedObject="{entry_uuid}" id="urn:uuid:event2-{entry_uuid[-4:]}" nodeRepresentation="I10">
        <rim:Slot name="codingScheme"><rim:ValueList><rim:Value>CID10</rim:Value></rim:ValueList></rim:Slot>
      </rim:Classification>
      <rim:ExternalIdentifier identificationScheme="urn:uuid:58a6f841-87b3-4a3e-92fd-a8ffeff98427"
          value="700000000000005^^^&amp;2.16.840.1.113883.13.236&amp;ISO" id="urn:uuid:pid-{entry_uuid[-4:]}"/>
      <rim:ExternalIdentifier identificationScheme="urn:uuid:2e82c1f6-a085-4c72-9da3-8640a32e42ab"
          value="{unique_id}" id="urn:uuid:uid-{entry_uuid[-4:]}"/>
    </rim:ExtrinsicObject>"""


def object_ref_xml(entry_uuid: str) -> str:
    return f'<rim:ObjectRef id="{entry_uuid}"/>'


def query_response_xml(
    objects: Optional[List[str]] = None,
    status: str = SUCCESS,
    errors: Optional[List[str]] = None,
    soap: bool = True,
) -> str:
    object_list = ""
    if objects is not None:
        object_list = "<rim:RegistryObjectList>" + "".join(objects) + "</rim:RegistryObjectList>"
    error_list = ""
    if errors:
        error_list = "<rs:RegistryErrorList>" + "".join(errors) + "</rs:RegistryErrorList>"
    body = (
        f'<query:AdhocQueryResponse {NAMESPACES} status="{status}">'
        f"{error_list}{object_list}</query:AdhocQueryResponse>"
    )
    if not soap:
        return body
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<soapenv:Envelope xmlns:soapenv="http://www.w3.org/2003/05/soap-envelope" '
        'xmlns:wsa="http://www.w3.org/2005/08/addressing">'
        "<soapenv:Header><wsa:Action>urn:ihe:iti:2007:RegistryStoredQueryResponse</wsa:Action></soapenv:Header>"
        f"<soapenv:Body>{body}</soapenv:Body></soapenv:Envelope>"
    )


def registry_error_xml(code: str, context: str, severity: str = "Error") -> str:
    return (
        f'<rs:RegistryError errorCode="{code}" codeContext="{context}" '
        f'severity="urn:oasis:names:tc:ebxml-regrep:ErrorSeverityType:{severity}"/>'
    )


class FakeTransport:
    """Records requests and replays a canned response or exception."""

    def __init__(self, response: Optional[AdhocQueryResponse] = None, error: Optional[BaseException] = None):
        self.response = response
        self.error = error
        self.requests: List[AdhocQueryRequest] = []

    async def send(self, request: AdhocQueryRequest) -> AdhocQueryResponse:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    for name in (
        "RES_REGISTRY_URL",
        "RES_REGISTRY_SOAP_ACTION",
        "RES_REGISTRY_TIMEOUT_SECONDS",
        "RES_REGISTRY_VERIFY_TLS",
        "RES_MAX_RETRY_ATTEMPTS",
        "RES_RETRY_DELAY_MULTIPLIER",
    ):
        monkeypatch.delenv(name, raising=False)
    yield reload_config()
    reload_config()
