"""Transport layer for the GLS tracking service.

:class:`TrackingClient <gls_tracking.client.TrackingClient>` only needs
something that satisfies :class:`Executor`; tests pass in stubs.  The
bundled :class:`SoapExecutor` talks SOAP 1.1 using nothing but the standard
library HTTP and XML stacks.
"""
from __future__ import annotations

import binascii
import http.client
import logging
import ssl
import urllib.error
import urllib.request
import xml.etree.ElementTree as ET
from typing import Any, Dict, Mapping, Optional, Protocol, Type, TypeVar

from .exceptions import CommunicationError

logger = logging.getLogger(__name__)

T = TypeVar("T")

SOAP_ENV_NS = "http://schemas.xmlsoap.org/soap/envelope/"
DEFAULT_NAMESPACE = "http://fpcs.gls-group.eu/v1/Tracking"


class Executor(Protocol):
    def execute(self, operation: str, envelope: Mapping[str, Any], response_type: Type[T]) -> T:
        """Perform ``operation`` and return an instance of ``response_type``.

        Implementations raise :class:`CommunicationError` when the call cannot
        be completed or its reply cannot be deserialised.
        """
        ...


class SoapExecutor:
    """Minimal SOAP client for the tracking endpoint."""

    def __init__(
        self,
        endpoint: str,
        *,
        namespace: str = DEFAULT_NAMESPACE,
        timeout: float = 15,
        user_agent: Optional[str] = None,
    ) -> None:
        self.endpoint = endpoint
        self.namespace = namespace
        self.timeout = timeout
        self.user_agent = user_agent or "gls-tracking/1.0"
        self._ssl_context = ssl.create_default_context()

    def execute(self, operation: str, envelope: Mapping[str, Any], response_type: Type[T]) -> T:
        body = self.build_envelope(envelope)
        payload = self._post(operation, body)
        mapping = self.parse_envelope(payload)

        try:
            return response_type.from_mapping(mapping)  # type: ignore[attr-defined]
        except (AttributeError, TypeError, ValueError, binascii.Error) as exc:
            raise CommunicationError(f"Cannot deserialise {operation} response: {exc}") from exc

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def build_envelope(self, envelope: Mapping[str, Any]) -> bytes:
        root = ET.Element(f"{{{SOAP_ENV_NS}}}Envelope")
        body = ET.SubElement(root, f"{{{SOAP_ENV_NS}}}Body")
        for operation, request in envelope.items():
            node = ET.SubElement(body, f"{{{self.namespace}}}{operation}")
            _append_mapping(node, request.to_mapping())
        return ET.tostring(root, encoding="utf-8", xml_declaration=True)

    @staticmethod
    def parse_envelope(payload: bytes) -> Dict[str, Any]:
        try:
            root = ET.fromstring(payload)
        except ET.ParseError as exc:
            raise CommunicationError("Invalid XML received from the tracking service.") from exc

        body = root.find(f"{{{SOAP_ENV_NS}}}Body")
        if body is None or len(body) == 0:
            raise CommunicationError("SOAP reply has no body.")

        result = body[0]
        if _local_name(result.tag) == "Fault":
            fault = _element_to_value(result)
            message = fault.get("faultstring") if isinstance(fault, dict) else None
            raise CommunicationError(f"SOAP fault: {message or 'unknown fault'}")

        value = _element_to_value(result)
        return value if isinstance(value, dict) else {}

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------
    def _post(self, operation: str, body: bytes) -> bytes:
        headers = {
            "User-Agent": self.user_agent,
            "Content-Type": "text/xml; charset=utf-8",
            "SOAPAction": f'"{self.namespace}/{operation}"',
        }
        request = urllib.request.Request(url=self.endpoint, method="POST", headers=headers, data=body)

        logger.debug("POST %s (%s)", self.endpoint, operation)
        try:
            with urllib.request.urlopen(
                request, timeout=self.timeout, context=self._ssl_context
            ) as response:
                raw_body = response.read()
        except urllib.error.HTTPError as exc:
            # SOAP faults travel with HTTP 500; let the parser report them.
            raw_body = exc.read() if exc.code == 500 else b""
            if not raw_body:
                raise CommunicationError(
                    f"Tracking service answered with HTTP {exc.code}."
                ) from exc
        except urllib.error.URLError as exc:
            raise CommunicationError(f"Cannot connect to the tracking service: {exc.reason}") from exc
        except http.client.HTTPException as exc:
            raise CommunicationError(f"Invalid HTTP reply from the tracking service: {exc!r}") from exc
        except OSError as exc:
            raise CommunicationError(f"Connection to the tracking service failed: {exc}") from exc

        if not raw_body.strip():
            raise CommunicationError("Empty reply received from the tracking service.")
        return raw_body


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _append_mapping(parent: ET.Element, data: Mapping[str, Any]) -> None:
    for name, value in data.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            for item in value:
                _append_value(parent, name, item)
        else:
            _append_value(parent, name, value)


def _append_value(parent: ET.Element, name: str, value: Any) -> None:
    node = ET.SubElement(parent, name)
    if isinstance(value, Mapping):
        _append_mapping(node, value)
    else:
        node.text = str(value)


def _element_to_value(element: ET.Element) -> Any:
    if len(element) == 0:
        return (element.text or "").strip()

    data: Dict[str, Any] = {}
    for child in element:
        key = _local_name(child.tag)
        value = _element_to_value(child)
        if key in data:
            existing = data[key]
            if not isinstance(existing, list):
                data[key] = existing = [existing]
            existing.append(value)
        else:
            data[key] = value
    return data


__all__ = ["DEFAULT_NAMESPACE", "Executor", "SoapExecutor"]
