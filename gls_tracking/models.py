"""Value objects exchanged with the GLS tracking service.

Requests are immutable: the client never mutates a request after it has
been built, it asks for a copy carrying the credentials instead.  Responses
are built from plain mappings (usually produced by
:class:`gls_tracking.executor.SoapExecutor`) and tolerate missing fields,
because the service omits empty elements from its replies.
"""
from __future__ import annotations

import base64
import datetime as dt
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Union


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _first(payload: Mapping[str, Any], *keys: str) -> Optional[str]:
    for key in keys:
        value = payload.get(key)
        if value not in (None, ""):
            return str(value)
    return None


@dataclass(frozen=True)
class UserCredentials:
    """Account data attached to every outbound request."""

    user_name: str
    password: str = field(repr=False)

    def to_mapping(self) -> Dict[str, str]:
        return {"UserName": self.user_name, "Password": self.password}


@dataclass(frozen=True)
class Parameters:
    """A single name/value protocol parameter."""

    name: str
    value: str

    LANGUAGE = "LangCode"

    @classmethod
    def language(cls, code: str) -> "Parameters":
        return cls(cls.LANGUAGE, code)

    def to_mapping(self) -> Dict[str, str]:
        return {"Name": self.name, "Value": self.value}


@dataclass(frozen=True)
class DateTime:
    """Date representation used on the wire."""

    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0
    second: int = 0

    @classmethod
    def from_datetime(cls, value: Union[dt.datetime, dt.date]) -> "DateTime":
        if isinstance(value, dt.datetime):
            return cls(value.year, value.month, value.day, value.hour, value.minute, value.second)
        return cls(value.year, value.month, value.day)

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "DateTime":
        """Build a date from its wire elements.

        Raises :class:`ValueError` for dates that do not exist on the calendar.
        """
        def number(key: str) -> int:
            raw = payload.get(key)
            return int(raw) if raw not in (None, "") else 0

        value = cls(
            number("Year"),
            number("Month"),
            number("Day"),
            number("Hour"),
            number("Minut"),
            number("Second"),
        )
        value.to_datetime()
        return value

    def to_datetime(self) -> dt.datetime:
        return dt.datetime(self.year, self.month, self.day, self.hour, self.minute, self.second)

    def to_mapping(self) -> Dict[str, int]:
        # "Minut" is the element name the service actually uses.
        return {
            "Year": self.year,
            "Month": self.month,
            "Day": self.day,
            "Hour": self.hour,
            "Minut": self.minute,
            "Second": self.second,
        }


@dataclass(frozen=True)
class ExitCode:
    """Outcome attached to every response.

    Codes are compared by their text, so ``0`` and ``"0"`` are the same code.
    """

    code: Union[int, str]
    description: str = ""

    CODE_SUCCESSFULLY = 0
    CODE_AUTHENTICATION_ERROR = 502
    CODE_NO_DATA_FOUND = 998

    SUCCESS_CODES = frozenset({"0"})
    AUTHENTICATION_ERROR_CODES = frozenset({"502", "E0001"})
    NO_DATA_FOUND_CODES = frozenset({"998", "E0002"})

    @property
    def normalized_code(self) -> str:
        return str(self.code).strip()

    @property
    def is_successful(self) -> bool:
        return self.normalized_code in self.SUCCESS_CODES

    @property
    def is_authentication_error(self) -> bool:
        return self.normalized_code in self.AUTHENTICATION_ERROR_CODES

    @property
    def is_no_data_found(self) -> bool:
        return self.normalized_code in self.NO_DATA_FOUND_CODES

    @classmethod
    def from_mapping(cls, payload: Any) -> "ExitCode":
        if payload is None or payload == "" or (isinstance(payload, Mapping) and not payload):
            # A reply without an exit code cannot be trusted as a success.
            return cls("", "Missing exit code")

        if isinstance(payload, Mapping):
            raw = payload.get("ErrorCode", payload.get("Code", ""))
            description = _first(payload, "ErrorDscr", "Description") or ""
        elif isinstance(payload, (str, int)):
            # Some replies carry the bare code as the element text.
            raw, description = payload, ""
        else:
            return cls("", "Malformed exit code")

        try:
            code: Union[int, str] = int(raw)
        except (TypeError, ValueError):
            code = "" if raw is None else str(raw)
        return cls(code, description)


# ----------------------------------------------------------------------
# Requests
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class TuDetailsRequest:
    """Parameters of a ``GetTuDetail`` call."""

    ref_no: str
    parameters: Optional[Parameters] = None
    credentials: Optional[UserCredentials] = None

    def with_credentials(self, credentials: UserCredentials) -> "TuDetailsRequest":
        return replace(self, credentials=credentials)

    def to_mapping(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.credentials is not None:
            data["Credentials"] = self.credentials.to_mapping()
        data["RefNo"] = self.ref_no
        if self.parameters is not None:
            data["Parameters"] = self.parameters.to_mapping()
        return data


@dataclass(frozen=True)
class TuListRequest:
    """Parameters of a ``GetTuList`` call."""

    date_from: DateTime
    date_to: DateTime
    ref_no: Optional[str] = None
    customer_ref_no: Optional[str] = None
    parameters: Optional[Parameters] = None
    credentials: Optional[UserCredentials] = None

    def with_credentials(self, credentials: UserCredentials) -> "TuListRequest":
        return replace(self, credentials=credentials)

    def to_mapping(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.credentials is not None:
            data["Credentials"] = self.credentials.to_mapping()
        data["DateFrom"] = self.date_from.to_mapping()
        data["DateTo"] = self.date_to.to_mapping()
        if self.ref_no is not None:
            data["RefNo"] = self.ref_no
        if self.customer_ref_no is not None:
            data["CustomerRefNo"] = self.customer_ref_no
        if self.parameters is not None:
            data["Parameters"] = self.parameters.to_mapping()
        return data


@dataclass(frozen=True)
class TuPODRequest:
    """Parameters of a ``GetTuPOD`` call."""

    ref_no: str
    parameters: Optional[Parameters] = None
    credentials: Optional[UserCredentials] = None

    def with_credentials(self, credentials: UserCredentials) -> "TuPODRequest":
        return replace(self, credentials=credentials)

    def to_mapping(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.credentials is not None:
            data["Credentials"] = self.credentials.to_mapping()
        data["RefNo"] = self.ref_no
        if self.parameters is not None:
            data["Parameters"] = self.parameters.to_mapping()
        return data


Request = Union[TuDetailsRequest, TuListRequest, TuPODRequest]


# ----------------------------------------------------------------------
# Responses
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class TrackingEvent:
    """A single entry of a parcel's history."""

    description: str
    date: Optional[DateTime] = None
    location: Optional[str] = None
    country: Optional[str] = None
    code: Optional[str] = None

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "TrackingEvent":
        """Create an event from a ``History`` entry.

        Older service revisions put the location under ``LocationName``
        while newer ones use ``Location``; both are accepted.
        """
        raw_date = payload.get("Date")
        return cls(
            description=_first(payload, "Desc", "Description", "StatusDescription") or "Unknown status",
            date=DateTime.from_mapping(raw_date) if isinstance(raw_date, Mapping) else None,
            location=_first(payload, "LocationName", "Location"),
            country=_first(payload, "CountryName", "Country"),
            code=_first(payload, "Code", "ReasonCode"),
        )


@dataclass(frozen=True)
class ParcelSummary:
    """One row of a parcel list."""

    ref_no: str
    status: Optional[str] = None
    status_date: Optional[DateTime] = None
    customer_ref_no: Optional[str] = None
    consignee: Optional[str] = None

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "ParcelSummary":
        raw_date = payload.get("StatusDate") or payload.get("Date")
        return cls(
            ref_no=_first(payload, "RefNo", "TuNo") or "",
            status=_first(payload, "Status", "StatusDescription"),
            status_date=DateTime.from_mapping(raw_date) if isinstance(raw_date, Mapping) else None,
            customer_ref_no=_first(payload, "CustomerRefNo", "CustomerReference"),
            consignee=_first(payload, "ConsigneeName", "Consignee"),
        )


@dataclass(frozen=True)
class TuDetailsResponse:
    """History and references of a single parcel."""

    exit_code: ExitCode
    ref_no: Optional[str] = None
    history: List[TrackingEvent] = field(default_factory=list)
    references: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "TuDetailsResponse":
        references: Dict[str, str] = {}
        for entry in _as_list(payload.get("References")):
            if isinstance(entry, Mapping) and entry.get("Name"):
                references[str(entry["Name"])] = str(entry.get("Value", ""))

        return cls(
            exit_code=ExitCode.from_mapping(payload.get("ExitCode")),
            ref_no=_first(payload, "RefNo", "TuNo"),
            history=[
                TrackingEvent.from_mapping(entry)
                for entry in _as_list(payload.get("History"))
                if isinstance(entry, Mapping)
            ],
            references=references,
        )


@dataclass(frozen=True)
class TuListResponse:
    """Parcels matching a date range query."""

    exit_code: ExitCode
    parcels: List[ParcelSummary] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "TuListResponse":
        return cls(
            exit_code=ExitCode.from_mapping(payload.get("ExitCode")),
            parcels=[
                ParcelSummary.from_mapping(entry)
                for entry in _as_list(payload.get("TUList") or payload.get("TuList"))
                if isinstance(entry, Mapping)
            ],
        )


@dataclass(frozen=True)
class TuPODResponse:
    """Proof of delivery document and signatory."""

    exit_code: ExitCode
    ref_no: Optional[str] = None
    pod_document: Optional[bytes] = field(default=None, repr=False)
    signature: Optional[str] = None

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "TuPODResponse":
        document = payload.get("PODDocument") or payload.get("PodDocument")
        if isinstance(document, str) and document:
            document = base64.b64decode(document)
        elif not isinstance(document, bytes):
            document = None

        return cls(
            exit_code=ExitCode.from_mapping(payload.get("ExitCode")),
            ref_no=_first(payload, "RefNo", "TuNo"),
            pod_document=document,
            signature=_first(payload, "Signature", "SignatoryName"),
        )


Response = Union[TuDetailsResponse, TuListResponse, TuPODResponse]


__all__ = [
    "DateTime",
    "ExitCode",
    "Parameters",
    "ParcelSummary",
    "Request",
    "Response",
    "TrackingEvent",
    "TuDetailsRequest",
    "TuDetailsResponse",
    "TuListRequest",
    "TuListResponse",
    "TuPODRequest",
    "TuPODResponse",
    "UserCredentials",
]
