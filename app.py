from __future__ import annotations

import base64
import datetime as dt
import logging
from typing import Optional

from flask import Flask, jsonify, request

from gls_tracking import (
    AuthenticationError,
    CommunicationError,
    NoDataFoundError,
    TrackingClient,
    TrackingSettings,
    UnknownErrorCodeError,
)
from gls_tracking.models import DateTime, ParcelSummary, TrackingEvent

logger = logging.getLogger(__name__)


def _format_date(value: Optional[DateTime]) -> Optional[str]:
    return value.to_datetime().isoformat() if value is not None else None


def _event_to_json(event: TrackingEvent) -> dict:
    return {
        "description": event.description,
        "date": _format_date(event.date),
        "location": event.location,
        "country": event.country,
        "code": event.code,
    }


def _parcel_to_json(parcel: ParcelSummary) -> dict:
    return {
        "reference": parcel.ref_no,
        "status": parcel.status,
        "status_date": _format_date(parcel.status_date),
        "customer_reference": parcel.customer_ref_no,
        "consignee": parcel.consignee,
    }


def _parse_date(name: str) -> dt.date:
    raw = (request.args.get(name) or "").strip()
    if not raw:
        raise ValueError(f"Query parameter '{name}' is required.")
    try:
        return dt.date.fromisoformat(raw)
    except ValueError as exc:
        raise ValueError(f"Query parameter '{name}' must be a YYYY-MM-DD date.") from exc


def create_app(client: Optional[TrackingClient] = None, language: Optional[str] = None) -> Flask:
    if client is None:
        settings = TrackingSettings.from_env()
        client = settings.build_client()
        language = language or settings.language
    default_language = language or "EN"

    app = Flask(__name__)
    app.json.ensure_ascii = False

    def current_language() -> str:
        return request.args.get("lang") or default_language

    @app.errorhandler(AuthenticationError)
    def handle_auth_error(exc: AuthenticationError):
        return jsonify({"error": str(exc), "code": exc.code}), 502

    @app.errorhandler(NoDataFoundError)
    def handle_no_data(exc: NoDataFoundError):
        return jsonify({"error": str(exc), "code": exc.code}), 404

    @app.errorhandler(UnknownErrorCodeError)
    def handle_unknown_code(exc: UnknownErrorCodeError):
        return jsonify({"error": str(exc), "code": exc.code}), 502

    @app.errorhandler(CommunicationError)
    def handle_communication_error(exc: CommunicationError):
        logger.error("Tracking service unavailable: %s", exc)
        return jsonify({"error": str(exc)}), 503

    @app.route("/api/parcels/<reference>")
    def parcel_details(reference: str):
        result = client.get_parcel_details(reference, current_language())
        return jsonify(
            {
                "reference": result.ref_no,
                "history": [_event_to_json(event) for event in result.history],
                "references": result.references,
            }
        )

    @app.route("/api/parcels")
    def parcel_list():
        try:
            date_from = _parse_date("from")
            date_to = _parse_date("to")
        except ValueError as exc:
            return jsonify({"error": str(exc)}), 400

        result = client.get_parcel_list(
            date_from,
            date_to,
            reference=request.args.get("reference") or None,
            customer_reference=request.args.get("customer_reference") or None,
            language=current_language(),
        )
        return jsonify({"parcels": [_parcel_to_json(parcel) for parcel in result.parcels]})

    @app.route("/api/parcels/<reference>/pod")
    def proof_of_delivery(reference: str):
        result = client.get_proof_of_delivery(reference, current_language())
        document = result.pod_document
        return jsonify(
            {
                "reference": result.ref_no,
                "signature": result.signature,
                "document": base64.b64encode(document).decode("ascii") if document else None,
            }
        )

    @app.route("/health")
    def health_check():
        return {"status": "ok"}

    return app


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    create_app().run(debug=True, host="0.0.0.0", port=8000)
