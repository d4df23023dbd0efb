from __future__ import annotations

import base64
import datetime as dt

import pytest

from gls_tracking.models import (
    DateTime,
    ExitCode,
    Parameters,
    TuDetailsRequest,
    TuDetailsResponse,
    TuListRequest,
    TuListResponse,
    TuPODResponse,
    UserCredentials,
)


def test_datetime_from_datetime_and_date():
    assert DateTime.from_datetime(dt.datetime(2024, 5, 6, 7, 8, 9)) == DateTime(2024, 5, 6, 7, 8, 9)
    assert DateTime.from_datetime(dt.date(2024, 5, 6)) == DateTime(2024, 5, 6, 0, 0, 0)
    assert DateTime(2024, 5, 6, 7, 8, 9).to_datetime() == dt.datetime(2024, 5, 6, 7, 8, 9)


def test_datetime_uses_minut_element():
    mapping = DateTime(2024, 1, 2, 3, 4, 5).to_mapping()
    assert mapping["Minut"] == 4
    assert DateTime.from_mapping(mapping) == DateTime(2024, 1, 2, 3, 4, 5)


def test_exit_code_success_and_parsing():
    assert ExitCode(0, "OK").is_successful
    assert not ExitCode(502, "Auth").is_successful
    assert ExitCode.from_mapping({"ErrorCode": "998", "ErrorDscr": "No data"}) == ExitCode(998, "No data")
    assert ExitCode.from_mapping({"ErrorCode": "E9999", "ErrorDscr": "x"}).code == "E9999"


def test_missing_exit_code_is_not_success():
    assert not ExitCode.from_mapping(None).is_successful
    assert not ExitCode.from_mapping("").is_successful


def test_credentials_password_hidden_from_repr():
    assert "secret" not in repr(UserCredentials("user", "secret"))


def test_details_request_mapping():
    request = TuDetailsRequest("12345678901", Parameters.language("EN"))
    assert "Credentials" not in request.to_mapping()

    with_credentials = request.with_credentials(UserCredentials("user", "pw"))
    assert request.credentials is None
    assert with_credentials.to_mapping() == {
        "Credentials": {"UserName": "user", "Password": "pw"},
        "RefNo": "12345678901",
        "Parameters": {"Name": "LangCode", "Value": "EN"},
    }


def test_list_request_omits_unset_references():
    request = TuListRequest(DateTime(2024, 1, 1), DateTime(2024, 1, 2), customer_ref_no="C-1")
    mapping = request.to_mapping()
    assert "RefNo" not in mapping
    assert mapping["CustomerRefNo"] == "C-1"
    assert mapping["DateFrom"]["Day"] == 1


def test_details_response_from_mapping():
    response = TuDetailsResponse.from_mapping(
        {
            "ExitCode": {"ErrorCode": "0", "ErrorDscr": "OK"},
            "RefNo": "12345678901",
            "History": [
                {
                    "Desc": "Delivered",
                    "Date": {"Year": "2024", "Month": "2", "Day": "3", "Hour": "10", "Minut": "5"},
                    "LocationName": "Warsaw",
                    "CountryName": "Poland",
                },
                {"Description": "In transit", "Location": "Berlin"},
            ],
            "References": {"Name": "Customer", "Value": "ORDER-1"},
        }
    )

    assert response.exit_code.is_successful
    assert response.ref_no == "12345678901"
    assert [event.description for event in response.history] == ["Delivered", "In transit"]
    assert response.history[0].date == DateTime(2024, 2, 3, 10, 5, 0)
    assert response.history[1].location == "Berlin"
    assert response.references == {"Customer": "ORDER-1"}


def test_list_response_accepts_single_entry():
    response = TuListResponse.from_mapping(
        {
            "ExitCode": {"ErrorCode": "0"},
            "TUList": {"RefNo": "111", "Status": "Delivered", "CustomerRefNo": "C-1"},
        }
    )
    assert len(response.parcels) == 1
    assert response.parcels[0].ref_no == "111"
    assert response.parcels[0].customer_ref_no == "C-1"


def test_pod_response_decodes_document():
    encoded = base64.b64encode(b"%PDF-1.4").decode("ascii")
    response = TuPODResponse.from_mapping(
        {"ExitCode": {"ErrorCode": "0"}, "RefNo": "111", "PODDocument": encoded, "Signature": "J. Doe"}
    )
    assert response.pod_document == b"%PDF-1.4"
    assert response.signature == "J. Doe"


def test_exit_code_compares_codes_as_text():
    assert ExitCode("0").is_successful
    assert ExitCode(502).is_authentication_error
    assert ExitCode("E0001").is_authentication_error
    assert ExitCode("998").is_no_data_found
    assert ExitCode("E0002").is_no_data_found
    assert not ExitCode("E0002").is_authentication_error


def test_exit_code_from_bare_text():
    assert ExitCode.from_mapping("0") == ExitCode(0, "")
    assert ExitCode.from_mapping("E0001").is_authentication_error
    assert not ExitCode.from_mapping(["0", "1"]).is_successful


def test_datetime_from_mapping_rejects_impossible_dates():
    with pytest.raises(ValueError):
        DateTime.from_mapping({"Year": "2024", "Month": "13", "Day": "1"})
