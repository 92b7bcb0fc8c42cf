"""
Tests for form validation and form data handling
"""

import pytest
from pydantic import ValidationError

from cargodesk.models.auth import ChangePasswordRequest, LoginRequest
from cargodesk.models.forms import (
    CarrierForm, CountryForm, FormErrors, HouseAwbForm, JobStatusForm, PartyForm, ProfileForm, UserCreateForm
)
from cargodesk.routes.admin.records import NestFormData


def Errors(model, data):
    with pytest.raises(ValidationError) as error:
        model.model_validate(data)
    return FormErrors(error.value)


def test_blank_optional_fields_are_omitted():
    form = CountryForm.model_validate({"country_name": "India", "country_code": "IND", "capital": "  "})
    assert form.ToPayload() == {"country_name": "India", "country_code": "IND"}


def test_field_errors_are_flattened():
    errors = Errors(CountryForm, {"country_name": "I", "country_code": "INDIA"})
    assert set(errors) == {"country_name", "country_code"}


def test_enum_fields_are_validated():
    errors = Errors(CarrierForm, {"carrier_name": "FedEx", "carrier_code": "FX", "type": "balloon"})
    assert "type" in errors
    form = CarrierForm.model_validate({"carrier_name": "FedEx", "carrier_code": "FX", "type": "airline"})
    assert form.ToPayload()["type"] == "airline"


def test_party_checkbox_and_numbers():
    form = PartyForm.model_validate({"name": "Acme", "type": "shipper", "tds_applicable": "true", "credit_limit": "5000"})
    payload = form.ToPayload()
    assert payload["tds_applicable"] is True
    assert payload["credit_limit"] == 5000.0
    assert "tds_rate" in Errors(PartyForm, {"name": "Acme", "type": "shipper", "tds_rate": "120"})


def test_house_awb_item_errors_are_indexed():
    data = {
        "house_number": "HAWB-1",
        "job_id": "j1",
        "shipper_id": "p1",
        "consignee_id": "p2",
        "issue_date": "2025-10-23",
        "items": [
            {"commodity_id": "cm1", "description": "Textiles", "quantity": "10", "unit": "PCS"},
            {"commodity_id": "cm1", "description": "Spares", "quantity": "", "unit": "KG"},
        ],
    }
    errors = Errors(HouseAwbForm, data)
    assert list(errors) == ["items.1.quantity"]


def test_user_payload_uses_backend_names():
    form = UserCreateForm.model_validate({
        "email": "new@cargodesk.io",
        "password": "secret123",
        "firstName": "Nina",
        "lastName": "Das",
        "role": "finance",
    })
    payload = form.ToPayload()
    assert payload["firstName"] == "Nina"
    assert payload["lastName"] == "Das"
    assert payload["role"] == "finance"
    assert "first_name" not in payload


def test_profile_errors_use_input_names():
    errors = Errors(ProfileForm, {"firstName": "N", "lastName": "Das"})
    assert list(errors) == ["firstName"]


def test_job_status_choices():
    assert JobStatusForm(status="invoiced").status == "invoiced"
    assert "status" in Errors(JobStatusForm, {"status": "shipped"})


def test_change_password_confirmation():
    errors = Errors(ChangePasswordRequest, {
        "current_password": "secret123",
        "new_password": "newsecret",
        "confirm_password": "different",
    })
    assert errors == {"confirm_password": "Passwords do not match"}

    form = ChangePasswordRequest(current_password="secret123", new_password="newsecret", confirm_password="newsecret")
    assert form.ToPayload() == {"currentPassword": "secret123", "newPassword": "newsecret"}


def test_login_request():
    assert LoginRequest(email="admin@cargodesk.io", password="secret123").email == "admin@cargodesk.io"
    with pytest.raises(ValidationError):
        LoginRequest(email="not-an-email", password="secret123")


def test_nest_form_data_folds_item_rows():
    """items.N.field inputs become a list of rows; untouched rows are dropped"""
    data = NestFormData([
        ("house_number", "HAWB-1"),
        ("items.0.description", "Textiles"),
        ("items.0.quantity", "10"),
        ("items.2.description", "Spares"),
        ("items.2.quantity", "4"),
        ("items.1.description", ""),
        ("items.1.quantity", " "),
    ])
    assert data == {
        "house_number": "HAWB-1",
        "items": [
            {"description": "Textiles", "quantity": "10"},
            {"description": "Spares", "quantity": "4"},
        ],
    }
