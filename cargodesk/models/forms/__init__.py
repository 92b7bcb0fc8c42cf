"""
CargoDesk - Form Models Package

Pydantic models validating create/update form submissions before they are
sent to the backend.
"""

from cargodesk.models.forms.base import EntityForm, FormErrors
from cargodesk.models.forms.enums import CarrierType, PortOrAirportType, PartyType
from cargodesk.models.forms.master_data import (
    CountryForm,
    CityForm,
    PortAirportForm,
    CarrierForm,
    CommodityForm,
    PartyForm
)
from cargodesk.models.forms.documents import (
    JobForm,
    JobStatusForm,
    MasterAwbForm,
    HouseAwbForm,
    HouseAwbItemForm
)
from cargodesk.models.forms.users import UserCreateForm, UserUpdateForm, ProfileForm

__all__ = [
    'EntityForm',
    'FormErrors',
    'CarrierType',
    'PortOrAirportType',
    'PartyType',
    'CountryForm',
    'CityForm',
    'PortAirportForm',
    'CarrierForm',
    'CommodityForm',
    'PartyForm',
    'JobForm',
    'JobStatusForm',
    'MasterAwbForm',
    'HouseAwbForm',
    'HouseAwbItemForm',
    'UserCreateForm',
    'UserUpdateForm',
    'ProfileForm',
]
