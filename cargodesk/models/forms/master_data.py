"""
CargoDesk - Master Data Form Models

Validation rules for countries, cities, ports/airports, carriers,
commodities and parties.
"""

from typing import Optional

from pydantic import EmailStr, Field

from cargodesk.models.forms.base import EntityForm
from cargodesk.models.forms.enums import CarrierType, PartyType, PortOrAirportType


class CountryForm(EntityForm):
    """Create/update form for a country"""
    country_name: str = Field(min_length=2)
    country_code: str = Field(min_length=3, max_length=3)
    capital: Optional[str] = None
    currency: Optional[str] = None
    language: Optional[str] = None


class CityForm(EntityForm):
    """Create/update form for a city"""
    city_name: str = Field(min_length=2)
    city_code: str = Field(min_length=2)
    country_id: str = Field(min_length=1)


class PortAirportForm(EntityForm):
    """Create/update form for a port or airport"""
    port_name: str = Field(min_length=2)
    port_code: str = Field(min_length=2)
    type: PortOrAirportType
    city_id: str = Field(min_length=1)


class CarrierForm(EntityForm):
    """Create/update form for a carrier"""
    carrier_name: str = Field(min_length=2)
    carrier_code: str = Field(min_length=2)
    type: CarrierType
    contact_person: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None


class CommodityForm(EntityForm):
    """Create/update form for a commodity"""
    commodity_name: str = Field(min_length=2)
    commodity_code: str = Field(min_length=2)
    category: Optional[str] = None


class PartyForm(EntityForm):
    """Create/update form for a party (shipper, consignee, carrier, vendor)"""
    name: str = Field(min_length=2)
    short_name: Optional[str] = None
    type: PartyType
    billing_address: Optional[str] = None
    corporate_address: Optional[str] = None
    credit_limit: Optional[float] = Field(default=None, ge=0)
    credit_days: Optional[int] = Field(default=None, ge=0)
    tds_rate: Optional[float] = Field(default=None, ge=0, le=100)
    tds_applicable: bool = False
    contact_person: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
