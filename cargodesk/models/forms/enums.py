"""
CargoDesk - Master Data Enums

Enumerated types used by master data forms.
"""

from enum import Enum


class PartyType(str, Enum):
    CONSIGNEE = "consignee"
    SHIPPER = "shipper"
    CARRIER = "carrier"
    VENDOR = "vendor"


class CarrierType(str, Enum):
    AIRLINE = "airline"
    SHIPPING_LINE = "shipping_line"
    TRUCKING = "trucking"
    RAILWAY = "railway"


class PortOrAirportType(str, Enum):
    PORT = "port"
    AIRPORT = "airport"
