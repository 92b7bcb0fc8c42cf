"""
CargoDesk - Logistics Document Form Models

Validation rules for jobs, master air waybills and house air waybills.
"""

from datetime import date
from typing import List, Literal, Optional

from pydantic import Field

from cargodesk.models.forms.base import EntityForm

JOB_STATUSES = ("open", "invoiced", "closed")
AWB_STATUSES = ("draft", "issued", "cancelled")


class JobForm(EntityForm):
    """Create/update form for a job"""
    job_number: str = Field(min_length=1)
    job_type: Literal["export", "import"]
    shipper_id: str = Field(min_length=1)
    consignee_id: str = Field(min_length=1)
    notify_party_id: Optional[str] = None
    carrier_id: str = Field(min_length=1)
    origin_port_id: str = Field(min_length=1)
    destination_port_id: str = Field(min_length=1)
    loading_port_id: Optional[str] = None
    discharge_port_id: Optional[str] = None
    sales_person_id: Optional[str] = None
    job_date: date
    status: Literal["open", "invoiced", "closed"] = "open"
    gross_weight: Optional[float] = Field(default=None, ge=0)
    chargeable_weight: Optional[float] = Field(default=None, ge=0)
    package_count: Optional[int] = Field(default=None, ge=0)
    eta: Optional[date] = None
    etd: Optional[date] = None


class JobStatusForm(EntityForm):
    """Status transition request for a job"""
    status: Literal["open", "invoiced", "closed"]


class MasterAwbForm(EntityForm):
    """Create/update form for a master air waybill"""
    master_number: str = Field(min_length=1)
    job_id: str = Field(min_length=1)
    carrier_id: str = Field(min_length=1)
    issue_date: date
    status: Literal["draft", "issued", "cancelled"] = "draft"


class HouseAwbItemForm(EntityForm):
    """One cargo line on a house air waybill"""
    commodity_id: str = Field(min_length=1)
    description: str = Field(min_length=1)
    quantity: str = Field(min_length=1)
    unit: str = Field(min_length=1)
    volume: Optional[str] = None
    weight: Optional[str] = None
    package_count: Optional[int] = Field(default=None, ge=0)
    package_type: Optional[str] = None
    value: Optional[str] = None
    currency: Optional[str] = None


class HouseAwbForm(EntityForm):
    """Create/update form for a house air waybill"""
    house_number: str = Field(min_length=1)
    job_id: str = Field(min_length=1)
    shipper_id: str = Field(min_length=1)
    consignee_id: str = Field(min_length=1)
    master_id: Optional[str] = None
    issue_date: date
    status: Literal["draft", "issued", "cancelled"] = "draft"
    items: List[HouseAwbItemForm] = []
