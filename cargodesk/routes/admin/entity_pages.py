"""
CargoDesk - Entity Page Declarations

Per-module declarations driving the generic list, form, detail and delete
pages: table columns, form fields, detail rows, form models and create-form
defaults.
"""

from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, List, Optional, Tuple, Type, Union

from markupsafe import Markup

from cargodesk.api.resources import RESOURCES, ResourceDefinition
from cargodesk.data_table import Column
from cargodesk.models.auth import UserRole
from cargodesk.models.forms import (
    EntityForm,
    CarrierForm, CityForm, CommodityForm, CountryForm, PartyForm, PortAirportForm,
    JobForm, MasterAwbForm, HouseAwbForm,
    UserCreateForm, UserUpdateForm,
    CarrierType, PartyType, PortOrAirportType
)
from cargodesk.models.forms.documents import AWB_STATUSES, JOB_STATUSES
from cargodesk.numbering import GenerateHouseAwbNumber, GenerateJobNumber, GenerateMasterAwbNumber
from cargodesk.role_gate import RoleGate

NOT_AVAILABLE = "N/A"


@dataclass(frozen=True)
class FormField:
    """One input on a create/edit form"""
    name: str                  # submitted name; matches the form model field or alias
    label: str
    kind: str = "text"         # text, email, password, number, date, textarea, checkbox, select, lookup, items
    required: bool = False
    choices: Tuple[Tuple[str, str], ...] = ()
    lookup: Optional[str] = None   # module whose records fill a lookup dropdown
    create_only: bool = False
    placeholder: str = ""
    fields: Tuple["FormField", ...] = ()   # row fields for kind="items"


@dataclass
class EntityPage:
    """Everything the generic pages need to know about one module"""
    module: str
    create_form: Type[EntityForm]
    update_form: Type[EntityForm]
    fields: Tuple[FormField, ...]
    columns: Callable[[RoleGate], List[Column]]
    detail_fields: Tuple[Tuple[str, Union[str, Callable[[dict], str]]], ...] = ()
    default_sort: Optional[str] = None
    defaults: Callable[[], Dict[str, str]] = dict
    item_columns: Optional[Callable[[], List[Column]]] = None   # line-item table on the detail page
    status_choices: Tuple[Tuple[str, str], ...] = ()   # workflow statuses offered on the detail page

    @property
    def definition(self) -> ResourceDefinition:
        return RESOURCES[self.module]

    def FieldsFor(self, is_edit: bool) -> Tuple[FormField, ...]:
        return tuple(f for f in self.fields if not (is_edit and f.create_only))

    def DetailRows(self, record: dict) -> List[Tuple[str, str]]:
        rows = []
        for label, accessor in self.detail_fields or tuple((f.label, f.name) for f in self.fields if f.kind != "password"):
            value = accessor(record) if callable(accessor) else record.get(accessor)
            rows.append((label, NOT_AVAILABLE if value in (None, "") else str(value)))
        return rows


# ==================== Cell Helpers ====================

def _Choices(enum_type) -> Tuple[Tuple[str, str], ...]:
    return tuple((member.value, member.value.replace("_", " ").title()) for member in enum_type)


def _Plain(values) -> Tuple[Tuple[str, str], ...]:
    return tuple((value, value.title()) for value in values)


def _Related(key: str, name_key: str, code_key: Optional[str] = None) -> Callable[[dict], str]:
    """Name of a related record embedded by the backend, e.g. row["shipper"]["name"]"""
    def Cell(row: dict) -> str:
        related = row.get(key)
        if not isinstance(related, dict) or not related.get(name_key):
            return NOT_AVAILABLE
        if code_key and related.get(code_key):
            return f"{related[name_key]} ({related[code_key]})"
        return str(related[name_key])
    return Cell


def _Badge(key: str) -> Callable[[dict], Markup]:
    def Cell(row: dict) -> Markup:
        value = row.get(key)
        if value in (None, ""):
            return Markup(NOT_AVAILABLE)
        return Markup('<span class="badge badge-{0}">{1}</span>').format(str(value).lower(), value)
    return Cell


def _Active(row: dict) -> Markup:
    if row.get("is_active", True):
        return Markup('<span class="badge badge-active">Active</span>')
    return Markup('<span class="badge badge-inactive">Inactive</span>')


def _Date(key: str) -> Callable[[dict], str]:
    def Cell(row: dict) -> str:
        value = row.get(key)
        return str(value)[:10] if value else NOT_AVAILABLE
    return Cell


def _DetailLink(module: str, key: str) -> Callable[[dict], Markup]:
    id_field = RESOURCES[module].id_field

    def Cell(row: dict) -> Markup:
        return Markup('<a class="record-link" href="/admin/{0}/{1}">{2}</a>').format(
            module, row.get(id_field, ""), row.get(key) or NOT_AVAILABLE
        )
    return Cell


def ActionsColumn(module: str, gate: RoleGate) -> Column:
    """View, edit and delete links, each shown only when the role allows it"""
    definition = RESOURCES[module]

    def Cell(row: dict) -> Markup:
        record_id = row.get(definition.id_field, "")
        links = []
        if gate.Allows(module, "read"):
            links.append(Markup('<a href="/admin/{0}/{1}" title="View">View</a>').format(module, record_id))
        if gate.Allows(module, "update"):
            links.append(Markup('<a href="/admin/{0}/{1}/edit" title="Edit">Edit</a>').format(module, record_id))
        if gate.Allows(module, "delete"):
            links.append(Markup('<a class="danger" href="/admin/{0}/{1}/delete" title="Delete">Delete</a>').format(module, record_id))
        return Markup(" ").join(links)

    return Column(key="actions", header="Actions", cell=Cell, width="160px")


# ==================== Column Factories ====================

def CountryColumns(gate: RoleGate) -> List[Column]:
    return [
        Column("country_name", "Country", sortable=True),
        Column("country_code", "Code", cell=_Badge("country_code"), sortable=True),
        Column("capital", "Capital", sortable=True),
        Column("currency", "Currency"),
        Column("language", "Language"),
        Column("is_active", "Status", cell=_Active),
        ActionsColumn("countries", gate),
    ]


def CityColumns(gate: RoleGate) -> List[Column]:
    return [
        Column("city_name", "City", sortable=True),
        Column("city_code", "Code", cell=_Badge("city_code"), sortable=True),
        Column("country", "Country", cell=_Related("country", "country_name")),
        Column("is_active", "Status", cell=_Active),
        ActionsColumn("cities", gate),
    ]


def PortAirportColumns(gate: RoleGate) -> List[Column]:
    return [
        Column("port_name", "Port/Airport", sortable=True),
        Column("port_code", "Code", cell=_Badge("port_code"), sortable=True),
        Column("type", "Type", cell=_Badge("type"), sortable=True),
        Column("city", "City", cell=_Related("city", "city_name")),
        Column("is_active", "Status", cell=_Active),
        ActionsColumn("ports-airports", gate),
    ]


def CarrierColumns(gate: RoleGate) -> List[Column]:
    return [
        Column("carrier_name", "Carrier", sortable=True),
        Column("carrier_code", "Code", cell=_Badge("carrier_code"), sortable=True),
        Column("type", "Type", cell=_Badge("type"), sortable=True),
        Column("is_active", "Status", cell=_Active),
        ActionsColumn("carriers", gate),
    ]


def CommodityColumns(gate: RoleGate) -> List[Column]:
    return [
        Column("commodity_name", "Commodity", sortable=True),
        Column("commodity_code", "Code", cell=_Badge("commodity_code"), sortable=True),
        Column("category", "Category", sortable=True),
        Column("is_active", "Status", cell=_Active),
        ActionsColumn("commodities", gate),
    ]


def PartyColumns(gate: RoleGate) -> List[Column]:
    return [
        Column("name", "Name", sortable=True),
        Column("type", "Type", cell=_Badge("type"), sortable=True),
        Column("contact_person", "Contact", sortable=True),
        Column("credit_limit", "Credit Limit", sortable=True),
        Column("is_active", "Status", cell=_Active),
        ActionsColumn("parties", gate),
    ]


def JobColumns(gate: RoleGate) -> List[Column]:
    return [
        Column("job_number", "Job Number", cell=_DetailLink("jobs", "job_number")),
        Column("job_type", "Type", cell=_Badge("job_type")),
        Column("shipper", "Shipper", cell=_Related("shipper", "name")),
        Column("consignee", "Consignee", cell=_Related("consignee", "name")),
        Column("carrier", "Carrier", cell=_Related("carrier", "carrier_name")),
        Column("origin_port", "Origin", cell=_Related("origin_port", "port_name", "port_code")),
        Column("destination_port", "Destination", cell=_Related("destination_port", "port_name", "port_code")),
        Column("job_date", "Date", cell=_Date("job_date")),
        Column("status", "Status", cell=_Badge("status")),
        ActionsColumn("jobs", gate),
    ]


def MasterAwbColumns(gate: RoleGate) -> List[Column]:
    return [
        Column("master_number", "Master AWB Number", cell=_DetailLink("master-awbs", "master_number"), sortable=True),
        Column("job", "Job Number", cell=_Related("job", "job_number")),
        Column("carrier", "Carrier", cell=_Related("carrier", "carrier_name")),
        Column("issue_date", "Issue Date", cell=_Date("issue_date"), sortable=True),
        Column("status", "Status", cell=_Badge("status"), sortable=True),
        ActionsColumn("master-awbs", gate),
    ]


def HouseAwbColumns(gate: RoleGate) -> List[Column]:
    return [
        Column("house_number", "House AWB Number", cell=_DetailLink("house-awbs", "house_number"), sortable=True),
        Column("job", "Job Number", cell=_Related("job", "job_number")),
        Column("shipper", "Shipper", cell=_Related("shipper", "name")),
        Column("consignee", "Consignee", cell=_Related("consignee", "name")),
        Column("master", "Master AWB", cell=_Related("master", "master_number")),
        Column("issue_date", "Issue Date", cell=_Date("issue_date"), sortable=True),
        Column("status", "Status", cell=_Badge("status"), sortable=True),
        Column("items", "Items", cell=lambda row: str(len(row.get("items") or []))),
        ActionsColumn("house-awbs", gate),
    ]


def UserColumns(gate: RoleGate) -> List[Column]:
    def Name(row: dict) -> str:
        return " ".join(part for part in (row.get("firstName"), row.get("lastName")) if part) or NOT_AVAILABLE

    return [
        Column("name", "Name", cell=Name),
        Column("email", "Email"),
        Column("role", "Role", cell=_Badge("role")),
        Column("status", "Status", cell=_Badge("status")),
        Column("lastLoginAt", "Last Login", cell=_Date("lastLoginAt")),
        ActionsColumn("users", gate),
    ]


def HouseAwbItemColumns() -> List[Column]:
    """Columns of the line-item table on the house AWB detail page"""
    return [
        Column("description", "Description", sortable=True),
        Column("commodity", "Commodity", cell=_Related("commodity", "commodity_name")),
        Column("quantity", "Quantity", sortable=True),
        Column("unit", "Unit"),
        Column("weight", "Weight", sortable=True),
        Column("volume", "Volume"),
        Column("package_count", "Packages"),
        Column("value", "Value"),
        Column("currency", "Currency"),
    ]


# ==================== Page Declarations ====================

_ITEM_FIELDS = (
    FormField("commodity_id", "Commodity", kind="lookup", lookup="commodities", required=True),
    FormField("description", "Description", required=True),
    FormField("quantity", "Quantity", required=True),
    FormField("unit", "Unit", required=True, placeholder="KG, PCS..."),
    FormField("weight", "Weight"),
    FormField("volume", "Volume"),
    FormField("package_count", "Packages", kind="number"),
    FormField("package_type", "Package Type"),
    FormField("value", "Value"),
    FormField("currency", "Currency"),
)


ENTITY_PAGES: Dict[str, EntityPage] = {
    page.module: page for page in (
        EntityPage(
            module="countries",
            create_form=CountryForm,
            update_form=CountryForm,
            fields=(
                FormField("country_name", "Country Name", required=True),
                FormField("country_code", "Country Code", required=True, placeholder="IND"),
                FormField("capital", "Capital"),
                FormField("currency", "Currency"),
                FormField("language", "Language"),
            ),
            columns=CountryColumns,
            default_sort="country_name",
        ),
        EntityPage(
            module="cities",
            create_form=CityForm,
            update_form=CityForm,
            fields=(
                FormField("city_name", "City Name", required=True),
                FormField("city_code", "City Code", required=True),
                FormField("country_id", "Country", kind="lookup", lookup="countries", required=True),
            ),
            columns=CityColumns,
            detail_fields=(
                ("City Name", "city_name"),
                ("City Code", "city_code"),
                ("Country", _Related("country", "country_name")),
            ),
            default_sort="city_name",
        ),
        EntityPage(
            module="ports-airports",
            create_form=PortAirportForm,
            update_form=PortAirportForm,
            fields=(
                FormField("port_name", "Port/Airport Name", required=True),
                FormField("port_code", "Code", required=True),
                FormField("type", "Type", kind="select", choices=_Choices(PortOrAirportType), required=True),
                FormField("city_id", "City", kind="lookup", lookup="cities", required=True),
            ),
            columns=PortAirportColumns,
            detail_fields=(
                ("Name", "port_name"),
                ("Code", "port_code"),
                ("Type", "type"),
                ("City", _Related("city", "city_name")),
            ),
            default_sort="port_name",
        ),
        EntityPage(
            module="carriers",
            create_form=CarrierForm,
            update_form=CarrierForm,
            fields=(
                FormField("carrier_name", "Carrier Name", required=True),
                FormField("carrier_code", "Carrier Code", required=True),
                FormField("type", "Type", kind="select", choices=_Choices(CarrierType), required=True),
                FormField("contact_person", "Contact Person"),
                FormField("email", "Email", kind="email"),
                FormField("phone", "Phone"),
            ),
            columns=CarrierColumns,
            default_sort="carrier_name",
        ),
        EntityPage(
            module="commodities",
            create_form=CommodityForm,
            update_form=CommodityForm,
            fields=(
                FormField("commodity_name", "Commodity Name", required=True),
                FormField("commodity_code", "Commodity Code", required=True),
                FormField("category", "Category"),
            ),
            columns=CommodityColumns,
            default_sort="commodity_name",
        ),
        EntityPage(
            module="parties",
            create_form=PartyForm,
            update_form=PartyForm,
            fields=(
                FormField("name", "Name", required=True),
                FormField("short_name", "Short Name"),
                FormField("type", "Type", kind="select", choices=_Choices(PartyType), required=True),
                FormField("billing_address", "Billing Address", kind="textarea"),
                FormField("corporate_address", "Corporate Address", kind="textarea"),
                FormField("credit_limit", "Credit Limit", kind="number"),
                FormField("credit_days", "Credit Days", kind="number"),
                FormField("tds_rate", "TDS Rate (%)", kind="number"),
                FormField("tds_applicable", "TDS Applicable", kind="checkbox"),
                FormField("contact_person", "Contact Person"),
                FormField("phone", "Phone"),
                FormField("email", "Email", kind="email"),
            ),
            columns=PartyColumns,
            default_sort="name",
        ),
        EntityPage(
            module="jobs",
            create_form=JobForm,
            update_form=JobForm,
            fields=(
                FormField("job_number", "Job Number", required=True),
                FormField("job_type", "Job Type", kind="select", choices=_Plain(("export", "import")), required=True),
                FormField("job_date", "Job Date", kind="date", required=True),
                FormField("shipper_id", "Shipper", kind="lookup", lookup="parties", required=True),
                FormField("consignee_id", "Consignee", kind="lookup", lookup="parties", required=True),
                FormField("notify_party_id", "Notify Party", kind="lookup", lookup="parties"),
                FormField("carrier_id", "Carrier", kind="lookup", lookup="carriers", required=True),
                FormField("origin_port_id", "Origin", kind="lookup", lookup="ports-airports", required=True),
                FormField("destination_port_id", "Destination", kind="lookup", lookup="ports-airports", required=True),
                FormField("loading_port_id", "Port of Loading", kind="lookup", lookup="ports-airports"),
                FormField("discharge_port_id", "Port of Discharge", kind="lookup", lookup="ports-airports"),
                FormField("status", "Status", kind="select", choices=_Plain(JOB_STATUSES)),
                FormField("gross_weight", "Gross Weight", kind="number"),
                FormField("chargeable_weight", "Chargeable Weight", kind="number"),
                FormField("package_count", "Packages", kind="number"),
                FormField("etd", "ETD", kind="date"),
                FormField("eta", "ETA", kind="date"),
            ),
            columns=JobColumns,
            detail_fields=(
                ("Job Number", "job_number"),
                ("Type", "job_type"),
                ("Date", _Date("job_date")),
                ("Status", "status"),
                ("Shipper", _Related("shipper", "name")),
                ("Consignee", _Related("consignee", "name")),
                ("Notify Party", _Related("notify_party", "name")),
                ("Carrier", _Related("carrier", "carrier_name")),
                ("Origin", _Related("origin_port", "port_name", "port_code")),
                ("Destination", _Related("destination_port", "port_name", "port_code")),
                ("Gross Weight", "gross_weight"),
                ("Chargeable Weight", "chargeable_weight"),
                ("Packages", "package_count"),
                ("ETD", _Date("etd")),
                ("ETA", _Date("eta")),
            ),
            defaults=lambda: {"job_number": GenerateJobNumber(), "job_date": date.today().isoformat(), "status": "open"},
            status_choices=_Plain(JOB_STATUSES),
        ),
        EntityPage(
            module="master-awbs",
            create_form=MasterAwbForm,
            update_form=MasterAwbForm,
            fields=(
                FormField("master_number", "Master AWB Number", required=True),
                FormField("job_id", "Job", kind="lookup", lookup="jobs", required=True),
                FormField("carrier_id", "Carrier", kind="lookup", lookup="carriers", required=True),
                FormField("issue_date", "Issue Date", kind="date", required=True),
                FormField("status", "Status", kind="select", choices=_Plain(AWB_STATUSES)),
            ),
            columns=MasterAwbColumns,
            detail_fields=(
                ("Master AWB Number", "master_number"),
                ("Job Number", _Related("job", "job_number")),
                ("Carrier", _Related("carrier", "carrier_name")),
                ("Issue Date", _Date("issue_date")),
                ("Status", "status"),
            ),
            default_sort="master_number",
            defaults=lambda: {"master_number": GenerateMasterAwbNumber(), "issue_date": date.today().isoformat(), "status": "draft"},
        ),
        EntityPage(
            module="house-awbs",
            create_form=HouseAwbForm,
            update_form=HouseAwbForm,
            fields=(
                FormField("house_number", "House AWB Number", required=True),
                FormField("job_id", "Job", kind="lookup", lookup="jobs", required=True),
                FormField("master_id", "Master AWB", kind="lookup", lookup="master-awbs"),
                FormField("shipper_id", "Shipper", kind="lookup", lookup="parties", required=True),
                FormField("consignee_id", "Consignee", kind="lookup", lookup="parties", required=True),
                FormField("issue_date", "Issue Date", kind="date", required=True),
                FormField("status", "Status", kind="select", choices=_Plain(AWB_STATUSES)),
                FormField("items", "Items", kind="items", fields=_ITEM_FIELDS),
            ),
            columns=HouseAwbColumns,
            detail_fields=(
                ("House AWB Number", "house_number"),
                ("Job Number", _Related("job", "job_number")),
                ("Master AWB", _Related("master", "master_number")),
                ("Shipper", _Related("shipper", "name")),
                ("Consignee", _Related("consignee", "name")),
                ("Issue Date", _Date("issue_date")),
                ("Status", "status"),
            ),
            default_sort="house_number",
            defaults=lambda: {"house_number": GenerateHouseAwbNumber(), "issue_date": date.today().isoformat(), "status": "draft"},
            item_columns=HouseAwbItemColumns,
        ),
        EntityPage(
            module="users",
            create_form=UserCreateForm,
            update_form=UserUpdateForm,
            fields=(
                FormField("email", "Email", kind="email", required=True),
                FormField("password", "Password", kind="password", required=True, create_only=True),
                FormField("firstName", "First Name", required=True),
                FormField("lastName", "Last Name", required=True),
                FormField("phone", "Phone"),
                FormField("role", "Role", kind="select", choices=_Choices(UserRole), required=True),
            ),
            columns=UserColumns,
            detail_fields=(
                ("Email", "email"),
                ("First Name", "firstName"),
                ("Last Name", "lastName"),
                ("Phone", "phone"),
                ("Role", "role"),
                ("Status", "status"),
                ("Last Login", _Date("lastLoginAt")),
            ),
        ),
    )
}
