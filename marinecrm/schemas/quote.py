from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List, Union, Any, Mapping
from datetime import datetime


class QuoteItem(BaseModel):
    """One computed line of the quote's bill of materials."""
    kind: str
    qty: Union[int, float] = Field(gt=0)
    unit: str = "pcs"
    description: str = Field(min_length=1)
    capacity: Optional[float] = None
    head: Optional[float] = None

    @field_validator("description")
    @classmethod
    def _not_blank(cls, v: str):
        if not v.strip():
            raise ValueError("description must not be blank")
        return v


class ProjectSnapshot(BaseModel):
    """
    Project fields the quote pipeline reads.

    Accepts snake_case or camelCase keys (plain rows from the store or
    payloads from the UI) and ORM objects. Numeric fields that cannot be
    parsed degrade to None instead of failing validation.
    """
    id: Optional[int] = None
    name: str = ""
    project_type: Optional[str] = None
    opportunity_number: Optional[str] = None
    currency: str = "USD"
    price_per_vessel: Optional[float] = None
    number_of_vessels: Optional[int] = None
    pumps_per_vessel: Optional[int] = None
    flow_capacity: Optional[float] = None
    flow_head: Optional[float] = None
    flow_power: Optional[float] = None
    vessel_size: Optional[float] = None
    vessel_size_unit: Optional[str] = None
    vessel_type: Optional[str] = None
    notes: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
        extra = "ignore"

    @field_validator(
        "price_per_vessel", "flow_capacity", "flow_head", "flow_power", "vessel_size",
        mode="before",
    )
    @classmethod
    def _lenient_float(cls, v: Any):
        if v is None or v == "":
            return None
        try:
            return float(v)
        except (TypeError, ValueError):
            return None

    @field_validator("number_of_vessels", "pumps_per_vessel", "id", mode="before")
    @classmethod
    def _lenient_int(cls, v: Any):
        if v is None or v == "":
            return None
        try:
            return int(float(v))
        except (TypeError, ValueError):
            return None

    @field_validator("name", "currency", mode="before")
    @classmethod
    def _not_null(cls, v: Any, info):
        if v is None:
            return "USD" if info.field_name == "currency" else ""
        return str(v)

    @field_validator(
        "project_type", "opportunity_number", "vessel_size_unit", "vessel_type", "notes",
        mode="before",
    )
    @classmethod
    def _optional_str(cls, v: Any):
        if v is None:
            return None
        return str(v)

    @classmethod
    def coerce(cls, project: Any) -> "ProjectSnapshot":
        """Build from a snapshot, a plain row (dict) or an ORM object."""
        if isinstance(project, cls):
            return project
        if project is None:
            return cls()
        if isinstance(project, Mapping):
            return cls.model_validate(dict(project))
        return cls.model_validate(project, from_attributes=True)

    @property
    def is_anti_heeling(self) -> bool:
        return (self.project_type or "").strip().lower().replace("_", "-") == "anti-heeling"


class QuoteOptions(BaseModel):
    """Free-form document fields bound into the quote alongside the items."""
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    signature_name: Optional[str] = None
    signature_title: Optional[str] = None
    notes: Optional[str] = None
    flow: Optional[str] = None
    shipping: Optional[str] = None
    startup: Optional[str] = None
    total_price: Optional[float] = None


class QuotePreviewRequest(BaseModel):
    estimate_type: str = "anti_heeling"
    items: Optional[List[QuoteItem]] = None


class QuoteGenerateRequest(QuotePreviewRequest):
    format: str = Field(default="docx", pattern="^(docx|txt)$")
    sync_line_items: bool = True
    options: QuoteOptions = QuoteOptions()


class QuotePreviewResponse(BaseModel):
    items: List[QuoteItem]
    total_price: Optional[float] = None
    currency: str


class ProjectFile(BaseModel):
    id: int
    project_id: int
    name: str
    mime_type: str
    size: int
    created_at: datetime

    class Config:
        from_attributes = True


class QuoteGenerateResponse(BaseModel):
    file: ProjectFile
    items: List[QuoteItem]
    total_price: Optional[float] = None
    currency: str
    line_items_synced: bool


class LineItemCreate(BaseModel):
    kind: str
    qty: float = Field(default=1, gt=0)
    unit: Optional[str] = "pcs"
    description: str = Field(min_length=1)
    unit_price: Optional[float] = None


class LineItem(BaseModel):
    id: int
    project_id: int
    kind: str
    qty: float
    unit: Optional[str] = None
    description: str
    unit_price: Optional[float] = None
    source: str
    created_at: datetime

    class Config:
        from_attributes = True
