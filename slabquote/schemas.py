from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional, List
from datetime import date
from .config import settings
from .formatters import default_validity_date
from .models import MaterialType, FinishingType, PaymentMethod

# Raw slab sides must exceed the trim allowance so net sides stay positive.
MIN_RAW_SIDE_M = 0.05


def _default_width():
    return settings.DEFAULT_WIDTH_M


def _default_height():
    return settings.DEFAULT_HEIGHT_M


def _default_measure_message():
    return settings.DEFAULT_MEASURE_MESSAGE


class Dimensions(BaseModel):
    """Raw slab size in metres, as measured before trimming."""
    model_config = ConfigDict(allow_inf_nan=False)

    width: float = Field(default_factory=_default_width, gt=MIN_RAW_SIDE_M)
    height: float = Field(default_factory=_default_height, gt=MIN_RAW_SIDE_M)

class DimensionsUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)
    width: Optional[float] = Field(None, gt=MIN_RAW_SIDE_M)
    height: Optional[float] = Field(None, gt=MIN_RAW_SIDE_M)

class BankDetails(BaseModel):
    bank: str = ""
    agency: str = ""
    account: str = ""
    cnpj: str = ""
    company_name: str = ""
    pix: str = ""

class MaterialBase(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, allow_inf_nan=False)

    name: str = Field(min_length=1)
    type: MaterialType
    finishing: FinishingType
    price_per_unit: float = Field(ge=0)
    quantity: int = Field(ge=1)
    dimensions: Dimensions = Field(default_factory=Dimensions)
    details: Optional[str] = None

class MaterialCreate(MaterialBase):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True, allow_inf_nan=False)

class Material(MaterialBase):
    id: str

class MaterialUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True, allow_inf_nan=False)

    name: Optional[str] = Field(None, min_length=1)
    type: Optional[MaterialType] = None
    finishing: Optional[FinishingType] = None
    price_per_unit: Optional[float] = Field(None, ge=0)
    quantity: Optional[int] = Field(None, ge=1)
    dimensions: Optional[DimensionsUpdate] = None
    details: Optional[str] = None

class Quotation(BaseModel):
    company: str = ""
    seller: str = ""
    client: str = ""
    created_at: date = Field(default_factory=date.today)
    valid_until: date = Field(default_factory=default_validity_date)
    materials: List[Material] = []
    payment_method: PaymentMethod = PaymentMethod.CASH
    installments: int = Field(1, ge=1)
    show_bank_details: bool = False
    bank_details: BankDetails = Field(default_factory=BankDetails)
    show_default_measure: bool = False
    default_measure_message: str = Field(default_factory=_default_measure_message)

    @model_validator(mode="after")
    def _cash_is_single_payment(self):
        if self.payment_method == PaymentMethod.CASH:
            self.installments = 1
        return self

class QuotationUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    company: Optional[str] = None
    seller: Optional[str] = None
    client: Optional[str] = None
    valid_until: Optional[date] = None
    payment_method: Optional[PaymentMethod] = None
    installments: Optional[int] = Field(None, ge=1)
    show_bank_details: Optional[bool] = None
    bank_details: Optional[BankDetails] = None
    show_default_measure: Optional[bool] = None
    default_measure_message: Optional[str] = None


# --- Read surface: computed views handed to the rendering adapters ---

class LineItemView(BaseModel):
    material: Material
    net_width: float
    net_height: float
    unit_area: float     # net m² of one slab
    area: float          # unit_area * quantity
    line_total: float

class MaterialGroup(BaseModel):
    type: MaterialType
    items: List[LineItemView] = []
    subtotal: float = 0.0
    slab_count: int = 0
    area: float = 0.0

    @property
    def label(self) -> str:
        return self.type.label

    @property
    def has_details(self) -> bool:
        return any(item.material.details for item in self.items)

class QuotationSummary(BaseModel):
    groups: List[MaterialGroup] = []
    grand_total: float = 0.0
    installments: int = 1
    installment_value: Optional[float] = None
    total_slabs: int = 0
    total_area: float = 0.0

class QuotationSnapshot(BaseModel):
    quotation: Quotation
    summary: QuotationSummary
