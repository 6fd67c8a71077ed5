"""Report Engine Data Model"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model: camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PreviewCategory(str, Enum):
    IMAGE = "image"
    PDF = "pdf"
    TEXT = "text"
    UNSUPPORTED = "unsupported"


class SortField(str, Enum):
    NAME = "name"
    SIZE = "size"
    UPLOAD_DATE = "uploadDate"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class AnalysisVariant(str, Enum):
    GENERAL = "general"
    ENERGY = "energy"
    CUSTOMER = "customer"


class FileRecord(CamelModel):
    id: str
    name: str
    size: int
    type: str
    upload_date: int = Field(..., description="Milliseconds since epoch")
    content: Optional[str] = None
    preview_url: Optional[str] = None
    # Transient reference, never persisted
    blob_url: Optional[str] = None
    preview_type: PreviewCategory

    def to_storage(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude={"blob_url"})

    def to_summary(self) -> dict:
        """Listing shape: everything but the (possibly large) payload fields."""
        return self.model_dump(mode="json", by_alias=True, exclude={"content", "preview_url"})


class CustomerRecord(CamelModel):
    id: str
    name: str
    equipment: str = ""
    capacity: str = ""
    raw_materials: str = ""
    products: str = ""
    gross_margin: float = Field(0.0, allow_inf_nan=False, description="Gross margin (%)")


class CustomerFields(CamelModel):
    name: str = Field(..., min_length=1)
    equipment: str = ""
    capacity: str = ""
    raw_materials: str = ""
    products: str = ""
    gross_margin: float = Field(0.0, allow_inf_nan=False)


class IngestionFailure(BaseModel):
    name: str
    reason: str


class CustomerStrategy(CamelModel):
    name: str = ""
    strategy: str = ""
    opportunity: str = ""


class GeopoliticalEvent(CamelModel):
    event: str = ""
    region: str = ""
    impact: str = ""
    risk_level: str = ""


class PriceEntry(CamelModel):
    commodity: str = ""
    price: str = ""
    unit: str = ""
    change: str = ""
    outlook: str = ""


class TrendPrediction(CamelModel):
    horizon: str = ""
    prediction: str = ""
    confidence: str = ""


class MarketAnalysis(CamelModel):
    title: str = ""
    summary: str = ""
    key_insights: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    competitor_analysis: str = ""
    trends: list[str] = Field(default_factory=list)
    customer_strategies: Optional[list[CustomerStrategy]] = None


class EnergyMarketAnalysis(MarketAnalysis):
    geopolitical_events: list[GeopoliticalEvent] = Field(default_factory=list)
    price_table: list[PriceEntry] = Field(default_factory=list)
    trend_predictions: list[TrendPrediction] = Field(default_factory=list)


class CustomerMarketAnalysis(MarketAnalysis):
    customer_strategies: list[CustomerStrategy] = Field(default_factory=list)


RESULT_MODELS: dict[AnalysisVariant, type[MarketAnalysis]] = {
    AnalysisVariant.GENERAL: MarketAnalysis,
    AnalysisVariant.ENERGY: EnergyMarketAnalysis,
    AnalysisVariant.CUSTOMER: CustomerMarketAnalysis,
}
