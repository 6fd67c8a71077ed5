"""JSON Serialization Helpers - API shapes for records and results"""
from typing import Any, Dict, Optional

from report_engine.schemas import AnalysisVariant, CustomerRecord, FileRecord, MarketAnalysis


def file_to_dict(record: FileRecord, selected: bool = False) -> Dict[str, Any]:
    """
    Listing shape of a FileRecord: camelCase fields without the content
    payloads, plus the record's selection state.
    """
    data = record.to_summary()
    data["selected"] = selected
    return data


def customer_to_dict(customer: CustomerRecord, selected: bool = False) -> Dict[str, Any]:
    data = customer.model_dump(mode="json", by_alias=True)
    data["selected"] = selected
    return data


def analysis_to_dict(result: MarketAnalysis, variant: Optional[AnalysisVariant]) -> Dict[str, Any]:
    """Result fields by alias; optional sections the variant does not produce are omitted."""
    return {
        "variant": variant.value if variant else None,
        "result": result.model_dump(mode="json", by_alias=True, exclude_none=True),
    }
