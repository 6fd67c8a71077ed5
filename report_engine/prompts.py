"""Instruction blocks and output schemas for each analysis variant."""
import copy
import json
from typing import Any

from report_engine.schemas import AnalysisVariant, CustomerRecord

GENERAL_PROMPT = """You are a world-class market analysis expert. Read and analyze every provided file in depth (images, PDFs, Word, Excel, PowerPoint, text).
Integrate all of the information into one in-depth market analysis report.

Requirements:
1. Language: professional {language}.
2. Format: strict JSON.
3. Structure: title, summary, keyInsights, recommendations, competitorAnalysis, trends."""

ENERGY_PROMPT = """You are a senior energy and commodities market analyst. Read every provided file in depth (images, PDFs, Word, Excel, PowerPoint, text).
Produce an energy-sector market analysis that extracts hard facts from the material.

Requirements:
1. Language: professional {language}.
2. Format: strict JSON.
3. Structure: title, summary, keyInsights, recommendations, competitorAnalysis, trends,
   geopoliticalEvents (each with event, region, impact, riskLevel of Low/Medium/High),
   priceTable (each with commodity, price, unit, change, outlook; only prices stated in the files),
   trendPredictions (each with horizon, prediction, confidence of Low/Medium/High).
4. If the files contain no price data or no geopolitical events, return empty lists for those fields."""

CUSTOMER_PROMPT = """You are a world-class market analysis expert advising a sales team. Read every provided file in depth (images, PDFs, Word, Excel, PowerPoint, text)
and the customer profiles supplied below them.
Produce a market analysis report and match the market situation to each customer.

Requirements:
1. Language: professional {language}.
2. Format: strict JSON.
3. Structure: title, summary, keyInsights, recommendations, competitorAnalysis, trends,
   customerStrategies (one entry per customer profile, each with name, strategy, opportunity).
4. Base each strategy on the customer's equipment, capacity, raw materials, products and gross margin."""

_STRING = {"type": "string"}
_STRING_LIST = {"type": "array", "items": _STRING}


def _object(properties: dict[str, Any]) -> dict[str, Any]:
    return {"type": "object", "properties": properties, "required": list(properties)}


BASE_PROPERTIES = {
    "title": _STRING,
    "summary": _STRING,
    "keyInsights": _STRING_LIST,
    "recommendations": _STRING_LIST,
    "competitorAnalysis": _STRING,
    "trends": _STRING_LIST,
}

CUSTOMER_STRATEGY_SCHEMA = _object({"name": _STRING, "strategy": _STRING, "opportunity": _STRING})

ENERGY_PROPERTIES = {
    "geopoliticalEvents": {
        "type": "array",
        "items": _object({"event": _STRING, "region": _STRING, "impact": _STRING, "riskLevel": _STRING}),
    },
    "priceTable": {
        "type": "array",
        "items": _object({"commodity": _STRING, "price": _STRING, "unit": _STRING, "change": _STRING, "outlook": _STRING}),
    },
    "trendPredictions": {
        "type": "array",
        "items": _object({"horizon": _STRING, "prediction": _STRING, "confidence": _STRING}),
    },
}

OUTPUT_SCHEMAS: dict[AnalysisVariant, dict[str, Any]] = {
    AnalysisVariant.GENERAL: _object(BASE_PROPERTIES),
    AnalysisVariant.ENERGY: _object({**BASE_PROPERTIES, **ENERGY_PROPERTIES}),
    AnalysisVariant.CUSTOMER: _object({
        **BASE_PROPERTIES,
        "customerStrategies": {"type": "array", "items": CUSTOMER_STRATEGY_SCHEMA},
    }),
}

_PROMPTS = {
    AnalysisVariant.GENERAL: GENERAL_PROMPT,
    AnalysisVariant.ENERGY: ENERGY_PROMPT,
    AnalysisVariant.CUSTOMER: CUSTOMER_PROMPT,
}


def build_instructions(variant: AnalysisVariant, language: str = "English") -> str:
    return _PROMPTS[variant].format(language=language)


def output_schema(variant: AnalysisVariant) -> dict[str, Any]:
    """A fresh copy of the JSON schema the model is asked to conform to."""
    return copy.deepcopy(OUTPUT_SCHEMAS[variant])


def describe_schema(variant: AnalysisVariant) -> str:
    """Schema as text, appended to the instructions for providers that take it in-prompt too."""
    return "Output JSON schema:\n" + json.dumps(OUTPUT_SCHEMAS[variant], indent=2)


def format_customers(customers: list[CustomerRecord]) -> str:
    lines = ["Customer profiles:"]
    for c in customers:
        lines.append(
            f"- Name: {c.name}; Equipment: {c.equipment}; Capacity: {c.capacity}; "
            f"Raw materials: {c.raw_materials}; Products: {c.products}; Gross margin: {c.gross_margin}%"
        )
    return "\n".join(lines)
