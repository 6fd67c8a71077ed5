"""Exporters - Markdown and paginated PDF renditions of an analysis result."""
import html
import io
import logging
from datetime import datetime
from typing import Optional

import fitz  # PyMuPDF

from report_engine.errors import ExportError
from report_engine.schemas import EnergyMarketAnalysis, MarketAnalysis

logger = logging.getLogger(__name__)

REPORT_BASENAME = "market_analysis_report"

PDF_CSS = """
body { font-family: sans-serif; font-size: 11px; line-height: 1.5; color: #1f2937; }
h1 { font-size: 20px; color: #1e40af; margin-bottom: 6px; }
h2 { font-size: 14px; color: #1e3a8a; border-bottom: 1px solid #e5e7eb; margin-top: 14px; }
table { border-collapse: collapse; width: 100%; }
th, td { border: 1px solid #d1d5db; padding: 3px 5px; text-align: left; }
th { background-color: #eff6ff; }
.footer { color: #6b7280; font-size: 9px; margin-top: 18px; }
"""


def export_filename(extension: str, when: Optional[datetime] = None) -> str:
    when = when or datetime.now()
    return f"{REPORT_BASENAME}_{when.strftime('%Y-%m-%d')}.{extension}"


def _bullets(items: list[str]) -> str:
    return "\n".join(f"- {item}" for item in items)


def to_markdown(result: MarketAnalysis, generated_at: Optional[datetime] = None) -> str:
    generated_at = generated_at or datetime.now()
    md = f"""
# {result.title}

## Summary
{result.summary}

## Key Insights
{_bullets(result.key_insights)}

## Strategic Recommendations
{_bullets(result.recommendations)}

## Competitor Landscape
{result.competitor_analysis}

## Future Trends
{_bullets(result.trends)}
""".strip()

    if isinstance(result, EnergyMarketAnalysis):
        if result.geopolitical_events:
            rows = "\n".join(
                f"| {e.event} | {e.region} | {e.impact} | {e.risk_level} |" for e in result.geopolitical_events
            )
            md += f"\n\n## Geopolitical Risks\n| Event | Region | Impact | Risk |\n|---|---|---|---|\n{rows}"
        if result.price_table:
            rows = "\n".join(
                f"| {p.commodity} | {p.price} | {p.unit} | {p.change} | {p.outlook} |" for p in result.price_table
            )
            md += f"\n\n## Price Table\n| Commodity | Price | Unit | Change | Outlook |\n|---|---|---|---|---|\n{rows}"
        if result.trend_predictions:
            md += "\n\n## Trend Predictions\n" + "\n".join(
                f"- **{t.horizon}** ({t.confidence}): {t.prediction}" for t in result.trend_predictions
            )

    if result.customer_strategies:
        md += "\n\n## Customer Strategies\n" + "\n\n".join(
            f"### {s.name}\n**Strategy:** {s.strategy}\n\n**Opportunity:** {s.opportunity}"
            for s in result.customer_strategies
        )

    md += f"\n\n---\n*Report generated: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}*"
    return md


def _html_list(items: list[str]) -> str:
    return "<ul>" + "".join(f"<li>{html.escape(i)}</li>" for i in items) + "</ul>"


def _html_table(headers: list[str], rows: list[list[str]]) -> str:
    head = "".join(f"<th>{html.escape(h)}</th>" for h in headers)
    body = "".join("<tr>" + "".join(f"<td>{html.escape(c)}</td>" for c in row) + "</tr>" for row in rows)
    return f"<table><tr>{head}</tr>{body}</table>"


def to_html(result: MarketAnalysis, generated_at: Optional[datetime] = None) -> str:
    generated_at = generated_at or datetime.now()
    sections = [
        f"<h1>{html.escape(result.title)}</h1>",
        f"<h2>Summary</h2><p>{html.escape(result.summary)}</p>",
        f"<h2>Key Insights</h2>{_html_list(result.key_insights)}",
        f"<h2>Strategic Recommendations</h2>{_html_list(result.recommendations)}",
        f"<h2>Competitor Landscape</h2><p>{html.escape(result.competitor_analysis)}</p>",
        f"<h2>Future Trends</h2>{_html_list(result.trends)}",
    ]
    if isinstance(result, EnergyMarketAnalysis):
        if result.geopolitical_events:
            sections.append("<h2>Geopolitical Risks</h2>" + _html_table(
                ["Event", "Region", "Impact", "Risk"],
                [[e.event, e.region, e.impact, e.risk_level] for e in result.geopolitical_events],
            ))
        if result.price_table:
            sections.append("<h2>Price Table</h2>" + _html_table(
                ["Commodity", "Price", "Unit", "Change", "Outlook"],
                [[p.commodity, p.price, p.unit, p.change, p.outlook] for p in result.price_table],
            ))
        if result.trend_predictions:
            sections.append("<h2>Trend Predictions</h2>" + _html_table(
                ["Horizon", "Prediction", "Confidence"],
                [[t.horizon, t.prediction, t.confidence] for t in result.trend_predictions],
            ))
    if result.customer_strategies:
        sections.append("<h2>Customer Strategies</h2>" + _html_table(
            ["Customer", "Strategy", "Opportunity"],
            [[s.name, s.strategy, s.opportunity] for s in result.customer_strategies],
        ))
    sections.append(f'<p class="footer">Report generated: {generated_at.strftime("%Y-%m-%d %H:%M:%S")}</p>')
    return "<html><body>" + "".join(sections) + "</body></html>"


def to_pdf(result: MarketAnalysis, generated_at: Optional[datetime] = None) -> bytes:
    """Lay the HTML rendition out over as many A4 pages as it needs."""
    try:
        story = fitz.Story(html=to_html(result, generated_at), user_css=PDF_CSS)
        buffer = io.BytesIO()
        writer = fitz.DocumentWriter(buffer)
        mediabox = fitz.paper_rect("a4")
        where = mediabox + (42, 42, -42, -42)
        more = 1
        pages = 0
        while more:
            device = writer.begin_page(mediabox)
            more, _ = story.place(where)
            story.draw(device)
            writer.end_page()
            pages += 1
        writer.close()
    except Exception as e:
        logger.exception("PDF export failed")
        raise ExportError(f"PDF could not be rendered: {e}") from e
    logger.info("Rendered analysis PDF (%d page(s))", pages)
    return buffer.getvalue()
