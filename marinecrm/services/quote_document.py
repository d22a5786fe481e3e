"""
Quote document renderer.

Strategies are tried in order and each failure falls through to the next:

1. DOCX template  - a pre-authored .docx filled via docxtpl
2. DOCX generated - title, summary, items table and total built with python-docx
3. Plain text     - fixed-width table with word-wrapped descriptions (never fails)
"""
import io
import logging
import os
import re
import textwrap
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from docx import Document
from docxtpl import DocxTemplate
from pydantic import BaseModel

from marinecrm.core.config import settings
from marinecrm.schemas.quote import ProjectSnapshot, QuoteItem, QuoteOptions
from marinecrm.services.quote_items import compute_total_price
from marinecrm.services.template_filler import format_value

logger = logging.getLogger(__name__)

DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TEXT_MIME = "text/plain"

TEMPLATE_FILENAMES = ("Quote_Template.docx", "quote_template.docx")
ANTI_HEELING_TEMPLATE_FILENAMES = ("Quote_Anti-Heeling_Template.docx", "Anti-Heeling_Quote_Template.docx")

WRAP_WIDTH = 100
POS_WIDTH = 4
QTY_WIDTH = 6
UNIT_WIDTH = 5

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9\-_]")


class RenderedQuote(BaseModel):
    buffer: bytes
    filename: str
    mime_type: str


# ---------------------------------------------------------------------------
# naming and formatting
# ---------------------------------------------------------------------------

def sanitize_filename_part(value: Optional[str]) -> str:
    return _UNSAFE_FILENAME_CHARS.sub("_", value or "")


def quote_filename(project: ProjectSnapshot, ext: str, today: Optional[date] = None) -> str:
    """Quote[_Anti-Heeling][_Opp-<opp>]_<name>_<YYYY-MM-DD>.<ext>"""
    today = today or date.today()
    parts = ["Quote_Anti-Heeling" if project.is_anti_heeling else "Quote"]
    if project.opportunity_number:
        parts.append(f"Opp-{sanitize_filename_part(project.opportunity_number)}")
    parts.append(sanitize_filename_part(project.name) or "Project")
    parts.append(today.isoformat())
    return "_".join(parts) + f".{ext}"


def format_amount(value: Optional[float], currency: str) -> str:
    if value is None:
        return "on request"
    return f"{currency} {value:,.2f}"


def vessel_spec(project: ProjectSnapshot) -> str:
    parts = []
    if project.vessel_type:
        parts.append(project.vessel_type)
    if project.vessel_size is not None:
        size = format_value(project.vessel_size)
        parts.append(f"{size} {project.vessel_size_unit}" if project.vessel_size_unit else size)
    if not parts:
        return ""
    spec = " ".join(parts)
    return f"{project.number_of_vessels} x {spec}" if project.number_of_vessels else spec


def wrap_description(text: str, width: int = WRAP_WIDTH) -> List[str]:
    """Greedy word wrap; always returns at least one line."""
    lines: List[str] = []
    for paragraph in (text or "").splitlines() or [""]:
        lines.extend(textwrap.wrap(paragraph, width=width) or [""])
    return lines or [""]


def build_template_context(project: ProjectSnapshot, items: List[QuoteItem], options: QuoteOptions,
                           today: date) -> Dict[str, Any]:
    """Flattened data object bound into the .docx template placeholders."""
    total = compute_total_price(project, options.total_price)
    rows = [
        {
            "pos": index,
            "kind": item.kind,
            "qty": format_value(item.qty),
            "unit": item.unit,
            "description": item.description,
        }
        for index, item in enumerate(items, start=1)
    ]
    return {
        "date": today.isoformat(),
        "project_name": project.name,
        "project_number": project.opportunity_number or (str(project.id) if project.id else ""),
        "opportunity_number": project.opportunity_number or "",
        "project_type": project.project_type or "",
        "vessel": vessel_spec(project),
        "vessel_type": project.vessel_type or "",
        "number_of_vessels": project.number_of_vessels or 1,
        "scope_of_supply": "\n".join(
            f"{row['pos']}. {row['qty']} {row['unit']} {row['description']}" for row in rows
        ),
        "items": rows,
        "currency": project.currency,
        "price_per_vessel": format_amount(project.price_per_vessel, project.currency),
        "total_price": format_amount(total, project.currency),
        "total_price_value": total,
        "contact_name": options.contact_name or "",
        "contact_email": options.contact_email or "",
        "signature_name": options.signature_name or "",
        "signature_title": options.signature_title or "",
        "notes": options.notes or project.notes or "",
        "flow": options.flow or "",
        "shipping": options.shipping or "",
        "startup": options.startup or "",
    }


# ---------------------------------------------------------------------------
# strategies
# ---------------------------------------------------------------------------

def find_template(template_dir: Optional[str], anti_heeling: bool = False) -> Optional[str]:
    """First known template filename in the directory, else the first .docx found."""
    if not template_dir or not os.path.isdir(template_dir):
        return None
    known = (ANTI_HEELING_TEMPLATE_FILENAMES if anti_heeling else ()) + TEMPLATE_FILENAMES
    for name in known:
        path = os.path.join(template_dir, name)
        if os.path.isfile(path):
            return path
    candidates = sorted(
        f for f in os.listdir(template_dir)
        if f.lower().endswith(".docx") and not f.startswith("~$")
    )
    return os.path.join(template_dir, candidates[0]) if candidates else None


def render_docx_template(template_path: str, context: Mapping[str, Any]) -> bytes:
    tpl = DocxTemplate(template_path)
    tpl.render(dict(context))
    buf = io.BytesIO()
    tpl.save(buf)
    return buf.getvalue()


def _title(project: ProjectSnapshot) -> str:
    return "Quotation - Anti-Heeling System" if project.is_anti_heeling else "Quotation"


def render_docx_document(project: ProjectSnapshot, items: List[QuoteItem], context: Mapping[str, Any]) -> bytes:
    doc = Document()
    doc.add_heading(_title(project), level=1)

    summary = f"Project: {project.name}"
    if context["project_number"]:
        summary += f" ({context['project_number']})"
    if context["vessel"]:
        summary += f" | Vessel: {context['vessel']}"
    summary += f" | Date: {context['date']}"
    doc.add_paragraph(summary)

    table = doc.add_table(rows=1, cols=4)
    table.style = "Table Grid"
    header = table.rows[0].cells
    for cell, label in zip(header, ("Pos", "Qty", "Unit", "Description")):
        cell.text = label
    for row in context["items"]:
        cells = table.add_row().cells
        cells[0].text = str(row["pos"])
        cells[1].text = row["qty"]
        cells[2].text = row["unit"]
        cells[3].text = row["description"]

    doc.add_paragraph(f"Total price: {context['total_price']}")

    buf = io.BytesIO()
    doc.save(buf)
    return buf.getvalue()


def render_text(project: ProjectSnapshot, items: List[QuoteItem], context: Mapping[str, Any]) -> str:
    title = _title(project).upper()
    lines = [title, "=" * len(title)]
    lines.append(
        f"Project no.: {context['project_number'] or '-'}    "
        f"Vessel: {context['vessel'] or '-'}    "
        f"Date: {context['date']}"
    )
    lines.append("")

    header = f"{'Pos':<{POS_WIDTH}} {'Qty':>{QTY_WIDTH}} {'Unit':<{UNIT_WIDTH}} Description"
    lines.append(header)
    lines.append("-" * (POS_WIDTH + QTY_WIDTH + UNIT_WIDTH + 3 + WRAP_WIDTH))
    indent = " " * (POS_WIDTH + QTY_WIDTH + UNIT_WIDTH + 3)
    for row in context["items"]:
        wrapped = wrap_description(row["description"])
        lines.append(
            f"{str(row['pos']):<{POS_WIDTH}} {row['qty']:>{QTY_WIDTH}} {row['unit']:<{UNIT_WIDTH}} {wrapped[0]}"
        )
        lines.extend(indent + cont for cont in wrapped[1:])
    lines.append("")
    lines.append(f"Total price: {context['total_price']}")

    for heading, key in (("Notes", "notes"), ("Flow", "flow"), ("Shipping", "shipping"), ("Start-up", "startup")):
        if context.get(key):
            lines.append("")
            lines.append(f"{heading}:")
            lines.extend(wrap_description(context[key]))

    return "\n".join(lines) + "\n"


def render_quote(project: Any, items: Iterable[Union[QuoteItem, Mapping[str, Any]]],
                 template_data: Optional[Union[QuoteOptions, Mapping[str, Any]]] = None,
                 fmt: str = "docx", template_dir: Optional[str] = None,
                 today: Optional[date] = None) -> RenderedQuote:
    """
    Render the quote document, falling back DOCX template -> DOCX -> text.

    Args:
        project: ProjectSnapshot, plain row (dict) or ORM Project
        items: quote line items
        template_data: contact/signature/notes/flow/shipping/startup fields
        fmt: "docx" (full chain) or "txt" (plain text only)
        template_dir: directory with pre-authored templates (default: settings)
        today: document date (default: today)
    """
    project = ProjectSnapshot.coerce(project)
    items = [i if isinstance(i, QuoteItem) else QuoteItem.model_validate(i) for i in items]
    if isinstance(template_data, QuoteOptions):
        options = template_data
    else:
        options = QuoteOptions.model_validate(dict(template_data or {}))
    today = today or date.today()
    template_dir = template_dir if template_dir is not None else settings.quote_template_dir

    context = build_template_context(project, items, options, today)

    if fmt == "docx":
        try:
            path = find_template(template_dir, project.is_anti_heeling)
            if path is None:
                raise FileNotFoundError(f"no .docx quote template in {template_dir}")
            return RenderedQuote(
                buffer=render_docx_template(path, context),
                filename=quote_filename(project, "docx", today),
                mime_type=DOCX_MIME,
            )
        except Exception as e:
            logger.warning("DOCX template stage unavailable: %s", e, extra={"stage": "docx_template"})

        try:
            return RenderedQuote(
                buffer=render_docx_document(project, items, context),
                filename=quote_filename(project, "docx", today),
                mime_type=DOCX_MIME,
            )
        except Exception as e:
            logger.warning("DOCX document stage unavailable: %s", e, extra={"stage": "docx_document"})

    return RenderedQuote(
        buffer=render_text(project, items, context).encode("utf-8"),
        filename=quote_filename(project, "txt", today),
        mime_type=TEXT_MIME,
    )
