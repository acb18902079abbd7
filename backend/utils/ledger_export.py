import csv
import io
import logging
import os
from datetime import datetime
from typing import Optional

import pytz
from fpdf import FPDF
from fpdf.enums import XPos, YPos

from schemas.ledgers import Ledger
from utils.formatting import format_money, format_indian_currency

logger = logging.getLogger(__name__)

REPORT_TIMEZONE = os.getenv("REPORT_TIMEZONE", "Asia/Kolkata")

CSV_HEADERS = ["Date", "Type", "Reference", "Description", "Debit", "Credit", "Balance"]

# (header, width in mm, alignment); widths add up to the A4 printable width
REPORT_COLUMNS = [
    ("Date", 22, "C"),
    ("Type", 24, "C"),
    ("Reference", 24, "L"),
    ("Description", 60, "L"),
    ("Debit", 20, "R"),
    ("Credit", 20, "R"),
    ("Balance", 20, "R"),
]


def to_csv(ledger: Ledger) -> str:
    """Ledger entries as CSV text with every field quoted."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for entry in ledger.entries:
        writer.writerow([
            entry.date.strftime("%Y-%m-%d"),
            entry.type.value,
            entry.reference,
            entry.description,
            format_money(entry.debit),
            format_money(entry.credit),
            format_money(entry.balance),
        ])
    return buffer.getvalue().rstrip("\n")


def _latin1(text) -> str:
    # Core PDF fonts only cover latin-1
    return str(text).encode("latin-1", "replace").decode("latin-1")


class LedgerPDF(FPDF):
    def __init__(self, title: str):
        super().__init__(orientation="P", unit="mm", format="A4")
        self.report_title = title

    def header(self):
        self.set_font('Helvetica', 'B', 14)
        self.cell(0, 10, _latin1(self.report_title), border=0, align='C', new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.ln(2)

    def footer(self):
        self.set_y(-15)
        self.set_font('Helvetica', 'I', 8)
        self.cell(0, 10, f'Page {self.page_no()}', border=0, align='C')

    def fit(self, text: str, width: float) -> str:
        """Trim text so it fits a cell of the given width."""
        text = _latin1(text)
        if self.get_string_width(text) <= width - 2:
            return text
        while text and self.get_string_width(text + "...") > width - 2:
            text = text[:-1]
        return text + "..."


def to_report(
    ledger: Ledger,
    generated_at: Optional[datetime] = None,
    party_label: str = "Party",
    compress: bool = True,
) -> bytes:
    """
    Render the ledger as a PDF document.

    The document carries the party name, the generation timestamp, the summary
    figures and one table row per entry.
    """
    if generated_at is None:
        generated_at = datetime.now(pytz.timezone(REPORT_TIMEZONE))

    pdf = LedgerPDF(f"{party_label} Ledger Report")
    pdf.set_compression(compress)
    pdf.set_auto_page_break(auto=True, margin=20)
    pdf.add_page()

    # Party info
    pdf.set_font('Helvetica', 'B', 12)
    pdf.cell(0, 8, _latin1(f"{party_label}: {ledger.party.name}"), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_font('Helvetica', '', 10)
    if ledger.party.code:
        pdf.cell(0, 6, _latin1(f"Code: {ledger.party.code}"), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    if ledger.party.phone:
        pdf.cell(0, 6, _latin1(f"Phone: {ledger.party.phone}"), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    if ledger.party.email:
        pdf.cell(0, 6, _latin1(f"Email: {ledger.party.email}"), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.cell(0, 6, f"Generated: {generated_at.strftime('%Y-%m-%d %H:%M:%S %Z')}", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(4)

    # Summary
    summary = ledger.summary
    pdf.set_font('Helvetica', 'B', 11)
    pdf.cell(0, 8, 'Summary', new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_font('Helvetica', '', 10)
    for label, amount in (
        ("Total Orders", summary.total_orders),
        ("Total Paid", summary.total_paid),
        ("Total Adjustments", summary.total_adjustments),
        ("Current Balance", summary.current_balance),
    ):
        pdf.cell(50, 6, f"{label}:", border=0)
        pdf.cell(50, 6, format_indian_currency(amount), border=0, align='R', new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.cell(50, 6, "Transactions:", border=0)
    pdf.cell(50, 6, str(summary.total_transactions), border=0, align='R', new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(4)

    # Entries table
    pdf.set_font('Helvetica', 'B', 9)
    for header, width, _ in REPORT_COLUMNS:
        pdf.cell(width, 8, header, border=1, align='C')
    pdf.ln(8)

    pdf.set_font('Helvetica', '', 8)
    if not ledger.entries:
        pdf.cell(sum(c[1] for c in REPORT_COLUMNS), 7, "No transactions in this period", border=1, align='C',
                 new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    for entry in ledger.entries:
        values = [
            entry.date.strftime("%Y-%m-%d"),
            entry.type.value,
            entry.reference,
            entry.description,
            format_money(entry.debit),
            format_money(entry.credit),
            format_money(entry.balance),
        ]
        for (_, width, align), value in zip(REPORT_COLUMNS, values):
            pdf.cell(width, 7, pdf.fit(value, width), border=1, align=align)
        pdf.ln(7)

    logger.debug(f"Ledger PDF rendered for party {ledger.party.id} with {len(ledger.entries)} entries")
    return bytes(pdf.output())
