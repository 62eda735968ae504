import io
from reportlab.lib.pagesizes import A4
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet

from basket.logic.shopping.view import ShoppingListView


def generate_pdf_for_shopping_list(view: ShoppingListView, title: str = "Shopping List"):
    """Generate a printable PDF: one table per aisle with Item / Quantity / Recipes columns."""
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf, pagesize=A4,
        rightMargin=20, leftMargin=20, topMargin=20, bottomMargin=20
    )

    styles = getSampleStyleSheet()
    elements = [
        Paragraph(title, styles["Title"]),
        Spacer(1, 12),
    ]

    if view.is_empty():
        elements.append(Paragraph("The shopping list is empty.", styles["Normal"]))
        doc.build(elements)
        return buf.getvalue()

    for aisle, items in view.aisles:
        elements.append(Paragraph(aisle, styles["Heading2"]))
        data = [["", "Item", "Quantity", "Recipes"]]
        for item in items:
            name = item.display_name
            if item.is_pantry_item:
                name += " (pantry)"
            data.append([
                "x" if item.completed else "",
                name,
                " + ".join(q.display() for q in item.quantities) or "-",
                ", ".join(item.recipes),
            ])

        table = Table(data, repeatRows=1, colWidths=[20, 200, 120, 200])
        table.setStyle(TableStyle([
            ("BACKGROUND", (0,0), (-1,0), colors.HexColor("#4CAF50")),
            ("TEXTCOLOR", (0,0), (-1,0), colors.whitesmoke),
            ("ALIGN", (0,0), (0,-1), "CENTER"),
            ("FONTNAME", (0,0), (-1,0), "Helvetica-Bold"),
            ("FONTSIZE", (0,0), (-1,0), 11),
            ("BOTTOMPADDING", (0,0), (-1,0), 8),
            ("GRID", (0,0), (-1,-1), 0.5, colors.grey),
        ]))
        elements.append(table)
        elements.append(Spacer(1, 10))

    doc.build(elements)
    return buf.getvalue()
