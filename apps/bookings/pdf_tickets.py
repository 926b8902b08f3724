"""
PDF tickets attached to booking confirmation emails.

One page section per ticket with the attendee and a QR code that opens the
organizer check-in page, followed by a payment summary.
"""

from io import BytesIO

from django.utils import timezone
from django.utils.html import escape
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Image, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from core.utils import generate_qr_code_png

BRAND_BLUE = colors.HexColor('#3b82f6')
QR_SIZE = 85


def booking_reference(booking):
    return str(booking.id).replace('-', '')[-8:].upper()


def _ticket_block(row, index, qr_payload, styles):
    details = [
        Paragraph(f"<b>Ticket #{index}: {escape(row['ticket_number'])}</b>", styles['Normal']),
        Paragraph(f"<b>Attendee:</b> {escape(row['attendee_name'] or 'Guest')}", styles['Normal']),
    ]
    if row['attendee_email']:
        details.append(Paragraph(f"<b>Email:</b> {escape(row['attendee_email'])}", styles['Normal']))

    qr_image = Image(BytesIO(generate_qr_code_png(qr_payload)), width=QR_SIZE, height=QR_SIZE)
    block = Table([[details, qr_image]], colWidths=[380, QR_SIZE + 20])
    block.setStyle(TableStyle([
        ('BOX', (0, 0), (-1, -1), 2, BRAND_BLUE),
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ('ALIGN', (1, 0), (1, 0), 'CENTER'),
        ('TOPPADDING', (0, 0), (-1, -1), 10),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 10),
    ]))
    return block


def generate_ticket_pdf(booking, rows, qr_payload_for):
    """
    Render `rows` (ticket rows from the email sender) into an A4 PDF.

    `qr_payload_for(ticket_number)` returns the text encoded in each QR code.
    Returns the PDF bytes.
    """
    event = booking.event
    styles = getSampleStyleSheet()
    buffer = BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4, title=f"Tickets - {event.title}")

    local_date = timezone.localtime(event.date) if timezone.is_aware(event.date) else event.date
    story = [
        Paragraph('GetTogether', styles['Title']),
        Paragraph('Event Ticket', styles['Heading3']),
        Spacer(1, 12),
    ]

    event_table = Table([
        ['Event:', event.title],
        ['Date:', local_date.strftime('%B %d, %Y at %I:%M %p')],
        ['Location:', event.location],
        ['Organizer:', getattr(event.organizer, 'organization_name', '') or 'GetTogether'],
        ['Booking Reference:', booking_reference(booking)],
    ], colWidths=[120, 360])
    event_table.setStyle(TableStyle([
        ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
        ('TEXTCOLOR', (0, 0), (0, -1), colors.HexColor('#4b5563')),
        ('FONTSIZE', (0, 0), (-1, -1), 10),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 6),
    ]))
    story += [event_table, Spacer(1, 20), Paragraph('Your Tickets', styles['Heading2'])]

    for index, row in enumerate(rows, start=1):
        story.append(_ticket_block(row, index, qr_payload_for(row['ticket_number']), styles))
        story.append(Spacer(1, 14))

    summary = Table([
        ['Number of tickets:', str(len(rows))],
        ['Price per ticket:', f"Rs {event.price}"],
        ['Total paid:', f"Rs {booking.total_price}"],
    ], colWidths=[120, 360])
    summary.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, -1), colors.HexColor('#f3f4f6')),
        ('FONTNAME', (0, 2), (-1, 2), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 10),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 6),
    ]))
    story += [
        Paragraph('Payment Summary', styles['Heading2']),
        summary,
        Spacer(1, 16),
        Paragraph('Please present the QR code at the venue entrance.', styles['Italic']),
    ]

    doc.build(story)
    return buffer.getvalue()
