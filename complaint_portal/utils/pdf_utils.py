"""
PDF generation utilities for analytics reports.
"""

import io
from typing import Any, Dict, List, Optional

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle


class PDFGenerator:
    """Builds simple tabular reports in memory"""

    def __init__(self, page_size=A4, margins=None):
        self.page_size = page_size
        self.margins = margins or {'top': 2*cm, 'bottom': 2*cm, 'left': 2*cm, 'right': 2*cm}
        self.styles = getSampleStyleSheet()
        self._setup_custom_styles()

    def _setup_custom_styles(self):
        """Setup custom paragraph styles"""
        self.styles.add(ParagraphStyle(
            name='ReportTitle',
            parent=self.styles['Heading1'],
            fontSize=20,
            textColor=colors.darkblue,
            spaceAfter=24,
            alignment=TA_CENTER
        ))

        self.styles.add(ParagraphStyle(
            name='ReportHeading',
            parent=self.styles['Heading2'],
            fontSize=14,
            textColor=colors.darkblue,
            spaceBefore=18,
            spaceAfter=10
        ))

        self.styles.add(ParagraphStyle(
            name='ReportNormal',
            parent=self.styles['Normal'],
            fontSize=10,
            spaceAfter=8
        ))

    def _create_document(self, buffer: io.BytesIO, title: Optional[str] = None) -> SimpleDocTemplate:
        doc = SimpleDocTemplate(
            buffer,
            pagesize=self.page_size,
            topMargin=self.margins['top'],
            bottomMargin=self.margins['bottom'],
            leftMargin=self.margins['left'],
            rightMargin=self.margins['right']
        )
        if title:
            doc.title = title
        return doc

    def generate_report(
        self,
        title: str,
        content: List[Dict[str, Any]],
        header_info: Optional[Dict[str, str]] = None,
    ) -> bytes:
        """
        Render a report and return the PDF bytes.

        ``content`` items have a ``type`` of heading, paragraph, table or
        spacer; tables carry ``headers`` and ``data`` rows.
        """
        buffer = io.BytesIO()
        doc = self._create_document(buffer, title=title)
        story = [Paragraph(title, self.styles['ReportTitle'])]

        if header_info:
            for key, value in header_info.items():
                story.append(Paragraph(f"<b>{key}:</b> {value}", self.styles['ReportNormal']))
            story.append(Spacer(1, 12))

        for item in content:
            kind = item.get('type')
            if kind == 'heading':
                story.append(Paragraph(item['text'], self.styles['ReportHeading']))
            elif kind == 'paragraph':
                story.append(Paragraph(item['text'], self.styles['ReportNormal']))
            elif kind == 'table':
                story.append(self._create_table(item['data'], item.get('headers')))
            elif kind == 'spacer':
                story.append(Spacer(1, item.get('height', 12)))

        doc.build(story)
        return buffer.getvalue()

    def _create_table(self, data: List[List[Any]], headers: Optional[List[str]] = None) -> Table:
        """Create a formatted table"""
        table_data = []
        if headers:
            table_data.append(headers)
        table_data.extend([[str(cell) for cell in row] for row in data])
        if not table_data:
            table_data.append(["No data"])

        table = Table(table_data, hAlign='LEFT')

        style = [
            ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
            ('FONTSIZE', (0, 0), (-1, -1), 10),
        ]
        if headers:
            style.extend([
                ('BACKGROUND', (0, 0), (-1, 0), colors.darkblue),
                ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
                ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
                ('BOTTOMPADDING', (0, 0), (-1, 0), 8),
            ])
        table.setStyle(TableStyle(style))
        return table
