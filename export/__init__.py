"""Export-Modul: Excel (openpyxl), PDF (fpdf2) und Terminal-Raster für den Jadwal."""

from export.excel_export import ExcelExporter, export_excel
from export.pdf_export import PdfExporter

__all__ = ["ExcelExporter", "PdfExporter", "export_excel"]
