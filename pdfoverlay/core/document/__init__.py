"""
Page rasterisation backed by PyMuPDF.
"""
from .pdf_reader import DocumentMetadata, PDFDocumentReader, format_pdf_date

__all__ = ['PDFDocumentReader', 'DocumentMetadata', 'format_pdf_date']
