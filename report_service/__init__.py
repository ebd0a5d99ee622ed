"""
Report Service - Inspection report to PDF generation.

Accepts canonical inspection-report JSON over HTTP, renders it through
Playwright/Chromium against an HTML report template and returns the
resulting PDF. Previously generated PDFs can be listed from disk.
"""

__version__ = "0.1.0"
