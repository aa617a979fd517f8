"""Product lookup service.

Read-only lookup and spreadsheet export over the ERP product catalog.
"""

__version__ = "1.0.0"
