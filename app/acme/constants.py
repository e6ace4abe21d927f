"""
Central constants for the Acme dashboard.
"""
from __future__ import annotations

# Listing paths; mutations revalidate and redirect to these.
DASHBOARD_PATH = "/dashboard"
CUSTOMERS_PATH = "/dashboard/customers"
INVOICES_PATH = "/dashboard/invoices"

# Invoices listing page size
ITEMS_PER_PAGE = 6
