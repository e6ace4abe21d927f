"""
Customers module.

Scope:
- Customers listing with invoice totals (search by name/email)
- Create / edit / delete through form-post mutation handlers
- Delete is refused by the store while invoices reference the customer
"""
