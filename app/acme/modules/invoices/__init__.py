"""
Invoices module.

Scope:
- Invoices listing joined with customer details (search + pagination)
- Create / edit / delete through form-post mutation handlers
- Amounts are entered in dollars and stored as integer cents
"""
