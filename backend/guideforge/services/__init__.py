"""Services module.

This module provides the service layer architecture:
- exceptions: Custom service exceptions
- manuals: Manual, step and image lifecycle, ownership and step ordering
- users: Accounts, authentication and profiles
- storage: Blob stores for uploaded files
- pagination: Page bounds for list endpoints
"""
