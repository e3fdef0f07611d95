"""School administration backend package.

Organized by feature modules (classes, subjects, users, schedules, imports)
with a thin Flask controller layer over service/repository layers. The
imports module holds the spreadsheet reconciler that turns loosely typed rows
into tenant-scoped records.
"""
