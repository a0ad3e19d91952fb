"""
Pure analysis building blocks: password entropy estimation, URL to service
identity normalization and duplicate grouping of credential entries.
None of these modules perform I/O.
"""
