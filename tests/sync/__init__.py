"""Sync engine tests.

This package contains tests for the sync protocol and the data API:
- Pull and push merge direction
- Bootstrap of an uninitialized remote
- Busy-lock exclusivity
- Optimistic writes followed by push
"""
