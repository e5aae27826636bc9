"""
Flavor Map backend.

Serves aggregate and per-row views over the restaurants table to the
map and chart dashboard.
"""
