"""
Dashboard views over the restaurants table.

Responsibilities:
- Define the closed set of view kinds the dashboard requests.
- Compose the row filter for a view from resolved country variants.
- Run one aggregation entry point that shapes each view's result.
"""
