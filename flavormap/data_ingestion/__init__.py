"""
Offline data preparation.

Responsibilities:
- Read the raw TripAdvisor restaurants export.
- Map its columns onto the canonical restaurant columns.
- Persist the processed table the store loads at runtime.
"""
