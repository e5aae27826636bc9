"""
Country name resolution.

Responsibilities:
- Hold the alias table between display country names and the spellings
  stored in restaurant rows.
- Resolve a display name to its row-level variants.
- Map a row-level variant back to the display name used by boundary data.
"""
