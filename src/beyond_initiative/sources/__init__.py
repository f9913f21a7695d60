"""
Character sources.

Currently supports:
- D&D Beyond (via the character service, or a local JSON export)
"""
