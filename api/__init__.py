"""
EcoEngine REST API.

Provides DRF ViewSets for:
- Commodity (full CRUD)
- Cookbook (full CRUD + pantry and analysis actions)
- Recipe (full CRUD, nested under a cookbook)
"""
