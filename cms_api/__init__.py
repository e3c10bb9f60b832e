"""
Optique CMS admin API.

Ordered content collections and soft-deletable records behind a FastAPI
back-office API.
"""
