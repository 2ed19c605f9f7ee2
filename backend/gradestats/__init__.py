"""
Grade statistics API: users, token auth, and per-user analysis records.
"""
