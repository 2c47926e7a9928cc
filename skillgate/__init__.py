"""
SkillGate Placement Portal
Campus recruitment backend: students, companies and placement drives.

Architecture:
- MongoDB: users, drives (with embedded test questions), applications
- FastAPI: JSON REST API under /api
- JWT bearer tokens for authentication
"""

__version__ = "1.0.0"
