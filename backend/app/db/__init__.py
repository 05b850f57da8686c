"""
Database module for PageCraft

Contains the template catalogue seed data.
"""
from app.db.seed_data import seed_templates, reset_templates, SAMPLE_TEMPLATES

__all__ = ["seed_templates", "reset_templates", "SAMPLE_TEMPLATES"]
