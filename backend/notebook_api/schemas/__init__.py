# Schemas package init
"""
Notebook API - API Schemas Package
==================================

What:  Pydantic models describing the fixed-shape API responses
       (insert acknowledgement, messages, errors, health).
"""
