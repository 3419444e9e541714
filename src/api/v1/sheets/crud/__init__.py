# -*- coding: utf-8 -*-
"""
CRUD операции для листов.
"""

from .sheets import router as sheets_router

__all__ = ["sheets_router"]
