# -*- coding: utf-8 -*-
"""
Вложенные ресурсы листа: разделы, подразделы и задачи.
"""

from .problems import router as problems_router
from .sections import router as sections_router

__all__ = [
    "sections_router",
    "problems_router",
]
