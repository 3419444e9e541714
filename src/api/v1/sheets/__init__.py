# -*- coding: utf-8 -*-
"""
API листов задач.
"""

from .routes import router

__all__ = ["router"]
