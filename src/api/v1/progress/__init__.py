# -*- coding: utf-8 -*-
"""
API прогресса пользователей.
"""

from .routes import router

__all__ = ["router"]
