# -*- coding: utf-8 -*-
"""
API управления пользователями.
"""

from .routes import router

__all__ = ["router"]
