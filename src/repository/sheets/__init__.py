# -*- coding: utf-8 -*-
"""
Репозитории для работы с листами задач.
"""

from .base import (create_sheet, delete_sheet, get_sheet, list_sheets,
                   update_sheet)
from .content import (add_problem, add_section, add_subsection,
                      delete_problem, delete_section, delete_subsection,
                      get_problem, get_section, get_subsection,
                      update_problem, update_section, update_subsection)

__all__ = [
    # Листы
    "list_sheets",
    "get_sheet",
    "create_sheet",
    "update_sheet",
    "delete_sheet",
    # Разделы
    "get_section",
    "add_section",
    "update_section",
    "delete_section",
    # Подразделы
    "get_subsection",
    "add_subsection",
    "update_subsection",
    "delete_subsection",
    # Задачи
    "get_problem",
    "add_problem",
    "update_problem",
    "delete_problem",
]
