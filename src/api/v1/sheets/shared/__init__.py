# -*- coding: utf-8 -*-
"""
Shared components for sheets API.
"""

from .schemas import (ContainerCreateSchema, ContainerUpdateSchema,
                      DeleteResponse, ProblemCreateSchema, ProblemReadSchema,
                      ProblemUpdateSchema, SectionReadSchema, SheetCreateSchema,
                      SheetReadSchema, SheetUpdateSchema, SubsectionReadSchema)

__all__ = [
    "SheetCreateSchema",
    "SheetUpdateSchema",
    "SheetReadSchema",
    "SectionReadSchema",
    "SubsectionReadSchema",
    "ContainerCreateSchema",
    "ContainerUpdateSchema",
    "ProblemCreateSchema",
    "ProblemUpdateSchema",
    "ProblemReadSchema",
    "DeleteResponse",
]
