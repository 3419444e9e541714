# -*- coding: utf-8 -*-
"""
Общие базовые схемы API.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Схема с camelCase-алиасами; принимает и имена полей в snake_case."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )
