"""
Modelo de dominio de `note`: enumeraciones cerradas, la nota persistida y las
estructuras de entrada (creación y actualización parcial).

Los nombres en camelCase (`isCompleted`, `createdAt`, `updatedAt`) son los del
documento en Mongo y los del JSON de la API; en Python se usan en snake_case.
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Category(str, Enum):
    GENERAL = "General"
    WORK = "Work"
    PERSONAL = "Personal"
    IDEAS = "Ideas"
    SHOPPING = "Shopping"
    HEALTH = "Health"


class Priority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


DEFAULT_CATEGORY = Category.GENERAL
DEFAULT_PRIORITY = Priority.MEDIUM


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Note(_CamelModel):
    """Nota persistida; `id` es el ObjectId serializado."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    title: str
    content: str
    category: Category = DEFAULT_CATEGORY
    priority: Priority = DEFAULT_PRIORITY
    is_completed: bool = False
    created_at: datetime
    updated_at: datetime


class NoteCreate(_CamelModel):
    """Datos crudos de creación; el servicio valida y aplica defaults."""

    title: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = None
    priority: Optional[str] = None


class NoteUpdate(_CamelModel):
    """Actualización parcial: cada campo es independiente; None = no enviado."""

    title: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = None
    priority: Optional[str] = None
    is_completed: Optional[bool] = None
