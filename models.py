# models.py
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Data Models ---
# Attribute names are English; the JSON file and the HTTP API use the
# Spanish field names as aliases.

class Task(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(gt=0)
    tag: str = Field(alias="etiqueta")
    description: str = Field(alias="descripcion")
    created_at: str = Field(alias="fecha_creacion")
    due_date: str = Field(alias="fecha_limite")
    completed: bool = Field(default=False, alias="completado")


class TaskCreate(BaseModel):
    """Body of a create request. Fields are optional so that missing values
    are reported as InvalidInput rather than as a schema error."""
    model_config = ConfigDict(populate_by_name=True)

    tag: Optional[str] = Field(default=None, alias="etiqueta")
    description: Optional[str] = Field(default=None, alias="descripcion")
    due_date: Optional[str] = Field(default=None, alias="fecha_limite")


class TaskUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tag: Optional[str] = Field(default=None, alias="etiqueta")
    description: Optional[str] = Field(default=None, alias="descripcion")
    due_date: Optional[str] = Field(default=None, alias="fecha_limite")
    completed: Optional[bool] = Field(default=None, alias="completado")

    def changes(self) -> dict:
        """Fields the caller actually supplied, skipping explicit nulls."""
        return {
            name: value
            for name, value in self.model_dump(exclude_unset=True).items()
            if value is not None
        }
