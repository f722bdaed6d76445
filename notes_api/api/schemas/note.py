"""
Esquemas de respuesta para `notes` que no son la nota misma.
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from notes_api.domain.notes import Note


class NoteDeletedOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str
    deleted_note: Note
