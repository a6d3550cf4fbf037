"""Character sheet data models."""
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class AbilityScores(BaseModel):
    """The six D&D ability scores, keyed by their short names on the wire."""

    model_config = ConfigDict(populate_by_name=True)

    strength: Optional[int] = Field(None, alias="str")
    dexterity: Optional[int] = Field(None, alias="dex")
    constitution: Optional[int] = Field(None, alias="con")
    intelligence: Optional[int] = Field(None, alias="int")
    wisdom: Optional[int] = Field(None, alias="wis")
    charisma: Optional[int] = Field(None, alias="cha")

    @field_validator("*", mode="before")
    @classmethod
    def _blank_score(cls, value: Any) -> Any:
        return _blank_to_none(value)


class CharacterData(BaseModel):
    """Character sheet sent by the client.

    Every field is optional here; the portrait path enforces its required
    fields through the validator, and the prompt builder fills in defaults
    for whatever is left out.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    gender: Optional[str] = None
    race: Optional[str] = None
    subrace: Optional[str] = None
    character_class: Optional[str] = Field(None, alias="class")
    background: Optional[str] = None
    alignment: Optional[str] = None
    level: Optional[int] = None
    equipment: Optional[str] = None
    appearance: Optional[str] = None
    setting: Optional[str] = None
    stats: AbilityScores = Field(default_factory=AbilityScores)

    @field_validator("level", mode="before")
    @classmethod
    def _blank_level(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("stats", mode="before")
    @classmethod
    def _null_stats(cls, value: Any) -> Any:
        return {} if value is None else value

    def field_value(self, wire_name: str) -> Any:
        """Look up a field by its wire name (``class`` rather than ``character_class``)."""
        for attr, info in type(self).model_fields.items():
            if attr == wire_name or info.alias == wire_name:
                return getattr(self, attr)
        raise KeyError(wire_name)
