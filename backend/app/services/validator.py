"""Required-field check for portrait requests."""
from typing import Optional, Sequence

from app.core.errors import InputError
from app.core.logging import setup_logging
from app.core.result import Err, Ok, Result
from app.models.character import CharacterData

logger = setup_logging("validator")

# Checked in this order; the first violation is the one reported.
REQUIRED_PORTRAIT_FIELDS: tuple[str, ...] = ("race", "class", "equipment", "appearance", "setting")


def find_missing_field(
    data: CharacterData, fields: Sequence[str] = REQUIRED_PORTRAIT_FIELDS
) -> Optional[str]:
    """Return the first field that is absent or blank after trimming, else None."""
    for field in fields:
        value = data.field_value(field)
        if value is None or not str(value).strip():
            return field
    return None


def validate_portrait_data(data: CharacterData) -> Result[CharacterData, InputError]:
    """Gate a portrait request on its required fields."""
    field = find_missing_field(data)
    if field is None:
        return Ok(data)
    logger.warning(
        "Validation failed: field '%s' is incomplete", field, extra={"field": field}
    )
    return Err(
        InputError(
            f"Incomplete character data. Please provide a value for '{field}'.",
            field=field,
        )
    )
