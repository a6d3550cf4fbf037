"""Prompt construction for story and portrait generation.

Both builders are pure: the same CharacterData always yields the same
string. Missing or blank values are filled from ``DEFAULTS`` so the story
path, which has no upstream validation, never renders ``None`` into a prompt.
"""
from typing import Any, Optional

from app.models.character import AbilityScores, CharacterData

DEFAULTS: dict[str, Any] = {
    "name": "an unnamed hero",
    "gender": "unspecified",
    "race": "human",
    "subrace": "Standard",
    "class": "adventurer",
    "background": "unknown",
    "alignment": "neutral",
    "level": 1,
    "equipment": "simple traveling gear",
    "appearance": "an unremarkable traveler",
    "setting": "in a fantasy landscape",
}

DEFAULT_ABILITY_SCORE = 10

# (label, attribute) in character-sheet order
ABILITY_LABELS: tuple[tuple[str, str], ...] = (
    ("STR", "strength"),
    ("DEX", "dexterity"),
    ("CON", "constitution"),
    ("INT", "intelligence"),
    ("WIS", "wisdom"),
    ("CHA", "charisma"),
)

PORTRAIT_STYLE = (
    "Style: Photorealistic, cinematic digital painting, epic and adventurous mood, "
    "dramatic lighting, high detail, fantasy art, trending on ArtStation."
)
NO_TEXT_DIRECTIVE = "Important: Do not include any text, letters, or words in the image."


def _value(data: CharacterData, field: str) -> Any:
    value: Optional[Any] = data.field_value(field)
    if value is None or (isinstance(value, str) and not value.strip()):
        return DEFAULTS[field]
    return value.strip() if isinstance(value, str) else value


def _format_stats(stats: AbilityScores) -> str:
    scores = []
    for label, attr in ABILITY_LABELS:
        score = getattr(stats, attr)
        scores.append(f"{label}({DEFAULT_ABILITY_SCORE if score is None else score})")
    return ", ".join(scores)


def build_story_prompt(data: CharacterData) -> str:
    """Build the origin-story prompt sent to the text model."""
    char_class = _value(data, "class")
    background = _value(data, "background")
    return (
        "Write a short, compelling origin story (around 200-300 words) "
        "for a Dungeons & Dragons character.\n"
        "\n"
        "Here are the character's details:\n"
        f"- Name: {_value(data, 'name')}\n"
        f"- Gender: {_value(data, 'gender')}\n"
        f"- Race: {_value(data, 'race')} ({_value(data, 'subrace')})\n"
        f"- Class: {char_class}\n"
        f"- Background: {background}\n"
        f"- Alignment: {_value(data, 'alignment')}\n"
        f"- Stats: {_format_stats(data.stats)}\n"
        "\n"
        f"The story should hint at why they became a {char_class} and how their "
        f"{background} background shaped them. Make it engaging and give them a "
        "clear motivation for adventuring."
    )


def build_portrait_prompt(data: CharacterData) -> str:
    """Build the full-body portrait prompt sent to the image model."""
    return (
        "Full body portrait of a Dungeons & Dragons character.\n"
        "\n"
        f"The character is a level-{_value(data, 'level')} {_value(data, 'gender')} "
        f"{_value(data, 'race')} {_value(data, 'class')}.\n"
        f"They have a {str(_value(data, 'background')).lower()} background and a "
        f"{str(_value(data, 'alignment')).lower()} alignment.\n"
        "\n"
        f"Appearance and Pose: {_value(data, 'appearance')}.\n"
        "\n"
        f"Equipment: They are wearing and equipped with {_value(data, 'equipment')}.\n"
        "\n"
        f"Setting: The scene is set {_value(data, 'setting')}.\n"
        "\n"
        f"{PORTRAIT_STYLE}\n"
        "\n"
        f"{NO_TEXT_DIRECTIVE}"
    )
