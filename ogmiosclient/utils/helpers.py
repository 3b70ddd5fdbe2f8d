"""Small naming helpers shared by the codec and the config loader."""

from __future__ import annotations

from pathlib import Path


def camel_to_snake(name: str) -> str:
    """Convert camelCase to snake_case."""
    result = []
    for i, char in enumerate(name):
        if char.isupper() and i > 0:
            result.append("_")
        result.append(char.lower())
    return "".join(result)


def snake_to_camel(name: str) -> str:
    """Convert snake_case to camelCase.

    Separators are dropped and the following letter is upper-cased, so a
    trailing underscore used to dodge a Python keyword disappears
    (``from_`` -> ``from``).
    """
    components = name.split("_")
    return components[0] + "".join(x[:1].upper() + x[1:] for x in components[1:])


def get_data_path() -> Path:
    """Return ``~/.ogmiosclient``, creating it on first use."""
    path = Path.home() / ".ogmiosclient"
    path.mkdir(parents=True, exist_ok=True)
    return path
