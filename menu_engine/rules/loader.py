from pathlib import Path

import yaml
from pydantic import ValidationError

from menu_engine.rules.models import Rules


class RulesValidationError(ValueError):
    """Rules file content is not valid."""


def load_rules(path: Path) -> Rules:
    """
    Load and validate the rules file.
    Raises FileNotFoundError if file missing.
    Raises RulesValidationError if syntax or schema invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Rules file not found at: {path}")

    with open(path) as f:
        content = f.read()

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise RulesValidationError(f"Invalid YAML syntax in rules file: {e}") from e

    # An empty file means all defaults
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise RulesValidationError("Rules file must contain a mapping at the top level")

    try:
        return Rules.model_validate(data)
    except ValidationError as e:
        raise RulesValidationError(f"Rules validation failed:\n{e}") from e
