"""
internrank recipe system - save and rerun rankings reproducibly.

Recipes are YAML files stored in `recipes/` (or $INTERNRANK_RECIPES_DIR)
that define:
- input: The applicant CSV to rank
- top_n: How many last names the statistics list
- output: Where exports go, and in which formats
"""

import os
from datetime import datetime
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field

from .models import ExportFormat, RunConfig


class RecipeOutput(BaseModel):
    """Export settings for a recipe."""

    model_config = ConfigDict(extra="forbid")

    directory: str | None = Field(default=None, description="Export directory (none = stdout only)")
    formats: list[ExportFormat] = Field(default_factory=lambda: ["json"])


class Recipe(BaseModel):
    """A saved run configuration."""

    model_config = ConfigDict(extra="forbid")

    # Metadata
    slug: str = Field(..., min_length=1, description="Unique identifier (filename stem)")
    name: str = Field(default="", description="Human-readable name")
    description: str = Field(default="", description="What this recipe ranks")
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    # Core
    input: str = Field(..., min_length=1, description="Path to the applicant CSV")
    top_n: int = Field(default=3, ge=1, le=100)

    output: RecipeOutput = Field(default_factory=RecipeOutput)


def get_recipes_dir() -> Path:
    """Get the recipes directory path."""
    override = os.getenv("INTERNRANK_RECIPES_DIR")
    if override:
        return Path(override)
    return Path.cwd() / "recipes"


def list_recipes() -> list[Recipe]:
    """List all saved recipes, skipping files that fail to load."""
    recipes_dir = get_recipes_dir()
    if not recipes_dir.exists():
        return []

    recipes = []
    for path in recipes_dir.glob("*.yml"):
        try:
            recipes.append(load_recipe(path.stem))
        except (ValueError, yaml.YAMLError):
            continue

    return sorted(recipes, key=lambda r: r.slug)


def load_recipe(slug: str) -> Recipe:
    """Load a recipe by slug.

    Args:
        slug: The recipe slug (filename without .yml).

    Returns:
        The loaded Recipe object.

    Raises:
        FileNotFoundError: If recipe doesn't exist.
        ValueError: If recipe is invalid.
    """
    path = get_recipes_dir() / f"{slug}.yml"

    if not path.exists():
        raise FileNotFoundError(f"Recipe not found: {slug}")

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Recipe {slug} must be a YAML mapping")

    # Ensure slug matches filename
    data["slug"] = slug

    return Recipe(**data)


def save_recipe(recipe: Recipe) -> Path:
    """Save a recipe to disk and return its path."""
    recipes_dir = get_recipes_dir()
    recipes_dir.mkdir(parents=True, exist_ok=True)

    path = recipes_dir / f"{recipe.slug}.yml"

    data = recipe.model_dump(mode="json", exclude_none=True)
    data["updated_at"] = datetime.now().isoformat()

    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)

    return path


def delete_recipe(slug: str) -> bool:
    """Delete a recipe by slug. Returns False if it did not exist."""
    path = get_recipes_dir() / f"{slug}.yml"

    if path.exists():
        path.unlink()
        return True
    return False


def create_recipe(
    slug: str,
    input_path: str,
    name: str = "",
    description: str = "",
    top_n: int = 3,
    output_dir: str | None = None,
    formats: list[ExportFormat] | None = None,
) -> Recipe:
    """Create a recipe (not yet saved)."""
    return Recipe(
        slug=slug,
        name=name or slug.replace("-", " ").replace("_", " ").title(),
        description=description,
        input=input_path,
        top_n=top_n,
        output=RecipeOutput(
            directory=output_dir,
            formats=formats or ["json"],
        ),
    )


def recipe_to_run_config(recipe: Recipe) -> RunConfig:
    """Convert a recipe to a pipeline RunConfig."""
    return RunConfig(
        input_path=Path(recipe.input),
        top_n=recipe.top_n,
        output_dir=Path(recipe.output.directory) if recipe.output.directory else None,
        formats=recipe.output.formats,
    )
