"""
internrank CLI - command line interface.
"""

import csv
import os
import sys
from pathlib import Path

import click
from dotenv import load_dotenv

from . import __version__

# Load environment variables
load_dotenv()

DEFAULT_INPUT_FILE = "input.csv"
FORMAT_CHOICES = ["json", "csv", "xlsx", "report"]


def resolve_input_file(input_file: str | None) -> Path:
    """Argument, then $INTERNRANK_INPUT, then input.csv; blank values fall through."""
    for candidate in (input_file, os.getenv("INTERNRANK_INPUT")):
        if candidate and candidate.strip():
            return Path(candidate.strip())
    return Path(DEFAULT_INPUT_FILE)


@click.group()
@click.version_option(version=__version__, prog_name="internrank")
def main() -> None:
    """internrank - Applicant CSV to ranking statistics"""
    pass


@main.command()
@click.argument("input_file", required=False)
@click.option(
    "--top",
    "-n",
    type=click.IntRange(1, 100),
    default=3,
    help="Number of top applicants to list (default: 3)",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=False),
    default=None,
    help="Write run artifacts to this directory (default: print only)",
)
@click.option(
    "--format",
    "-f",
    "formats",
    type=click.Choice(FORMAT_CHOICES),
    multiple=True,
    help="Export format for --output (can specify multiple, default: json)",
)
@click.option("--verbose", "-v", is_flag=True, help="Show progress and skipped rows")
def run(
    input_file: str | None,
    top: int,
    output: str | None,
    formats: tuple[str, ...],
    verbose: bool,
) -> None:
    """Rank applicants from INPUT_FILE and print the statistics JSON."""
    from .exporter import EMPTY_JSON, stats_to_json
    from .models import RunConfig
    from .pipeline import Pipeline

    input_path = resolve_input_file(input_file)
    config = RunConfig(
        input_path=input_path,
        top_n=top,
        output_dir=Path(output) if output else None,
        formats=list(formats) or ["json"],
    )

    try:
        result = Pipeline(config, verbose=verbose, quiet=not verbose).run()
    except FileNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        click.echo("Pass a CSV path or set INTERNRANK_INPUT in .env", err=True)
        sys.exit(1)

    click.echo(stats_to_json(result.stats) if result.stats is not None else EMPTY_JSON)


@main.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
def validate(input_file: str) -> None:
    """Check INPUT_FILE row by row without ranking it."""
    from .pipeline import STREAM_ERRORS, process_rows

    try:
        with open(input_file, newline="", encoding="utf-8") as f:
            store, counts = process_rows(csv.reader(f))
    except STREAM_ERRORS as e:
        click.echo(f"Could not read {input_file}: {e}", err=True)
        sys.exit(1)

    click.echo(f"Rows read:         {counts.read}")
    click.echo(f"Rows accepted:     {counts.accepted}")
    click.echo(f"Rows skipped:      {counts.skipped}")
    click.echo(f"Unique applicants: {store.unique_count()}")

    if counts.skip_reasons:
        click.echo("\nSkipped by reason:")
        for reason, count in sorted(counts.skip_reasons.items(), key=lambda x: -x[1]):
            click.echo(f"  {reason:<18} {count}")


# =============================================================================
# RECIPE COMMANDS
# =============================================================================


@main.group()
def recipe() -> None:
    """Manage saved recipes (run configurations)."""
    pass


@recipe.command("list")
def recipe_list() -> None:
    """List all saved recipes."""
    from .recipe import list_recipes

    recipes = list_recipes()

    if not recipes:
        click.echo("No recipes found. Create one with: internrank recipe create")
        return

    click.echo(f"\nSaved Recipes ({len(recipes)})\n")
    click.echo(f"{'Slug':<25} {'Top':<5} {'Input'}")
    click.echo("-" * 70)

    for r in recipes:
        click.echo(f"{r.slug:<25} {r.top_n:<5} {r.input}")


@recipe.command("show")
@click.argument("slug")
def recipe_show(slug: str) -> None:
    """Show details of a recipe."""
    from .recipe import load_recipe

    try:
        r = load_recipe(slug)
    except FileNotFoundError:
        click.echo(f"Recipe not found: {slug}", err=True)
        sys.exit(1)

    click.echo(f"\nRecipe: {r.name or r.slug}")
    click.echo("-" * 40)
    click.echo(f"Slug:    {r.slug}")
    click.echo(f"Input:   {r.input}")
    click.echo(f"Top:     {r.top_n}")
    click.echo(f"Output:  {r.output.directory or 'stdout only'}")
    click.echo(f"Formats: {', '.join(r.output.formats)}")

    if r.description:
        click.echo(f"\nDescription: {r.description}")


@recipe.command("create")
@click.option("--slug", "-s", required=True, help="Unique identifier for the recipe")
@click.option("--input", "-i", "input_path", required=True, help="Applicant CSV path")
@click.option("--name", default="", help="Human-readable name")
@click.option("--description", "-d", default="", help="What this recipe ranks")
@click.option("--top", "-n", type=click.IntRange(1, 100), default=3, help="Top list size")
@click.option("--output", "-o", default=None, help="Export directory")
@click.option(
    "--format",
    "-f",
    "formats",
    type=click.Choice(FORMAT_CHOICES),
    multiple=True,
    help="Export format (can specify multiple, default: json)",
)
def recipe_create(
    slug: str,
    input_path: str,
    name: str,
    description: str,
    top: int,
    output: str | None,
    formats: tuple[str, ...],
) -> None:
    """Create a new recipe."""
    from .recipe import create_recipe, load_recipe, save_recipe

    try:
        load_recipe(slug)
        click.echo(f"Recipe already exists: {slug}", err=True)
        click.echo("Use a different slug or delete the existing recipe first.", err=True)
        sys.exit(1)
    except FileNotFoundError:
        pass  # Good, doesn't exist yet

    recipe_obj = create_recipe(
        slug=slug,
        input_path=input_path,
        name=name,
        description=description,
        top_n=top,
        output_dir=output,
        formats=list(formats) or None,  # type: ignore[arg-type]
    )

    path = save_recipe(recipe_obj)
    click.echo(f"Recipe saved: {path}")
    click.echo(f"\nRun with: internrank recipe run {slug}")


@recipe.command("run")
@click.argument("slug")
@click.option("--verbose", "-v", is_flag=True, help="Show progress and skipped rows")
def recipe_run(slug: str, verbose: bool) -> None:
    """Run a saved recipe and print the statistics JSON."""
    from .exporter import EMPTY_JSON, stats_to_json
    from .pipeline import Pipeline
    from .recipe import load_recipe, recipe_to_run_config

    try:
        r = load_recipe(slug)
    except FileNotFoundError:
        click.echo(f"Recipe not found: {slug}", err=True)
        click.echo("Use 'internrank recipe list' to see available recipes.", err=True)
        sys.exit(1)
    except ValueError as e:
        click.echo(f"Invalid recipe {slug}: {e}", err=True)
        sys.exit(1)

    try:
        result = Pipeline(recipe_to_run_config(r), verbose=verbose, quiet=not verbose).run()
    except FileNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(stats_to_json(result.stats) if result.stats is not None else EMPTY_JSON)


@recipe.command("delete")
@click.argument("slug")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
def recipe_delete(slug: str, yes: bool) -> None:
    """Delete a recipe."""
    from .recipe import delete_recipe, load_recipe

    try:
        r = load_recipe(slug)
    except FileNotFoundError:
        click.echo(f"Recipe not found: {slug}", err=True)
        sys.exit(1)

    if not yes:
        click.confirm(f"Delete recipe '{r.name or r.slug}'?", abort=True)

    if delete_recipe(slug):
        click.echo(f"Deleted: {slug}")
    else:
        click.echo(f"Failed to delete: {slug}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
