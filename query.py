#!/usr/bin/env python3
"""Ad hoc query runner for the recipe catalog.

Run one catalog search directly and print the normalized results.

Usage:
    python query.py "chicken"
    python query.py ""                      # Empty term lists the whole catalog page
    python query.py --debug "pasta"         # Show normalized records as JSON
    python query.py --steps 52772 "teriyaki"  # Show preparation steps for one recipe

Features:
- Single search through CatalogGateway with the aiohttp transport
- Result table with cuisine, category and top ingredients
- Debug mode to display full normalized JSON
- Step view for one recipe from the result set
"""

import asyncio
import sys
from typing import Optional

from rich.console import Console
from rich.table import Table

from src.catalog.errors import SearchError
from src.catalog.gateway import CatalogGateway
from src.catalog.transport import aiohttp_transport
from src.models.models import Recipe
from src.utils.logger import logger

console = Console()

USAGE = 'Usage: python query.py [--debug] [--steps ID] "<search term>"'


def render_results(recipes: list[Recipe], out: Console = console) -> None:
    """Print recipes as a table, or an empty-state hint when there are none."""
    if not recipes:
        out.print("[bold]No recipes found[/bold]")
        out.print("[dim]Try a different search or clear the filter.[/dim]")
        return

    table = Table(title=f"{len(recipes)} recipes")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Cuisine")
    table.add_column("Category")
    table.add_column("Top ingredients")
    for recipe in recipes:
        table.add_row(
            recipe.id,
            recipe.name,
            recipe.cuisine or "",
            recipe.category or "",
            recipe.ingredient_summary(),
        )
    out.print(table)


def render_steps(recipe: Recipe, out: Console = console) -> None:
    """Print one recipe's tags, ingredients and numbered preparation steps."""
    out.print(f"[bold]{recipe.name}[/bold]")
    if recipe.tags:
        out.print(" ".join(f"#{tag}" for tag in recipe.tags))
    if recipe.source:
        out.print(f"[link={recipe.source}]Open full recipe[/link]")

    if recipe.ingredients:
        out.print("\n[bold]Ingredients[/bold]")
        for ingredient in recipe.ingredients:
            out.print(f"• {ingredient}")

    steps = recipe.steps
    if steps:
        out.print("\n[bold]Preparation[/bold]")
        for index, step in enumerate(steps, start=1):
            out.print(f"{index}. {step}")


def run_query(term: str, debug: bool = False, steps_id: Optional[str] = None) -> int:
    """Execute a single search and print the response.

    Args:
        term: Search term (may be empty).
        debug: If True, display the normalized records as JSON.
        steps_id: If set, display the preparation steps of the recipe with this id.

    Returns:
        Process exit code.
    """
    gateway = CatalogGateway(transport=aiohttp_transport)
    logger.info(f"Searching catalog for {term!r}...")

    try:
        recipes = asyncio.run(gateway.search(term))
    except SearchError as e:
        console.print(f"[red]✗ {e.message}[/red]")
        return 1

    if debug:
        console.print("[bold cyan]Debug Mode: Normalized Records[/bold cyan]")
        console.print_json(data=[recipe.model_dump() for recipe in recipes])
        console.print()

    if steps_id is not None:
        selected = next((recipe for recipe in recipes if recipe.id == steps_id), None)
        if selected is None:
            console.print(f"[red]✗ No recipe with id {steps_id} in results[/red]")
            return 1
        render_steps(selected)
        return 0

    render_results(recipes)
    return 0


def main(argv: list[str]) -> int:
    debug_mode = False
    steps_id = None
    argv_start = 0

    while argv_start < len(argv) and argv[argv_start].startswith("--"):
        if argv[argv_start] == "--debug":
            debug_mode = True
            argv_start += 1
        elif argv[argv_start] == "--steps":
            argv_start += 1
            if argv_start >= len(argv):
                print("Error: --steps flag requires a recipe id")
                return 2
            steps_id = argv[argv_start]
            argv_start += 1
        else:
            print(f"Unknown flag: {argv[argv_start]}")
            return 2

    if argv_start >= len(argv):
        print("Error: No search term provided")
        print(USAGE)
        return 2

    # Join all arguments after flags as the term (handles terms with spaces)
    term = " ".join(argv[argv_start:]).strip()

    try:
        return run_query(term, debug=debug_mode, steps_id=steps_id)
    except KeyboardInterrupt:
        logger.info("\nQuery interrupted by user.")
        return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
