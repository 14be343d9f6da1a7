"""Unit tests for the ad hoc query runner."""

from io import StringIO
from unittest.mock import AsyncMock, patch

import pytest
from rich.console import Console

import query
from src.catalog.errors import HttpError
from src.models.models import Recipe

RECIPES = [
    Recipe(
        id="52772",
        name="Teriyaki Chicken Casserole",
        category="Chicken",
        cuisine="Japanese",
        instructions="1. Preheat oven\n2) Mix sauce\n\nBake",
        ingredients=["3/4 cup soy sauce", "1/2 cup water", "1/4 cup brown sugar", "Chicken"],
        tags=["Meat", "Casserole"],
        source="https://example.com/teriyaki",
    ),
    Recipe(id="53000", name="Plain Rice"),
]


@pytest.fixture
def captured_console():
    """Console writing into a buffer instead of the terminal."""
    buffer = StringIO()
    console = Console(file=buffer, width=200, color_system=None)
    with patch("query.console", console):
        yield buffer


class TestRender:
    """Tests for result and step rendering."""

    def test_render_results_table(self):
        """Test that each recipe appears with its summary columns."""
        buffer = StringIO()
        query.render_results(RECIPES, out=Console(file=buffer, width=200, color_system=None))
        output = buffer.getvalue()

        assert "Teriyaki Chicken Casserole" in output
        assert "Japanese" in output
        assert "3/4 cup soy sauce, 1/2 cup water, 1/4 cup brown sugar…" in output
        assert "Plain Rice" in output

    def test_render_empty_results(self):
        """Test the empty-state hint."""
        buffer = StringIO()
        query.render_results([], out=Console(file=buffer, width=200, color_system=None))
        assert "No recipes found" in buffer.getvalue()

    def test_render_steps(self):
        """Test numbered steps, tags and ingredients for one recipe."""
        buffer = StringIO()
        query.render_steps(RECIPES[0], out=Console(file=buffer, width=200, color_system=None))
        output = buffer.getvalue()

        assert "#Meat #Casserole" in output
        assert "• Chicken" in output
        assert "1. Preheat oven" in output
        assert "2. Mix sauce" in output
        assert "3. Bake" in output


class TestRunQuery:
    """Tests for run_query with a mocked gateway."""

    @patch("query.CatalogGateway.search", new_callable=AsyncMock)
    def test_success(self, mock_search, captured_console):
        """Test a successful search prints results and exits 0."""
        mock_search.return_value = RECIPES

        assert query.run_query("chicken") == 0

        mock_search.assert_awaited_once_with("chicken")
        assert "Teriyaki Chicken Casserole" in captured_console.getvalue()

    @patch("query.CatalogGateway.search", new_callable=AsyncMock)
    def test_search_error_exits_1(self, mock_search, captured_console):
        """Test that a SearchError message is printed and the exit code is 1."""
        mock_search.side_effect = HttpError(500)

        assert query.run_query("chicken") == 1
        assert "status 500" in captured_console.getvalue()

    @patch("query.CatalogGateway.search", new_callable=AsyncMock)
    def test_steps_for_known_id(self, mock_search, captured_console):
        """Test --steps output for a recipe in the results."""
        mock_search.return_value = RECIPES

        assert query.run_query("chicken", steps_id="52772") == 0
        assert "Preparation" in captured_console.getvalue()

    @patch("query.CatalogGateway.search", new_callable=AsyncMock)
    def test_steps_for_unknown_id(self, mock_search, captured_console):
        """Test --steps with an id not in the results."""
        mock_search.return_value = RECIPES

        assert query.run_query("chicken", steps_id="1") == 1

    @patch("query.CatalogGateway.search", new_callable=AsyncMock)
    def test_debug_prints_json(self, mock_search, captured_console):
        """Test that debug mode prints normalized records."""
        mock_search.return_value = RECIPES[1:]

        assert query.run_query("rice", debug=True) == 0
        assert '"name": "Plain Rice"' in captured_console.getvalue()


class TestMain:
    """Tests for argument handling."""

    @patch("query.run_query", return_value=0)
    def test_joins_term_words(self, mock_run):
        """Test that words after the flags form the term."""
        assert query.main(["--debug", "beef", "stew"]) == 0
        mock_run.assert_called_once_with("beef stew", debug=True, steps_id=None)

    @patch("query.run_query", return_value=0)
    def test_steps_flag(self, mock_run):
        """Test parsing of --steps ID."""
        query.main(["--steps", "52772", "teriyaki"])
        mock_run.assert_called_once_with("teriyaki", debug=False, steps_id="52772")

    def test_missing_term(self):
        """Test that no term is a usage error."""
        assert query.main([]) == 2

    def test_steps_without_id(self):
        """Test that --steps needs a value."""
        assert query.main(["--steps"]) == 2

    def test_unknown_flag(self):
        """Test that unknown flags are rejected."""
        assert query.main(["--verbose", "pie"]) == 2
