"""
Command-line interface for Coffee Calculator.

Reads the catalog and runs the pricing operations without a UI.

Usage Examples:
    # Create the database and tables
    coffee-calculator init-db

    # List ingredients, optionally by category
    coffee-calculator ingredients --category milk

    # List recipes with prices and classifications
    coffee-calculator recipes --search latte

    # Menu-wide averages and complexity counts
    coffee-calculator statistics

    # Price recipe 3 at a 40% margin without saving
    coffee-calculator what-if 3 40

    # Allocate overhead from the current business settings to every recipe
    coffee-calculator allocate

    # Overhead summary with break-even units
    coffee-calculator expenses-summary
"""

import argparse
import logging
import sys

from coffee_calculator.services import (
    business_settings_service,
    ingredient_service,
    recipe_service,
)
from coffee_calculator.services.database import initialize_app_database
from coffee_calculator.services.dto_utils import cost_to_string, percent_to_string
from coffee_calculator.services.exceptions import ServiceError
from coffee_calculator.utils.config import get_config


def init_db_cmd():
    """Create the database file and tables."""
    config = get_config()
    print(f"Database: {config.database_url}")
    print("Database ready.")
    return 0


def list_ingredients_cmd(category: str = None):
    """Print ingredients with their unit cost."""
    ingredients = ingredient_service.get_all_ingredients(category=category)
    if not ingredients:
        print("No ingredients found.")
        return 0

    print(f"{'ID':>4}  {'Name':<30} {'Category':<10} {'Pack':>14} {'Pack Price':>11} {'Unit Cost':>10}")
    for ingredient in ingredients:
        pack = f"{ingredient.pack_size.normalize():f} {ingredient.base_unit}"
        print(
            f"{ingredient.id:>4}  {ingredient.name:<30} {ingredient.category:<10} "
            f"{pack:>14} {cost_to_string(ingredient.pack_price):>11} "
            f"{ingredient.cost_per_base_unit:>10}"
        )
    return 0


def list_recipes_cmd(search: str = None):
    """Print recipes with cost, price, margin and classifications."""
    if search:
        recipes = recipe_service.search_recipes(search)
    else:
        recipes = recipe_service.get_all_recipes()

    if not recipes:
        print("No recipes found.")
        return 0

    for recipe in recipes:
        print(f"[{recipe.id}] {recipe.drink_name}")
        print(
            f"    Cost {cost_to_string(recipe.total_cost)}  "
            f"Price {cost_to_string(recipe.suggested_selling_price)}  "
            f"Margin {percent_to_string(recipe.actual_margin_percent)}  "
            f"Final {cost_to_string(recipe.final_selling_price)}"
        )
        print(
            f"    {recipe.complexity_level.value} / {recipe.pricing_category.value} / "
            f"{recipe.profitability_status.value}"
        )
    return 0


def statistics_cmd():
    """Print menu-wide statistics."""
    stats = recipe_service.get_recipe_statistics()

    print("\nRecipe Statistics")
    print("-----------------")
    print(f"Total recipes: {stats.total_recipes}")
    print(f"Average selling price: {cost_to_string(stats.average_selling_price)}")
    print(f"Average cost: {cost_to_string(stats.average_cost)}")
    print(f"Average margin: {percent_to_string(stats.average_margin)}")
    print()
    for level, count in stats.complexity_counts.items():
        print(f"  {level.value}: {count}")
    return 0


def what_if_cmd(recipe_id: int, margin: str):
    """Print a recipe priced at a candidate margin."""
    scenario = recipe_service.calculate_what_if(recipe_id, margin)

    print(f"\nWhat-if: {scenario.drink_name} at {percent_to_string(scenario.target_margin_percent)}")
    print("-----------------")
    if not scenario.recalculated:
        print("Margin must be between 0% and 100%; showing stored pricing.")
    print(f"Total cost: {cost_to_string(scenario.total_cost)}")
    print(f"Selling price: {cost_to_string(scenario.suggested_selling_price)}")
    print(f"Gross profit: {cost_to_string(scenario.gross_profit)}")
    print(f"Actual margin: {percent_to_string(scenario.actual_margin_percent)}")
    print(f"Net profit: {cost_to_string(scenario.net_profit)}")
    print(f"Final selling price: {cost_to_string(scenario.final_selling_price)}")
    return 0


def allocate_cmd(recipe_id: int = None):
    """Apply overhead from the current settings."""
    recipes = recipe_service.apply_expense_allocation(recipe_id)
    print(f"Allocated overhead to {len(recipes)} recipe(s).")
    for recipe in recipes:
        print(
            f"  {recipe.drink_name}: expense/item {recipe.allocated_expense_per_item}, "
            f"net {cost_to_string(recipe.net_profit)} "
            f"({percent_to_string(recipe.net_margin_percent)}), "
            f"final {cost_to_string(recipe.final_selling_price)}"
        )
    return 0


def expenses_summary_cmd():
    """Print the overhead summary for the current settings."""
    summary = business_settings_service.get_expense_summary()

    print("\nExpense Summary")
    print("---------------")
    print(f"Total monthly expenses: {cost_to_string(summary.total_monthly_expenses)}")
    print(f"Expected monthly sales: {summary.expected_monthly_sales}")
    print(f"Working days per month: {summary.working_days_per_month}")
    print(f"Expense per item: {summary.expense_per_item}")
    print(f"Daily expense: {cost_to_string(summary.daily_expense)}")
    print(f"Expected daily sales: {summary.expected_daily_sales}")
    print(f"Average net profit: {cost_to_string(summary.average_net_profit)}")
    print(f"Break-even units: {summary.break_even_units}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="coffee-calculator",
        description="Ingredient costing and margin-based drink pricing",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log service operations")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    subparsers.add_parser("init-db", help="Create the database and tables")

    ingredients_parser = subparsers.add_parser("ingredients", help="List ingredients")
    ingredients_parser.add_argument("--category", help="Only this category")

    recipes_parser = subparsers.add_parser("recipes", help="List recipes")
    recipes_parser.add_argument("--search", help="Drink name contains")

    subparsers.add_parser("statistics", help="Show recipe statistics")

    what_if_parser = subparsers.add_parser("what-if", help="Price a recipe at another margin")
    what_if_parser.add_argument("recipe_id", type=int, help="Recipe ID")
    what_if_parser.add_argument("margin", help="Candidate margin percent")

    allocate_parser = subparsers.add_parser("allocate", help="Apply overhead allocation")
    allocate_parser.add_argument("--recipe-id", type=int, dest="recipe_id", help="Only this recipe")

    subparsers.add_parser("expenses-summary", help="Show overhead summary")

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        initialize_app_database()

        if args.command == "init-db":
            return init_db_cmd()
        elif args.command == "ingredients":
            return list_ingredients_cmd(args.category)
        elif args.command == "recipes":
            return list_recipes_cmd(args.search)
        elif args.command == "statistics":
            return statistics_cmd()
        elif args.command == "what-if":
            return what_if_cmd(args.recipe_id, args.margin)
        elif args.command == "allocate":
            return allocate_cmd(args.recipe_id)
        elif args.command == "expenses-summary":
            return expenses_summary_cmd()
        else:
            print(f"Unknown command: {args.command}")
            return 1

    except ServiceError as e:
        print(f"ERROR: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
