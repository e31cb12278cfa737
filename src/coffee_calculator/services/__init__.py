"""Services package - Business logic layer for Coffee Calculator.

This package contains the pricing engine and the service modules that
provide business logic and database operations for the application.

Architecture:
- Services: Stateless functions organized by domain (ingredient, recipe, expense, settings)
- Transactions: Managed via session_scope() context manager
- Exceptions: Consistent error handling via ServiceError hierarchy
- Validation: Input validation before database operations

Service Modules:
- ingredient_service: Ingredient catalog CRUD and dependent recipe repricing
- recipe_service: Recipe CRUD, what-if pricing, statistics and overhead allocation
- expense_service: Operating expense CRUD and monthly totals
- business_settings_service: Authoritative settings and expense summary

Calculation Modules (no database access):
- pricing_engine: Unit cost, line cost, margin and overhead arithmetic
- classification: Complexity, pricing category and profitability tiers
- statistics: Cross-recipe averages and complexity counts

Infrastructure:
- exceptions: Custom exception classes for service layer errors
- database: Session management and database utilities
- logging_utils: Structured operation logging

Modules are imported directly (``from coffee_calculator.services import
recipe_service``); the models import pricing_engine at load time, so this
package must not import the service modules eagerly.
"""
