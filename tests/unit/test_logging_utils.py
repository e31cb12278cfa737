"""Tests for service logging utilities."""

import logging

from coffee_calculator.services.logging_utils import get_service_logger, log_operation


class TestGetServiceLogger:
    def test_prefix_applied_to_module_name(self):
        logger = get_service_logger("coffee_calculator.services.recipe_service")
        assert logger.name == "coffee_calculator.services.recipe_service"

    def test_bare_name(self):
        assert get_service_logger("expense_service").name == (
            "coffee_calculator.services.expense_service"
        )


class TestLogOperation:
    def test_message_and_extra(self, caplog):
        logger = get_service_logger("recipe_service")

        with caplog.at_level(logging.INFO, logger=logger.name):
            log_operation(logger, operation="create_recipe", outcome="success", recipe_id=7)

        record = caplog.records[-1]
        assert record.getMessage() == "create_recipe: success"
        assert record.operation == "create_recipe"
        assert record.outcome == "success"
        assert record.recipe_id == 7
        assert record.levelno == logging.INFO

    def test_level_respected(self, caplog):
        logger = get_service_logger("ingredient_service")

        with caplog.at_level(logging.INFO, logger=logger.name):
            log_operation(logger, operation="recalculate", outcome="success", level=logging.DEBUG)

        assert not caplog.records
