from uuid import uuid4

import pytest

from models.errors import Error, OrderErrors, Result


class TestError:

    def test_not_found(self):
        error = Error.not_found("Order", "abc")
        assert error.code == "Order.NotFound"
        assert error.message == "Order with identifier 'abc' was not found."

    def test_duplicate(self):
        error = Error.duplicate("Order", "PED-1")
        assert error.code == "Order.Duplicate"
        assert error.message == "Order with identifier 'PED-1' already exists."

    def test_validation(self):
        error = Error.validation("Quantity must be greater than 0.")
        assert error.code == "Validation.Error"
        assert error.message == "Quantity must be greater than 0."

    def test_order_errors_scope_to_identifier(self):
        order_id = uuid4()
        assert str(order_id) in OrderErrors.not_found(order_id).message
        assert "PED-9" in OrderErrors.not_found_by_external_id("PED-9").message
        assert OrderErrors.duplicate("PED-9").code == "Order.Duplicate"

    def test_errors_compare_by_value(self):
        assert Error.duplicate("Order", "x") == Error.duplicate("Order", "x")


class TestResult:

    def test_success_carries_value(self):
        result = Result.success(42)
        assert result.is_success
        assert not result.is_failure
        assert result.value == 42
        assert result.error == Error.NONE

    def test_failure_carries_error(self):
        error = OrderErrors.duplicate("PED-1")
        result = Result.failure(error)
        assert result.is_failure
        assert result.error == error

    def test_value_of_failure_raises(self):
        result = Result.failure(OrderErrors.duplicate("PED-1"))
        with pytest.raises(ValueError):
            result.value

    def test_failure_requires_an_error(self):
        with pytest.raises(ValueError):
            Result.failure(Error.NONE)
        with pytest.raises(ValueError):
            Result.failure(None)
