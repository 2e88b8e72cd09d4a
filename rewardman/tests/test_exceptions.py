"""Tests for structured errors."""

from rewardman.exceptions import InsufficientBalance, NotFound, RewardmanError


def test_default_code_and_message():
    error = InsufficientBalance(available=0, requested=300)

    assert error.code == "INSUFFICIENT_BALANCE"
    assert error.message == "Insufficient points balance"
    assert str(error) == "[INSUFFICIENT_BALANCE] Insufficient points balance"


def test_explicit_code_on_subclass():
    error = NotFound("ORDER_NOT_FOUND", order_ref="abc")
    assert error.code == "ORDER_NOT_FOUND"
    assert error.message == "Order not found"
    assert isinstance(error, RewardmanError)


def test_custom_message_and_unknown_code():
    assert RewardmanError("KITCHEN_CLOSED").message == "KITCHEN_CLOSED"
    assert RewardmanError("KITCHEN_CLOSED", "Kitchen is closed").message == "Kitchen is closed"


def test_as_dict():
    error = InsufficientBalance(available=10, requested=300)
    assert error.as_dict() == {
        "code": "INSUFFICIENT_BALANCE",
        "message": "Insufficient points balance",
        "data": {"available": 10, "requested": 300},
    }
