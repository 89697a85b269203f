"""Валидаторы значений настроек."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Optional, Pattern, Tuple


class Validator(ABC):
    """Абстрактный валидатор значения."""

    @abstractmethod
    def validate(self, value: Any) -> Tuple[bool, str]:
        """Возвращает (True, "") при успехе либо (False, описание ошибки)."""


class TypeValidator(Validator):
    """Проверяет тип значения; bool не считается int."""

    def __init__(self, expected_type: type | Tuple[type, ...]) -> None:
        self.expected_type = expected_type

    def _expected_name(self) -> str:
        if isinstance(self.expected_type, tuple):
            return ", ".join(t.__name__ for t in self.expected_type)
        return self.expected_type.__name__

    def validate(self, value: Any) -> Tuple[bool, str]:
        wants_bool = self.expected_type is bool or (
            isinstance(self.expected_type, tuple) and bool in self.expected_type
        )
        if isinstance(value, bool) and not wants_bool:
            return False, f"Expected value of type {self._expected_name()}, got bool"
        if isinstance(value, self.expected_type):
            return True, ""
        return (
            False,
            f"Expected value of type {self._expected_name()}, got {type(value).__name__}",
        )


class RangeValidator(Validator):
    """Целое число в диапазоне [min_value, max_value]."""

    def __init__(self, min_value: Optional[int] = None, max_value: Optional[int] = None) -> None:
        self.min_value = min_value
        self.max_value = max_value

    def validate(self, value: Any) -> Tuple[bool, str]:
        if isinstance(value, bool) or not isinstance(value, int):
            return False, f"Expected integer, got {type(value).__name__}"
        if (self.min_value is not None and value < self.min_value) or (
            self.max_value is not None and value > self.max_value
        ):
            return False, f"Value {value} is out of range [{self.min_value}, {self.max_value}]"
        return True, ""


class EnumValidator(Validator):
    """Значение из конечного набора."""

    def __init__(self, allowed_values: Iterable[Any]) -> None:
        self.allowed_values = list(allowed_values)

    def validate(self, value: Any) -> Tuple[bool, str]:
        if value in self.allowed_values:
            return True, ""
        return False, f"Value {value!r} not in allowed values: {self.allowed_values}"


class RegexValidator(Validator):
    """Строка, целиком совпадающая с регулярным выражением."""

    def __init__(self, pattern: str | Pattern[str]) -> None:
        self.pattern: Pattern[str] = re.compile(pattern) if isinstance(pattern, str) else pattern

    def validate(self, value: Any) -> Tuple[bool, str]:
        if not isinstance(value, str):
            return False, "RegexValidator expects string values"
        if self.pattern.fullmatch(value):
            return True, ""
        return False, f"Value '{value}' does not match pattern {self.pattern.pattern!r}"


class AnyOfValidator(Validator):
    """Успешен, если проходит хотя бы один из валидаторов."""

    def __init__(self, validators: Iterable[Validator]) -> None:
        self.validators: List[Validator] = list(validators)

    def validate(self, value: Any) -> Tuple[bool, str]:
        errors = []
        for validator in self.validators:
            is_valid, error = validator.validate(value)
            if is_valid:
                return True, ""
            errors.append(error)
        return False, "; ".join(errors)
