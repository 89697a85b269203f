"""Фасад управления контейнерами, образами, томами и сетями локального демона."""

__version__ = "0.1.0"
