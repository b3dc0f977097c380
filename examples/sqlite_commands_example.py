#!/usr/bin/env python3
"""
Example usage of data commands against a SQLite database.

Shows how to:
- Build command options from settings
- Write query and write commands by overriding ``execute``
- Read per-command statistics after a run
"""

import os
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from datacommand import (
    CommandOptions,
    DataCommand,
    SqlAlchemyConnectionFactory,
    configure_logging,
    get_logger,
    get_settings,
)


class CreateSchema(DataCommand[None]):
    def __init__(self, options: CommandOptions):
        super().__init__("CreateSchema", options, get_logger)

    def execute(self, connection, options) -> None:
        with connection.begin():
            connection.execute(
                "CREATE TABLE IF NOT EXISTS products ("
                "id INTEGER PRIMARY KEY, name TEXT NOT NULL UNIQUE, stock INTEGER NOT NULL)"
            )


class AddProduct(DataCommand[int]):
    def __init__(self, name: str, stock: int, options: CommandOptions):
        super().__init__("AddProduct", options, get_logger)
        self._name = name
        self._stock = stock

    def execute(self, connection, options) -> int:
        with connection.begin():
            result = connection.execute(
                "INSERT INTO products (name, stock) VALUES (:name, :stock)",
                {"name": self._name, "stock": self._stock},
            )
        return result.lastrowid


class FindProductStock(DataCommand[Optional[int]]):
    def __init__(self, name: str, options: CommandOptions):
        super().__init__("FindProductStock", options, get_logger)
        self._name = name

    def execute(self, connection, options) -> Optional[int]:
        return connection.execute(
            "SELECT stock FROM products WHERE name = :name", {"name": self._name}
        ).scalar()


class ListProducts(DataCommand[List[str]]):
    def __init__(self, options: CommandOptions):
        super().__init__("ListProducts", options, get_logger)

    def execute(self, connection, options) -> List[str]:
        return list(
            connection.execute("SELECT name FROM products ORDER BY name").scalars()
        )


def main() -> None:
    os.environ.setdefault("DATACOMMAND_CONNECTION_STRING", "sqlite:///example.db")
    os.environ.setdefault("DATACOMMAND_MAX_RETRIES", "2")
    configure_logging()

    factory = SqlAlchemyConnectionFactory()
    options = CommandOptions.from_settings(get_settings(), connection_factory=factory)

    try:
        CreateSchema(options).run()

        for name, stock in [("widget", 12), ("gadget", 3)]:
            try:
                AddProduct(name, stock, options).run()
            except IntegrityError:
                print(f"{name} already stored")

        lookup = FindProductStock("widget", options)
        print(f"widget stock: {lookup.run()}")
        print(f"lookup statistics: {lookup.statistics.to_dict()}")

        print(f"products: {ListProducts(options).run()}")
    finally:
        factory.dispose()


if __name__ == "__main__":
    main()
