"""
Test Suite Configuration
"""
from datetime import date
from typing import Generator

import pytest
import polars as pl
from sqlalchemy import Engine, create_engine
from sqlalchemy.pool import StaticPool

from warehouse_analytics.config import Settings
from warehouse_analytics.database.connection import close_database, create_schema, init_database
from warehouse_analytics.ingestion.schemas import CUSTOMERS, PRODUCTS, SALES
from warehouse_analytics.ingestion.sources import WarehouseTables, csv_paths

AS_OF = date(2023, 1, 1)


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Create test settings"""
    return Settings(
        app_env="testing",
        debug=True,
    )


@pytest.fixture
def as_of() -> date:
    return AS_OF


@pytest.fixture
def customers_df() -> pl.DataFrame:
    """
    Four customers: 3 has no birthdate and no last name, 4 never ordered.
    """
    return pl.DataFrame({
        "customer_key": [1, 2, 3, 4],
        "customer_id": [11000, 11001, 11002, 11003],
        "customer_number": ["AW00011000", "AW00011001", "AW00011002", "AW00011003"],
        "first_name": ["Jon", "Eugene", "Ruben", "Christy"],
        "last_name": ["Yang", "Huang", None, "Zhu"],
        "country": ["Australia", "United States", "United States", "Germany"],
        "marital_status": ["Married", "Single", "Married", "Single"],
        "gender": ["Male", "Male", "Male", "Female"],
        "birthdate": [date(1980, 5, 15), date(1990, 1, 1), None, date(2005, 6, 1)],
        "create_date": [date(2010, 10, 6), date(2010, 10, 7), date(2010, 10, 8), date(2010, 10, 9)],
    })


@pytest.fixture
def products_df() -> pl.DataFrame:
    """Three products, the cap is never sold"""
    return pl.DataFrame({
        "product_key": [10, 20, 30],
        "product_id": [210, 220, 230],
        "product_number": ["BK-R93R-62", "HL-U509-R", "CA-1098"],
        "product_name": ["Road-150 Red- 62", "Sport-100 Helmet- Red", "AWC Logo Cap"],
        "category_id": ["BI_RB", "AC_HE", "CL_CA"],
        "category": ["Bikes", "Accessories", "Clothing"],
        "subcategory": ["Road Bikes", "Helmets", "Caps"],
        "maintenance": ["Yes", "No", "No"],
        "cost": [2171.0, 13.0, 6.0],
        "product_line": ["Road", "Other Sales", "Other Sales"],
        "start_date": [date(2010, 12, 28), date(2011, 7, 1), date(2011, 7, 1)],
    })


@pytest.fixture
def sales_df() -> pl.DataFrame:
    """
    Six order lines.

    SO4 is undated, SO5 belongs to customer 99 who is not in the dimension.
    """
    order_dates = [
        date(2020, 1, 10),
        date(2020, 1, 10),
        date(2021, 3, 5),
        date(2022, 6, 20),
        None,
        date(2022, 7, 1),
    ]
    return pl.DataFrame({
        "order_number": ["SO1", "SO1", "SO2", "SO3", "SO4", "SO5"],
        "product_key": [10, 20, 10, 20, 20, 20],
        "customer_key": [1, 1, 1, 2, 3, 99],
        "order_date": order_dates,
        "shipping_date": [date(2020, 1, 17), date(2020, 1, 17), date(2021, 3, 12), date(2022, 6, 27), date(2022, 6, 27), date(2022, 7, 8)],
        "due_date": [date(2020, 1, 22), date(2020, 1, 22), date(2021, 3, 17), date(2022, 7, 2), date(2022, 7, 2), date(2022, 7, 13)],
        "sales_amount": [3500.0, 70.0, 3500.0, 35.0, 35.0, 35.0],
        "quantity": [1, 2, 1, 1, 1, 1],
        "price": [3500.0, 35.0, 3500.0, 35.0, 35.0, 35.0],
    })


@pytest.fixture
def tables(customers_df, products_df, sales_df) -> WarehouseTables:
    """The sample warehouse, conformed to its schemas"""
    return WarehouseTables.from_frames(customers_df, products_df, sales_df)


@pytest.fixture
def warehouse_csv_dir(tmp_path, tables):
    """The sample warehouse written as CSV exports"""
    directory = tmp_path / "csv-files"
    directory.mkdir()
    paths = csv_paths(directory)
    tables.customers.write_csv(paths[CUSTOMERS])
    tables.products.write_csv(paths[PRODUCTS])
    tables.sales.write_csv(paths[SALES])
    return directory


@pytest.fixture
def test_engine() -> Generator[Engine, None, None]:
    """In-memory SQLite engine with the warehouse schema"""
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    create_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def test_database() -> Generator[Engine, None, None]:
    """Application-wide in-memory database, torn down after the test"""
    engine = init_database("sqlite://")
    create_schema(engine)
    yield engine
    close_database()
