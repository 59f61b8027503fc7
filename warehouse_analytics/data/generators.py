"""
Synthetic Data Generator

Generates a small but realistic sales warehouse for development and tests:
- Customers with demographics and account dates
- Products across a category / subcategory hierarchy
- Order lines priced from product cost, a few of them undated

Output is deterministic for a given seed.
"""

from datetime import date, timedelta
from pathlib import Path
from typing import Dict, Optional, Union

import numpy as np
import polars as pl
import structlog
from faker import Faker

from warehouse_analytics.ingestion.schemas import CUSTOMERS, PRODUCTS, SALES
from warehouse_analytics.ingestion.sources import WarehouseTables, csv_paths

logger = structlog.get_logger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

# category -> (category id prefix, subcategories, cost range)
CATEGORIES = {
    "Bikes": ("BI", ["Mountain Bikes", "Road Bikes", "Touring Bikes"], (300, 2200)),
    "Components": ("CO", ["Handlebars", "Brakes", "Chains", "Wheels", "Saddles"], (10, 600)),
    "Clothing": ("CL", ["Jerseys", "Caps", "Gloves", "Socks", "Shorts"], (2, 60)),
    "Accessories": ("AC", ["Helmets", "Bottles and Cages", "Tires and Tubes", "Locks"], (1, 80)),
}

COUNTRIES = ["United States", "Australia", "United Kingdom", "Germany", "France", "Canada", "n/a"]
COUNTRY_WEIGHTS = [0.40, 0.20, 0.10, 0.10, 0.09, 0.09, 0.02]

PRODUCT_LINES = ["Mountain", "Road", "Touring", "Other Sales"]
COLORS = ["Black", "Red", "Silver", "Blue", "Yellow"]
SIZES = ["38", "42", "44", "48", "S", "M", "L"]


# =============================================================================
# GENERATOR
# =============================================================================

class WarehouseDataGenerator:
    """
    Generate customers, products and sales in the warehouse layout.

    Example:
        generator = WarehouseDataGenerator(seed=7)
        tables = generator.generate(n_customers=200, n_products=40, n_orders=1500)
        generator.write_csv("data/csv-files")
    """

    def __init__(
        self,
        seed: int = 42,
        start_date: date = date(2010, 12, 29),
        end_date: date = date(2014, 1, 28),
        undated_share: float = 0.002,
    ):
        self.seed = seed
        self.start_date = start_date
        self.end_date = end_date
        self.undated_share = undated_share
        self.fake = Faker()
        self.fake.seed_instance(seed)
        self.rng = np.random.default_rng(seed)
        self._tables: Optional[WarehouseTables] = None

    def _dates(self, start: date, offsets: np.ndarray) -> list:
        return [start + timedelta(days=int(d)) for d in offsets]

    def generate_customers(self, n: int) -> pl.DataFrame:
        """Generate n customers with keys 1..n"""
        rng = self.rng
        customer_ids = np.arange(11000, 11000 + n)
        birth_offsets = rng.integers(0, 365 * 55, n)
        create_offsets = rng.integers(0, (self.end_date - self.start_date).days, n)

        birthdates = self._dates(date(1935, 1, 1), birth_offsets)
        # A few customers never told us their birthdate
        for i in np.flatnonzero(rng.random(n) < 0.01):
            birthdates[i] = None

        return pl.DataFrame(
            {
                "customer_key": np.arange(1, n + 1),
                "customer_id": customer_ids,
                "customer_number": [f"AW{cid:08d}" for cid in customer_ids],
                "first_name": [self.fake.first_name() for _ in range(n)],
                "last_name": [self.fake.last_name() for _ in range(n)],
                "country": rng.choice(COUNTRIES, n, p=COUNTRY_WEIGHTS),
                "marital_status": rng.choice(["Married", "Single"], n),
                "gender": rng.choice(["Male", "Female", "n/a"], n, p=[0.49, 0.49, 0.02]),
                "birthdate": birthdates,
                "create_date": self._dates(self.start_date, create_offsets),
            },
            schema_overrides={"birthdate": pl.Date, "create_date": pl.Date},
        )

    def generate_products(self, n: int) -> pl.DataFrame:
        """Generate n products with keys 1..n, spread over all categories"""
        rng = self.rng
        names = list(CATEGORIES)
        category_idx = np.arange(n) % len(names)
        rng.shuffle(category_idx)

        rows = []
        for i, idx in enumerate(category_idx):
            category = names[idx]
            prefix, subcategories, (low, high) = CATEGORIES[category]
            subcategory = subcategories[int(rng.integers(0, len(subcategories)))]
            color = COLORS[int(rng.integers(0, len(COLORS)))]
            size = SIZES[int(rng.integers(0, len(SIZES)))]
            rows.append({
                "product_key": i + 1,
                "product_id": 200 + i,
                "product_number": f"{prefix}-{self.fake.unique.random_number(digits=4, fix_len=True)}",
                "product_name": f"{subcategory} {color}- {size}",
                "category_id": f"{prefix}_{subcategory[:2].upper()}",
                "category": category,
                "subcategory": subcategory,
                "maintenance": "Yes" if rng.random() < 0.4 else "No",
                "cost": float(rng.integers(low, high + 1)),
                "product_line": PRODUCT_LINES[int(rng.integers(0, len(PRODUCT_LINES)))],
                "start_date": self.start_date - timedelta(days=int(rng.integers(0, 900))),
            })

        return pl.DataFrame(rows)

    def generate_sales(
        self,
        n_orders: int,
        customers: pl.DataFrame,
        products: pl.DataFrame,
    ) -> pl.DataFrame:
        """Generate order lines for n_orders orders of one to three lines each"""
        rng = self.rng
        span = (self.end_date - self.start_date).days + 1

        order_customers = rng.choice(customers["customer_key"].to_numpy(), n_orders)
        order_offsets = rng.integers(0, span, n_orders)
        lines_per_order = rng.choice([1, 2, 3], n_orders, p=[0.6, 0.3, 0.1])
        n_lines = int(lines_per_order.sum())

        order_idx = np.repeat(np.arange(n_orders), lines_per_order)
        product_idx = rng.integers(0, products.height, n_lines)
        costs = products["cost"].to_numpy()[product_idx]
        prices = np.maximum(np.round(costs * rng.uniform(1.2, 1.8, n_lines)), 1.0)
        quantities = rng.choice([1, 2, 3], n_lines, p=[0.9, 0.07, 0.03])

        offsets = order_offsets[order_idx]
        order_dates = self._dates(self.start_date, offsets)
        for i in np.flatnonzero(rng.random(n_lines) < self.undated_share):
            order_dates[i] = None

        return pl.DataFrame(
            {
                "order_number": [f"SO{43697 + i}" for i in order_idx],
                "product_key": products["product_key"].to_numpy()[product_idx],
                "customer_key": order_customers[order_idx],
                "order_date": order_dates,
                "shipping_date": self._dates(self.start_date + timedelta(days=7), offsets),
                "due_date": self._dates(self.start_date + timedelta(days=12), offsets),
                "sales_amount": prices * quantities,
                "quantity": quantities,
                "price": prices,
            },
            schema_overrides={
                "order_date": pl.Date,
                "shipping_date": pl.Date,
                "due_date": pl.Date,
            },
        )

    def generate(
        self,
        n_customers: int = 500,
        n_products: int = 60,
        n_orders: int = 3000,
    ) -> WarehouseTables:
        """Generate the complete warehouse"""
        customers = self.generate_customers(n_customers)
        products = self.generate_products(n_products)
        sales = self.generate_sales(n_orders, customers, products)

        self._tables = WarehouseTables.from_frames(customers, products, sales)
        logger.info(
            "Synthetic warehouse generated",
            seed=self.seed,
            **self._tables.row_counts,
        )
        return self._tables

    def write_csv(self, directory: Union[str, Path]) -> Dict[str, Path]:
        """
        Write the generated relations as warehouse CSV exports.

        Generates with default sizes first if nothing was generated yet.
        """
        tables = self._tables or self.generate()
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)

        paths = csv_paths(directory)
        frames = {CUSTOMERS: tables.customers, PRODUCTS: tables.products, SALES: tables.sales}
        for name, df in frames.items():
            df.write_csv(paths[name])
            logger.info(f"Saved {name}: {len(df)} rows -> {paths[name]}")
        return paths
