import argparse
import os
import sys
from datetime import date
from pathlib import Path

from werkzeug.security import generate_password_hash

# Ensure repo root is on sys.path when running as a script (Windows-friendly).
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.acme.db import build_engine
from app.acme.models import Base, User
from app.acme.modules.customers.models import Customer
from app.acme.modules.invoices.models import Invoice
from scripts._db_utils import script_session

SAMPLE_CUSTOMERS = [
    ("Evil Rabbit", "evil@rabbit.com", "https://example.com/customers/evil-rabbit.png"),
    ("Delba de Oliveira", "delba@oliveira.com", "https://example.com/customers/delba-de-oliveira.png"),
    ("Lee Robinson", "lee@robinson.com", "https://example.com/customers/lee-robinson.png"),
    ("Michael Novotny", "michael@novotny.com", "https://example.com/customers/michael-novotny.png"),
    ("Amy Burns", "amy@burns.com", "https://example.com/customers/amy-burns.png"),
    ("Balazs Orban", "balazs@orban.com", "https://example.com/customers/balazs-orban.png"),
]

# (customer email, amount in cents, status, ISO date)
SAMPLE_INVOICES = [
    ("evil@rabbit.com", 15795, "pending", "2022-12-06"),
    ("delba@oliveira.com", 20348, "pending", "2022-11-14"),
    ("amy@burns.com", 3040, "paid", "2022-10-29"),
    ("michael@novotny.com", 44800, "paid", "2023-09-10"),
    ("balazs@orban.com", 34577, "pending", "2023-08-05"),
    ("lee@robinson.com", 54246, "pending", "2023-07-16"),
    ("evil@rabbit.com", 666, "pending", "2023-06-27"),
    ("michael@novotny.com", 32545, "paid", "2023-06-09"),
    ("amy@burns.com", 1250, "paid", "2023-06-17"),
    ("balazs@orban.com", 8546, "paid", "2023-06-07"),
    ("delba@oliveira.com", 500, "paid", "2023-08-19"),
    ("balazs@orban.com", 8945, "paid", "2023-06-03"),
    ("amy@burns.com", 1000, "paid", "2022-06-05"),
]


def _db_url(database_url: str | None) -> str:
    return (database_url or os.environ.get("DATABASE_URL") or "sqlite:///acme.db").strip()


def create_tables(*, database_url: str | None = None) -> None:
    """Create tables straight from the models (local dev; prod uses alembic)."""
    engine = build_engine(_db_url(database_url))
    try:
        Base.metadata.create_all(bind=engine)
    finally:
        engine.dispose()


def seed_only(*, database_url: str | None = None, sample_data: bool = False) -> None:
    """
    Seed the admin user (and optionally sample customers/invoices) idempotently.
    Does NOT overwrite an existing admin user's password.
    """
    admin_email = (os.environ.get("ADMIN_EMAIL") or "admin@acme.com").strip().lower()
    admin_password = os.environ.get("ADMIN_PASSWORD") or "change-me"

    with script_session(_db_url(database_url)) as s:
        user = s.query(User).filter(User.email == admin_email).one_or_none()
        if not user:
            user = User(email=admin_email, password_hash=generate_password_hash(admin_password), is_active=True)
            s.add(user)

        if sample_data:
            by_email: dict[str, Customer] = {}
            for name, email, image_url in SAMPLE_CUSTOMERS:
                c = s.query(Customer).filter(Customer.email == email).one_or_none()
                if not c:
                    c = Customer(name=name, email=email, image_url=image_url)
                    s.add(c)
                by_email[email] = c
            s.flush()

            # Invoices have no natural key; only seed into an empty table.
            if s.query(Invoice).count() == 0:
                for email, amount, status, iso_date in SAMPLE_INVOICES:
                    s.add(
                        Invoice(
                            customer_id=by_email[email].id,
                            amount=amount,
                            status=status,
                            date=date.fromisoformat(iso_date),
                        )
                    )

    print("Initialized database (seed_only).")
    print(f"Admin email: {admin_email}")
    print("Admin password: (from ADMIN_PASSWORD)")


def main() -> None:
    parser = argparse.ArgumentParser(description="Create tables and seed the Acme dashboard database")
    parser.add_argument("--create-tables", action="store_true", help="Create tables from models (skip alembic)")
    parser.add_argument("--sample-data", action="store_true", help="Also seed sample customers and invoices")
    parser.add_argument("--database-url", default=None, help="Override DATABASE_URL")
    args = parser.parse_args()

    if args.create_tables:
        create_tables(database_url=args.database_url)
    seed_only(database_url=args.database_url, sample_data=args.sample_data)


if __name__ == "__main__":
    main()
