import pytest
from sqlalchemy import select

from app.acme.modules.customers.forms import CustomerForm
from app.acme.modules.customers.models import Customer
from app.acme.modules.invoices.models import Invoice
from app.acme.validation import parse_form
from scripts import init_db
from scripts._db_utils import script_session
from scripts.release import alembic_config
from scripts.start import gunicorn_argv, resolve_port, resolve_workers


def test_seeded_customers_pass_the_edit_form(tmp_path, monkeypatch):
    db_url = f"sqlite:///{tmp_path/'seed.db'}"
    monkeypatch.setenv("ADMIN_PASSWORD", "seed-pass")

    init_db.create_tables(database_url=db_url)
    init_db.seed_only(database_url=db_url, sample_data=True)
    # Idempotent: a second run adds nothing.
    init_db.seed_only(database_url=db_url, sample_data=True)

    with script_session(db_url) as s:
        customers = list(s.scalars(select(Customer)))
        assert len(customers) == len(init_db.SAMPLE_CUSTOMERS)
        assert len(list(s.scalars(select(Invoice)))) == len(init_db.SAMPLE_INVOICES)
        for c in customers:
            result = parse_form(CustomerForm, {"name": c.name, "email": c.email, "image_url": c.image_url})
            assert result.ok, (c.email, result.errors)


def test_start_reads_port_and_workers():
    assert resolve_port(None) == 8080
    assert resolve_port(" 5000 ") == 5000
    assert resolve_workers(None) == 2
    assert resolve_workers("4") == 4
    with pytest.raises(ValueError):
        resolve_port("70000")
    with pytest.raises(ValueError):
        resolve_workers("0")

    argv = gunicorn_argv(8000, 3)
    assert argv[:2] == ["gunicorn", "app.wsgi:app"]
    assert argv[argv.index("--workers") + 1] == "3"
    assert argv[argv.index("--bind") + 1] == "0.0.0.0:8000"


def test_alembic_config_escapes_percent_in_url():
    cfg = alembic_config("postgresql://acme:p%40ss@db:5432/acme")
    assert cfg.get_main_option("sqlalchemy.url") == "postgresql://acme:p%40ss@db:5432/acme"
    assert cfg.get_main_option("script_location").endswith("migrations")
