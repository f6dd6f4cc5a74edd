import pytest
from sqlalchemy.future import select
from typer.testing import CliRunner

import cli as storefront_cli
from storefront.db.models import User

from .conftest import TestingSessionLocal

runner = CliRunner()


@pytest.fixture(autouse=True)
def cli_database(monkeypatch):
    monkeypatch.setattr(storefront_cli, "SessionLocal", TestingSessionLocal)
    monkeypatch.setattr(storefront_cli, "create_tables", lambda: None)


def test_seed_command(db_session):
    result = runner.invoke(storefront_cli.cli, ["seed"])

    assert result.exit_code == 0
    assert "Products created: 8" in result.output
    assert "Database seeding completed successfully!" in result.output


def test_create_admin_command(db_session):
    result = runner.invoke(
        storefront_cli.cli,
        ["create-admin", "--email", "boss@example.com", "--password", "boss-pass"],
    )

    assert result.exit_code == 0
    admin = db_session.execute(
        select(User).filter_by(email="boss@example.com")
    ).scalar_one()
    assert admin.role == "ADMIN"
    assert admin.cart is not None

    result = runner.invoke(
        storefront_cli.cli,
        ["create-admin", "--email", "boss@example.com", "--password", "boss-pass"],
    )
    assert "already exists" in result.output
