from rich import print
from typing import Optional

from sqlalchemy.orm import Session
import typer

from storefront.db.init_db import init_db as create_tables
from storefront.db.seed import seed_database
from storefront.db.session import SessionLocal
from storefront.crud.user import create_user, get_user_by_email
from storefront.db.enums import UserRoleType
from storefront.schemas.user import UserCreate
from storefront.core.config import settings


cli = typer.Typer()


@cli.command()
def init_db():
    """
    Create all database tables
    """
    create_tables()
    print("[green]Database tables created[/green]")


@cli.command()
def seed():
    """
    Seed the database with demo categories, products and users
    """
    create_tables()
    print("Starting database seeding...")
    db: Session = SessionLocal()
    try:
        report = seed_database(db)
    except Exception as e:
        db.rollback()
        print(f"[bold red]Error during seeding:[/bold red] {e}")
        raise typer.Exit(code=1)
    finally:
        db.close()
    print(f"[green]Categories created:[/green] {len(report.categories)}")
    print(f"[green]Products created:[/green] {len(report.products)}")
    print(f"[green]Users created:[/green] {len(report.users)}")
    print("[bold green]Database seeding completed successfully![/bold green]")
    print("Test credentials:")
    print("   Admin: admin@example.com / admin123")
    print("   User:  test@example.com / test123")


@cli.command()
def create_admin(
    email: Optional[str] = None,
    password: Optional[str] = None,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
):
    """
    Create an admin user
    """
    email = email or settings.admin_email
    password = password or settings.admin_password
    first_name = first_name or settings.admin_first_name
    last_name = last_name or settings.admin_last_name
    create_tables()
    db: Session = SessionLocal()
    try:
        if get_user_by_email(db, email):
            print(f"[bold red]Alert:[/bold red] [bold]{email}[/bold] already exists")
            return
        user = UserCreate(
            email=email, password=password, first_name=first_name, last_name=last_name
        )
        create_user(db, user, role=UserRoleType.ADMIN)
    finally:
        db.close()
    print(f"Admin user {email} created successfully")


if __name__ == "__main__":
    cli()
