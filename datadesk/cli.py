"""CLI tools for Datadesk administration."""

import click
from sqlalchemy import delete

from datadesk.core.exceptions import DashboardError
from datadesk.db.enums import Role
from datadesk.db.models import Company, FacebookData
from datadesk.db.session import SessionLocal
from datadesk.schemas.user import UserCreate
from datadesk.services import company_service, request_service, user_service


DEMO_COMPANIES = [
    {
        "name": "Alpha Tech Solutions",
        "industry": "Technology",
        "email": "contact@alphatech.com",
        "phone": "9876543210",
        "address": "101 Silicon Avenue, Bangalore, Karnataka",
        "website": "www.alphatech.com",
        "company_size": "Medium",
        "notes": "Products: AI Software, Cloud Hosting\nServices: IT Consulting, System Integration",
    },
    {
        "name": "Blue Wave Industries",
        "industry": "Manufacturing",
        "email": "info@bluewave.com",
        "phone": "9123456780",
        "address": "204 Industrial Zone, Pune, Maharashtra",
        "website": "www.bluewave.com",
        "company_size": "Large",
        "notes": "Products: Hydraulic Pumps, Industrial Valves\nServices: Machinery Maintenance",
    },
    {
        "name": "Green Leaf Organics",
        "industry": "Agriculture",
        "email": "support@greenleaf.in",
        "phone": "8899776655",
        "address": "14 Green Street, Nashik, Maharashtra",
        "website": "www.greenleaf.in",
        "company_size": "Medium",
        "notes": "Products: Organic Fertilizers, Bio Pesticides\nServices: Farming Consultation",
    },
    {
        "name": "PixelCraft Media",
        "industry": "Media",
        "email": "hello@pixelcraftmedia.com",
        "phone": "9812345678",
        "address": "501, Cyber Park, Hyderabad, Telangana",
        "website": "www.pixelcraftmedia.com",
        "company_size": "Small",
        "notes": "Products: Motion Graphics, Brand Kits\nServices: Social Media Marketing, Video Editing",
    },
    {
        "name": "SecureNet Systems",
        "industry": "Technology",
        "email": "contact@securenet.com",
        "phone": "9123098765",
        "address": "A-55, Tech Enclave, Noida, Uttar Pradesh",
        "website": "www.securenet.com",
        "company_size": "Medium",
        "notes": "Products: Firewall Appliances, VPN Routers\nServices: Network Security, IT Audits",
    },
    {
        "name": "SolarShine Energy",
        "industry": "Energy",
        "email": "contact@solarshine.in",
        "phone": "9012341234",
        "address": "Near Solar Park, Jaipur, Rajasthan",
        "website": "www.solarshine.in",
        "company_size": "Medium",
        "notes": "Products: Solar Panels, Inverters\nServices: Installation, Maintenance",
    },
]

DEMO_FACEBOOK_DATA = [
    {
        "company_name": "Alpha Tech Solutions",
        "address": "101 Silicon Avenue, Bangalore, Karnataka",
        "email": "contact@alphatech.com",
        "contact": "9876543210",
        "products": ["AI Software", "Cloud Hosting"],
        "services": ["IT Consulting", "System Integration"],
        "quantity": 50,
    },
    {
        "company_name": "Blue Wave Industries",
        "address": "204 Industrial Zone, Pune, Maharashtra",
        "email": "info@bluewave.com",
        "contact": "9123456780",
        "products": ["Hydraulic Pumps", "Industrial Valves"],
        "services": ["Machinery Maintenance"],
        "quantity": 120,
    },
    {
        "company_name": "Green Leaf Organics",
        "address": "14 Green Street, Nashik, Maharashtra",
        "email": "support@greenleaf.in",
        "contact": "8899776655",
        "products": ["Organic Fertilizers", "Bio Pesticides"],
        "services": ["Farming Consultation"],
        "quantity": 200,
    },
    {
        "company_name": "PixelCraft Media",
        "address": "501, Cyber Park, Hyderabad, Telangana",
        "email": "hello@pixelcraftmedia.com",
        "contact": "9812345678",
        "products": ["Motion Graphics", "Brand Kits"],
        "services": ["Social Media Marketing", "Video Editing"],
        "quantity": 40,
    },
    {
        "company_name": "EcoNest Interiors",
        "address": "Interior Lane, Bhubaneswar, Odisha",
        "email": "contact@econestinteriors.com",
        "contact": "9654321987",
        "products": ["Modular Kitchen", "Wardrobes"],
        "services": ["Interior Design", "3D Rendering"],
        "quantity": 65,
    },
]


@click.group()
def cli():
    """Datadesk CLI tools."""
    pass


@cli.command()
@click.option("--username", required=True, help="Login name")
@click.option("--email", required=True, help="Email address")
@click.option("--full-name", required=True, help="Display name")
@click.option("--employee-id", required=True, help="Employee code (unique)")
@click.option(
    "--role",
    type=click.Choice([r.value for r in Role]),
    default=Role.EMPLOYEE.value,
    show_default=True,
)
@click.password_option()
def create_user(username: str, email: str, full_name: str, employee_id: str, role: str, password: str):
    """
    Create a user account.

    This is the bootstrap command for the first admin, since self-registration
    only ever creates employees.

    Example:
        python -m datadesk.cli create-user --username admin --email admin@example.com \\
            --full-name "Site Admin" --employee-id ADM001 --role admin
    """
    db = SessionLocal()
    try:
        user = user_service.create_user(
            db,
            UserCreate(
                username=username,
                email=email,
                full_name=full_name,
                employee_id=employee_id,
                role=Role(role),
                password=password,
            ),
        )
        click.echo(f"✓ Created user: {user.username}")
        click.echo(f"  ID: {user.id}")
        click.echo(f"  Role: {user.role}")
    except DashboardError as e:
        raise click.ClickException(e.message) from e
    finally:
        db.close()


@cli.command()
@click.option("--reset", is_flag=True, help="Delete existing companies and Facebook data first")
def seed(reset: bool):
    """
    Load demo companies (unassigned) and Facebook pool records.

    Example:
        python -m datadesk.cli seed --reset
    """
    from datadesk.schemas.company import CompanyCreate

    db = SessionLocal()
    try:
        if reset:
            db.execute(delete(Company))
            db.execute(delete(FacebookData))
            db.commit()
            click.echo("✓ Cleared companies and Facebook data")

        for data in DEMO_COMPANIES:
            company_service.create_company(db, CompanyCreate(**data))

        db.add_all(FacebookData(**data) for data in DEMO_FACEBOOK_DATA)
        db.commit()

        click.echo(f"✓ Seeded {len(DEMO_COMPANIES)} companies")
        click.echo(f"✓ Seeded {len(DEMO_FACEBOOK_DATA)} Facebook records")
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@cli.command()
def pool_status():
    """Show how many companies are unassigned and how big the Facebook pool is."""
    db = SessionLocal()
    try:
        click.echo(f"Unassigned companies: {company_service.count_unassigned(db)}")
        click.echo(f"Facebook pool records: {request_service.count_facebook_pool(db)}")
    finally:
        db.close()


if __name__ == "__main__":
    cli()
