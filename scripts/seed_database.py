"""Database seeding script (users and a few debts between them)"""
import asyncio
import sys
from decimal import Decimal
from pathlib import Path

# Add parent directory to path to import app modules
sys.path.append(str(Path(__file__).parent.parent))

from sqlalchemy import func, select
from app.database import AsyncSessionLocal, init_models
from app.models.debt import Debt, DebtStatus, Priority
from app.models.user import User
from app.core.security import hash_password
from app.utils.datetime_utils import utcnow

SEED_PASSWORD = "password123"

USERS_DATA = [
    {"email": "alice@example.com", "full_name": "Alice Martin"},
    {"email": "bob@example.com", "full_name": "Bob Jansen"},
    {"email": "carol@example.com", "full_name": "Carol de Vries"},
    {"email": "dave@example.com", "full_name": "Dave Bakker"},
    {"email": "erin@example.com", "full_name": "Erin Visser"},
]

# (creditor email, debtor email, description, amount, category, priority, paid)
DEBTS_DATA = [
    ("alice@example.com", "bob@example.com", "Dinner at Luigi's", "25.50", "food", Priority.MEDIUM, False),
    ("alice@example.com", "carol@example.com", "Concert tickets", "80.00", "entertainment", Priority.HIGH, False),
    ("bob@example.com", "alice@example.com", "Taxi to the airport", "42.00", "transport", Priority.LOW, True),
    ("carol@example.com", "dave@example.com", "Shared groceries", "63.20", "food", Priority.MEDIUM, False),
    ("dave@example.com", "erin@example.com", "Rent share", "450.00", "housing", Priority.URGENT, False),
]


async def seed_users(session) -> dict:
    """Create the seed users that don't exist yet, return them by email"""
    users = {}
    created_count = 0
    skipped_count = 0

    for user_data in USERS_DATA:
        result = await session.execute(
            select(User).where(User.email == user_data["email"])
        )
        existing_user = result.scalar_one_or_none()

        if existing_user:
            print(f"  ⏭️  User '{user_data['email']}' already exists, skipping...")
            users[existing_user.email] = existing_user
            skipped_count += 1
            continue

        new_user = User(
            email=user_data["email"],
            hashed_password=hash_password(SEED_PASSWORD),
            full_name=user_data["full_name"],
            is_active=True
        )

        session.add(new_user)
        users[new_user.email] = new_user
        print(f"  ✅ Created user '{user_data['full_name']}' ({user_data['email']})")
        created_count += 1

    await session.flush()

    print(f"\n📊 Users: {created_count} created, {skipped_count} skipped")
    return users


async def seed_debts(session, users: dict) -> None:
    """Create sample debts unless the table already has rows"""
    existing = (await session.execute(select(func.count(Debt.id)))).scalar_one()
    if existing:
        print(f"  ⏭️  {existing} debts already present, skipping...")
        return

    now = utcnow()
    for creditor_email, debtor_email, description, amount, category, priority, paid in DEBTS_DATA:
        session.add(
            Debt(
                description=description,
                amount=Decimal(amount),
                currency="USD",
                creditor_id=users[creditor_email].id,
                debtor_id=users[debtor_email].id,
                category=category,
                priority=priority,
                status=DebtStatus.PAID if paid else DebtStatus.PENDING,
                is_paid=paid,
                paid_at=now if paid else None,
            )
        )
        print(f"  ✅ Created debt '{description}' ({amount} USD)")

    print(f"\n📊 Debts: {len(DEBTS_DATA)} created")


async def main():
    """Main function to run seeding"""
    print("🌱 Seeding database with test users and debts...\n")

    try:
        await init_models()
        async with AsyncSessionLocal() as session:
            users = await seed_users(session)
            await seed_debts(session, users)
            await session.commit()
        print(f"\n🔐 All seed users have password: {SEED_PASSWORD}")
        print("\n✨ Database seeding completed successfully!")
    except Exception as e:
        print(f"\n❌ Error seeding database: {str(e)}")
        raise


if __name__ == "__main__":
    asyncio.run(main())
