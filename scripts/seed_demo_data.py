"""
Seed script: Populate a demo coffee shop tenant with realistic data.

What it creates:
- Owner user (the tenant) identified by email.
- Default chart of accounts and one bank account.
- Customers (~20) and vendors (~8).
- Products with initial stock and a few POS sales (stock goes down, income in 'Sales Revenue').
- Transactions over the last N days (default 90): income and expenses across accounts.
- Invoices in every status; paid ones create their 'Sales Revenue' income.
- Employees and one payroll run.

Run from the project root:
    python scripts/seed_demo_data.py --email owner@demo-coffee.co --days 90 --sales 40

Note: This is intended for development environments only.
"""

# Add project root to sys.path so `app.*` imports work even if CWD changes
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import argparse
import random
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal

from app.database.database import SessionLocal
from app.modules.auth.models import User
from app.modules.auth.utils import create_access_token
from app.modules.accounts.service import AccountService
from app.modules.bank_accounts.schemas import BankAccountCreate
from app.modules.bank_accounts.service import BankAccountService
from app.modules.contacts.models import ContactType
from app.modules.contacts.schemas import CustomerCreate, VendorCreate
from app.modules.contacts.service import ContactService
from app.modules.inventory.schemas import ProductCreate
from app.modules.inventory.service import InventoryService
from app.modules.invoices.schemas import InvoiceCreate, InvoiceLineItemCreate
from app.modules.invoices.service import InvoiceService
from app.modules.payroll.models import PayType
from app.modules.payroll.schemas import EmployeeCreate
from app.modules.payroll.service import PayrollService
from app.modules.pos.schemas import CartItem, SaleCreate
from app.modules.pos.services import PosSaleService
from app.modules.projects.schemas import ProjectCreate
from app.modules.projects.service import ProjectService
from app.modules.transactions.models import TransactionType
from app.modules.transactions.schemas import TransactionCreate
from app.modules.transactions.service import TransactionService

FIRST_NAMES = ["Amina", "Brian", "Cynthia", "David", "Esther", "Felix", "Grace", "Hassan", "Irene", "James"]
LAST_NAMES = ["Achieng", "Kamau", "Mwangi", "Njeri", "Odhiambo", "Wanjiku", "Kiprono", "Mutua"]

PRODUCTS = [
    ("Espresso beans 1kg", "ESP-1KG", "24.50"),
    ("House blend 500g", "HB-500", "12.00"),
    ("Oat milk 1L", "OAT-1L", "3.00"),
    ("Paper cups (50)", "CUP-50", "6.75"),
    ("Croissant", "CRS-01", "2.20"),
    ("Banana bread slice", "BBS-01", "2.80"),
]

RECURRING_EXPENSES = [
    ("Monthly rent", "Rent", "1200.00"),
    ("Electricity bill", "Utilities", "180.00"),
    ("POS software subscription", "Software", "49.00"),
]

VARIABLE_EXPENSES = [
    ("Coffee beans restock", "Inventory", (150, 600)),
    ("Cleaning supplies", "Office Supplies", (15, 80)),
    ("Delivery fuel", "Transport", (20, 90)),
    ("Instagram ads", "Marketing", (25, 150)),
    ("Team lunch", "Meals & Entertainment", (30, 120)),
]


def pick(seq):
    return random.choice(seq)


def money(low, high) -> Decimal:
    return Decimal(str(round(random.uniform(low, high), 2)))


def get_or_create_owner(db, email: str, name: str) -> User:
    user = db.query(User).filter(User.email == email.lower()).first()
    if user:
        return user
    user = User(email=email.lower(), name=name, is_active=True)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def create_contacts(db, tenant_id, customers_count=20, vendors_count=8):
    customers = []
    vendors = []
    customer_service = ContactService(db, ContactType.CUSTOMER)
    vendor_service = ContactService(db, ContactType.VENDOR)
    for i in range(customers_count):
        name = f"{pick(FIRST_NAMES)} {pick(LAST_NAMES)}"
        customers.append(customer_service.create_contact(
            CustomerCreate(name=name, email=f"customer{i + 1}@example.com", phone=f"07{random.randint(10000000, 99999999)}"),
            tenant_id
        ))
    for i in range(vendors_count):
        vendors.append(vendor_service.create_contact(
            VendorCreate(name=f"Supplier {i + 1} Ltd", email=f"orders{i + 1}@supplier.example.com"),
            tenant_id
        ))
    return customers, vendors


def create_products(db, tenant_id, user_id):
    service = InventoryService(db)
    return [
        service.create_product(
            ProductCreate(name=name, sku=sku, price=Decimal(price), quantity_in_stock=random.randint(40, 120)),
            tenant_id, user_id
        )
        for name, sku, price in PRODUCTS
    ]


def _at(day: date) -> datetime:
    return datetime.combine(day, time(random.randint(8, 18), random.randint(0, 59)), tzinfo=timezone.utc)


def create_transactions(db, tenant_id, bank_account_id, project_id, days: int):
    service = TransactionService(db)
    today = date.today()
    created = 0
    for offset in range(days, -1, -1):
        day = today - timedelta(days=offset)

        if day.day == 1:
            for description, account, amount in RECURRING_EXPENSES:
                service.create_transaction(TransactionCreate(
                    date=_at(day), description=description, amount=Decimal(amount),
                    type=TransactionType.EXPENSE, account=account, bank_account_id=bank_account_id
                ), tenant_id)
                created += 1

        if random.random() < 0.6:
            service.create_transaction(TransactionCreate(
                date=_at(day), description="Catering order", amount=money(80, 450),
                type=TransactionType.INCOME, account="Client Revenue", bank_account_id=bank_account_id,
                project_id=project_id if random.random() < 0.3 else None
            ), tenant_id)
            created += 1

        if random.random() < 0.5:
            description, account, (low, high) = pick(VARIABLE_EXPENSES)
            service.create_transaction(TransactionCreate(
                date=_at(day), description=description, amount=money(low, high),
                type=TransactionType.EXPENSE, account=account, vendor_name=f"Supplier {random.randint(1, 8)} Ltd",
                project_id=project_id if random.random() < 0.2 else None
            ), tenant_id)
            created += 1
    return created


def create_pos_sales(db, tenant_id, user_id, products, sales_count: int):
    service = PosSaleService(db)
    created = 0
    for _ in range(sales_count):
        items = [
            CartItem(product_id=p.id, quantity=random.randint(1, 3))
            for p in random.sample(products, k=random.randint(1, 3))
            if p.quantity_in_stock > 3
        ]
        if not items:
            continue
        service.process_sale(SaleCreate(items=items), tenant_id, user_id)
        created += 1
    return created


def create_invoices(db, tenant_id, customers, invoices_count: int):
    service = InvoiceService(db)
    today = date.today()
    for _ in range(invoices_count):
        issue_date = today - timedelta(days=random.randint(0, 75))
        invoice = service.create_invoice(InvoiceCreate(
            customer_id=pick(customers).id,
            issue_date=issue_date,
            items=[
                InvoiceLineItemCreate(description="Office coffee supply", quantity=Decimal(random.randint(1, 10)),
                                      unit_price=Decimal("24.50")),
                InvoiceLineItemCreate(description="Barista training (hours)", quantity=Decimal(random.randint(1, 4)),
                                      unit_price=Decimal("45.00")),
            ]
        ), tenant_id)

        outcome = random.random()
        if outcome < 0.2:
            continue
        service.send_invoice(invoice.id, tenant_id)
        if outcome < 0.7:
            service.mark_paid(invoice.id, tenant_id)
        elif outcome < 0.8:
            service.void_invoice(invoice.id, tenant_id)
    return invoices_count


def create_employees(db, tenant_id):
    service = PayrollService(db)
    staff = [
        ("Grace Njeri", PayType.SALARY, "42000.00"),
        ("Felix Mutua", PayType.HOURLY, "9.50"),
        ("Irene Achieng", PayType.HOURLY, "8.75"),
    ]
    for name, pay_type, rate in staff:
        email = name.lower().replace(" ", ".") + "@demo-coffee.co"
        service.create_employee(EmployeeCreate(name=name, email=email, pay_type=pay_type, pay_rate=Decimal(rate)),
                                tenant_id)
    return len(staff)


def main():
    parser = argparse.ArgumentParser(description="Seed coffee shop demo data")
    parser.add_argument("--email", default="owner@demo-coffee.co")
    parser.add_argument("--name", default="Demo Coffee Owner")
    parser.add_argument("--days", type=int, default=90, help="Days of transaction history")
    parser.add_argument("--sales", type=int, default=40, help="POS sales to process")
    parser.add_argument("--invoices", type=int, default=25)
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible data")
    args = parser.parse_args()

    if args.seed is not None:
        random.seed(args.seed)

    db = SessionLocal()
    try:
        user = get_or_create_owner(db, args.email, args.name)
        tenant_id = user.id

        seeded = AccountService(db).seed_default_accounts(tenant_id)
        print(f"Accounts created: {seeded.created} (skipped {seeded.skipped})")

        bank_account = BankAccountService(db).create_bank_account(
            BankAccountCreate(account_name="Main checking", bank_name="Equity Bank", account_number="0123456789"),
            tenant_id
        )
        project = ProjectService(db).create_project(
            ProjectCreate(name="Office catering contract", budget=Decimal("5000.00")), tenant_id
        )

        print("Creating contacts (customers/vendors)...")
        customers, vendors = create_contacts(db, tenant_id)
        print(f"Customers: {len(customers)}, Vendors: {len(vendors)}")

        print("Creating products...")
        products = create_products(db, tenant_id, user.id)
        print(f"Products created: {len(products)}")

        print("Creating transactions...")
        print(f"Transactions created: {create_transactions(db, tenant_id, bank_account.id, project.id, args.days)}")

        print("Processing POS sales (decrease stock)...")
        print(f"Sales processed: {create_pos_sales(db, tenant_id, user.id, products, args.sales)}")

        print("Creating invoices...")
        print(f"Invoices created: {create_invoices(db, tenant_id, customers, args.invoices)}")

        print("Creating employees and running payroll...")
        create_employees(db, tenant_id)
        payroll_run = PayrollService(db).run_payroll(tenant_id, user.id)
        print(f"Payroll run total: {payroll_run.total_amount}")

        print("\nSeed completed.")
        print(f"  Owner email: {user.email}")
        print(f"  Tenant ID:   {tenant_id}")
        print("Members invited to this tenant send it in the X-Tenant-ID header.")
        print("Bearer token for API requests:")
        print(f"  {create_access_token({'sub': str(user.id)}, expires_delta=timedelta(days=7))}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
