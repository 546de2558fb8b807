"""
Data Seeder for ClientDesk.
Populates the database with realistic data for testing and demo purposes.

Usage:
    python scripts/seed_data.py [user_id]
"""

import asyncio
import random
import sys
from datetime import datetime, timedelta, date
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from clientdesk.domain.models import InvoiceStatus, TaskStatus
from clientdesk.infra.config import get_settings
from clientdesk.infra.db import DatabaseEngine, init_db
from clientdesk.services import ClientService, InvoiceService, TaskService, TimeTrackingService

DEMO_CLIENTS = [
    {"name": "Acme Corp", "email": "billing@acme.example", "phone": "+1 555 0100",
     "company": "Acme Corporation", "address": "1 Road Runner Way"},
    {"name": "Jane Miller", "email": "jane@miller.example", "phone": "+1 555 0101",
     "company": "Miller Design", "address": ""},
    {"name": "Globex", "email": "ap@globex.example", "phone": "",
     "company": "Globex Inc.", "address": "42 Cypress Creek"},
]

DEMO_TASKS = {
    "Acme Corp": ["Website redesign", "SEO audit"],
    "Jane Miller": ["Logo refresh", "Brand guidelines"],
    "Globex": ["API integration"],
}


async def seed(user_id: str):
    settings = get_settings()
    await init_db(settings.get_db_url())
    print(f"Seeding demo data for user '{user_id}' into {settings.get_db_url()}")

    client_service = ClientService(user_id)
    task_service = TaskService(user_id)
    time_service = TimeTrackingService(user_id)
    invoice_service = InvoiceService(user_id, preferences=settings.preferences)

    today = date.today()
    start = datetime.combine(today - timedelta(days=28), datetime.min.time())

    # 1. Clients
    clients = {}
    for data in DEMO_CLIENTS:
        clients[data["name"]] = await client_service.create_client(data)
        print(f"Created client: {data['name']}")

    # 2. Tasks, a couple already completed and one overdue
    tasks = []
    for client_name, titles in DEMO_TASKS.items():
        for title in titles:
            task = await task_service.create_task({
                "client_id": clients[client_name].id,
                "title": title,
                "description": f"{title} for {client_name}",
                "status": random.choice([TaskStatus.PENDING, TaskStatus.IN_PROGRESS]),
                "due_date": start + timedelta(days=random.randint(14, 45)),
            })
            tasks.append(task)
            print(f"Created task: {title}")
    await task_service.update_task(tasks[0].id, {"status": TaskStatus.COMPLETED})

    # 3. Time entries on working days, 9:00 - 12:00 and 13:00 - 16:30
    current = start
    while current.date() <= today:
        if current.weekday() < 5:
            for hour, minutes in ((9, 180), (13, 210)):
                task = random.choice(tasks)
                begin = current.replace(hour=hour)
                await time_service.add_entry({
                    "task_id": task.id,
                    "start_time": begin,
                    "end_time": begin + timedelta(minutes=minutes),
                    "notes": "Morning session" if hour == 9 else "Afternoon session",
                })
            print(f"Generated entries for {current.date()}")
        current += timedelta(days=1)

    # 4. Invoices, one of each status
    for client_name, status in zip(clients, (InvoiceStatus.PAID, InvoiceStatus.UNPAID, InvoiceStatus.OVERDUE)):
        invoice = await invoice_service.create_invoice({
            "client_id": clients[client_name].id,
            "items": [
                {"description": "Consulting", "quantity": random.randint(5, 20), "rate": 85},
                {"description": "Project management", "quantity": 2, "rate": 60},
            ],
            "due_date": datetime.combine(today + timedelta(days=14), datetime.min.time()),
            "status": status,
        })
        print(f"Created invoice: {invoice.invoice_number} ({status.value})")

    await DatabaseEngine.dispose_instance()
    print("Seeding complete.")


if __name__ == "__main__":
    user = sys.argv[1] if len(sys.argv) > 1 else (get_settings().default_user_id or "demo-user")
    asyncio.run(seed(user))
