from datetime import datetime, timedelta, timezone

from postdesk.auth import create_access_token
from postdesk.database import SessionLocal, engine, Base
from postdesk.models import Applicant, Event, EventPost, User

# Create tables
Base.metadata.create_all(bind=engine)

db = SessionLocal()

# Clear existing data
db.query(Applicant).delete()
db.query(EventPost).delete()
db.query(Event).delete()
db.query(User).delete()

now = datetime.now(timezone.utc)

# Sample users, one per role
users = [
    User(email="admin@example.com", name="Admin", role="ADMIN"),
    User(email="lead@example.com", name="Lead", role="LEAD"),
    User(email="subhead@example.com", name="Subhead", role="SUBHEAD"),
    User(email="member@example.com", name="Member", role="MEMBER"),
]
db.add_all(users)
db.commit()

# Sample event
event = Event(
    name="Open Source Summit",
    description="Annual community meetup",
    starts_at=now + timedelta(days=30),
)
db.add(event)
db.commit()

member = users[3]

# Sample posts
posts = [
    EventPost(
        event_id=event.id,
        created_by=member.id,
        name="Save the date",
        platform="LINKEDIN",
        caption="The Open Source Summit is one month away!",
        post_schedule_date=now + timedelta(days=2),
        status="DRAFT",
    ),
    EventPost(
        event_id=event.id,
        created_by=member.id,
        name="Speaker lineup",
        platform="LINKEDIN",
        caption="Meet this year's speakers.",
        post_schedule_date=now + timedelta(days=7),
        status="PENDING_APPROVAL",
    ),
]

# Sample application
application = Applicant(
    user_id=member.id,
    event_id=event.id,
    role="Volunteer",
    team="Logistics",
    motivation="I helped run last year's registration desk.",
    status="PENDING",
)

db.add_all(posts)
db.add(application)
db.commit()

print("Database seeded successfully!")
print(f"  - {len(users)} users")
print(f"  - 1 event ({event.name})")
print(f"  - {len(posts)} event posts")
print(f"  - 1 hiring application")
print()
print("Development tokens:")
for user in users:
    print(f"  {user.role:8} {create_access_token({'sub': user.id})}")

db.close()
