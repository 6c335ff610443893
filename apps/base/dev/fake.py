import random
from datetime import datetime, time, timedelta

from faker import Faker
from sqlalchemy import select

from apps.volunteer.recurrence import materialize
from main import db
from models import (
    Donation,
    DonationCategory,
    DonationItem,
    Donor,
    Organization,
    RecurringShift,
    Shift,
    ShiftCategory,
    ShiftSignup,
    User,
    UserRole,
    UserStatus,
    WeighingCategory,
    naive_utcnow,
)

SHIFT_CATEGORIES = ["Morning Meals", "Evening Meals", "Food Collection", "Grocery Collection"]
DONATION_CATEGORIES = ["Produce", "Dairy", "Bakery", "Canned Goods", "Frozen"]
DONORS = ["Sobeys", "Atlantic Superstore", "Local Farm Co-op", "Community Drive"]


def randombool(probability):
    return random.random() < probability


class FakeDataGenerator(object):
    def __init__(self, org_name="Demo Kitchen", days=90):
        self.fake = Faker("en_CA")
        self.org_name = org_name
        self.days = days

    def run(self):
        org = Organization.get_by_name(self.org_name)
        if org is None:
            org = Organization(self.org_name, '["1 Demo Street, Halifax NS"]')
            org.incoming_dollar_value = 2.5
            db.session.add(org)

        admin = User.get_by_email("admin@test.invalid")
        if admin is None:
            admin = User("admin@test.invalid", "Test", "Admin", organization=org, role=UserRole.ADMIN)
            admin.status = UserStatus.APPROVED
            admin.set_password("admin")
            db.session.add(admin)

        volunteers = []
        for _ in range(20):
            email = self.fake.safe_email()
            if User.get_by_email(email):
                continue
            user = User(email, self.fake.first_name(), self.fake.last_name(), organization=org)
            user.status = random.choice(list(UserStatus)) if randombool(0.3) else UserStatus.APPROVED
            db.session.add(user)
            volunteers.append(user)

        db.session.commit()

        categories = [self.get_or_create(ShiftCategory, org, name) for name in SHIFT_CATEGORIES]
        donation_categories = [self.get_or_create(DonationCategory, org, name) for name in DONATION_CATEGORIES]
        donors = [self.get_or_create(Donor, org, name) for name in DONORS]

        if not WeighingCategory.get_by_name(org.id, "Banana box"):
            weighing = WeighingCategory(organization=org, category="Banana box")
            weighing.set_weight(18.14, "kg")
            db.session.add(weighing)
        db.session.commit()

        self.create_shifts(org, categories, volunteers)
        self.create_donations(org, donors, donation_categories)
        self.create_recurring(org, categories, volunteers)

    def get_or_create(self, model, org, name):
        obj = db.session.execute(
            select(model).where(model.organization_id == org.id, model.name == name)
        ).scalar_one_or_none()
        if obj is None:
            obj = model(organization=org, name=name)
            db.session.add(obj)
        return obj

    def create_shifts(self, org, categories, volunteers):
        today = datetime.combine(naive_utcnow().date(), time())
        for day in range(self.days):
            date = today - timedelta(days=day)
            for category in categories:
                if not randombool(0.6):
                    continue
                start = date + timedelta(hours=random.choice([13, 16, 21]))
                shift = Shift(
                    organization=org,
                    category=category,
                    name=f"{category.name} shift",
                    start=start,
                    end=start + timedelta(hours=random.choice([1, 2, 3])),
                    location=self.fake.street_address(),
                    slots=random.randint(2, 6),
                )
                db.session.add(shift)

                for user in random.sample(volunteers, min(len(volunteers), random.randint(0, shift.slots))):
                    signup = ShiftSignup(user, shift, meals_served=random.randint(0, 80))
                    if randombool(0.8):
                        signup.check_in = shift.start + timedelta(minutes=random.randint(-10, 20))
                        signup.check_out = shift.end + timedelta(minutes=random.randint(-30, 30))
                    db.session.add(signup)
        db.session.commit()

    def create_donations(self, org, donors, categories):
        now = naive_utcnow()
        for _ in range(self.days * 2):
            donation = Donation(
                organization=org,
                donor=random.choice(donors) if randombool(0.9) else None,
                created_at=now - timedelta(minutes=random.randint(0, self.days * 24 * 60)),
            )
            for category in random.sample(categories, random.randint(1, 3)):
                donation.items.append(
                    DonationItem(category=category, weight_kg=round(random.uniform(0.5, 40), 2))
                )
            donation.summary = round(sum(i.weight_kg for i in donation.items), 2)
            db.session.add(donation)
        db.session.commit()

    def create_recurring(self, org, categories, volunteers):
        for category in categories[:2]:
            recurring = RecurringShift(
                organization=org,
                category=category,
                name=f"Weekly {category.name}",
                day_of_week=random.randint(0, 6),
                start_time=time(17, 0),
                end_time=time(19, 0),
                location="Main kitchen",
                slots=4,
            )
            db.session.add(recurring)
            db.session.commit()

            approved = [u.id for u in volunteers if u.status == UserStatus.APPROVED][:3]
            if approved:
                materialize(org.id, recurring.id, approved)
