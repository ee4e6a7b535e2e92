"""Seed the database with a demo trainer, clients, rate plans and one week of sessions."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import date, timedelta
from trainer_planner.database import SessionLocal, engine, Base
import trainer_planner.models  # noqa: F401

from trainer_planner.models.user import User, TrainerProfile
from trainer_planner.models.client import Client, RatePlan, StaffTrainer
from trainer_planner.models.session import TrainingSession, SessionParticipant
from trainer_planner.services.scheduling_template_service import default_data
from trainer_planner.models.scheduling_template import SchedulingTemplate


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if db.query(User).count() > 0:
            print("Database already seeded. Skipping.")
            return

        trainer = User(email="trainer@example.com", name="Anna Schmidt")
        db.add(trainer)
        db.flush()

        db.add(TrainerProfile(
            owner_id=trainer.user_id,
            first_name="Anna",
            last_name="Schmidt",
            address="Hauptstr. 1\n10115 Berlin",
            iban="DE02120300000000202051",
            tax_number="12/345/67890",
            small_business=False,
            vat_rate=19,
        ))

        # Clients (Leo's invoices go to Mia)
        mia = Client(owner_id=trainer.user_id, name="Mia Becker", contact_email="becker@example.com",
                     billing_address="Gartenweg 2\n10117 Berlin")
        db.add(mia)
        db.flush()
        clients = [
            mia,
            Client(owner_id=trainer.user_id, name="Leo Becker", billing_client_id=mia.client_id),
            Client(owner_id=trainer.user_id, name="Jonas Weber", contact_phone="0170 1234567"),
        ]
        db.add_all(clients[1:])
        db.flush()

        # Rate plans
        plans = [
            RatePlan(owner_id=trainer.user_id, name="Einzeltraining", price_per_hour=60, billing_mode="per_session"),
            RatePlan(owner_id=trainer.user_id, name="Gruppentraining", price_per_hour=90, billing_mode="per_client"),
            RatePlan(owner_id=trainer.user_id, name="Monatsabo", price_per_hour=120, billing_mode="monthly"),
        ]
        db.add_all(plans)
        db.add(StaffTrainer(owner_id=trainer.user_id, name="Tom Krüger", hourly_rate=20))
        db.add(SchedulingTemplate(owner_id=trainer.user_id, name="Sommer", is_active=True, data=default_data()))
        db.flush()

        # This week's sessions
        monday = date.today() - timedelta(days=date.today().weekday())
        schedule = [
            (0, "16:00", "17:00", [mia], plans[0], "completed"),
            (2, "17:00", "18:30", [mia, clients[1]], plans[1], "planned"),
            (4, "15:00", "16:00", [clients[2]], plans[2], "planned"),
        ]
        for offset, start, end, members, plan, status in schedule:
            session = TrainingSession(
                owner_id=trainer.user_id,
                session_date=monday + timedelta(days=offset),
                start_time=start,
                end_time=end,
                rate_plan_id=plan.rate_plan_id,
                status=status,
            )
            db.add(session)
            db.flush()
            for member in members:
                db.add(SessionParticipant(session_id=session.session_id, client_id=member.client_id))

        db.commit()
        print("Seed data inserted successfully.")
        print(f"  Clients: {len(clients)}")
        print(f"  Rate plans: {len(plans)}")
        print(f"  Sessions: {len(schedule)}")
        print()
        print("Test login:")
        print(f"  email={trainer.email}")
    except Exception as e:
        db.rollback()
        print(f"Seed failed: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed()
