"""
Demo catalogue for a fresh database.

Run after `alembic upgrade head` (from backend/):
    python scripts/seed.py
"""

from clinic_booking.database import SessionLocal
from clinic_booking.models.generated import Services, Staff


# ======================================================
# DATA
# ======================================================

SERVICES = [
    # name, description, duration_minutes, sort_order
    ("First visit", "Examination and consultation for new patients", 60, 1),
    ("Follow-up", "Continuing treatment", 30, 2),
    ("Cleaning", "Scaling and polishing", 45, 3),
    ("Check-up", "Regular oral check", 30, 4),
    ("Cavity treatment", "Filling and restoration", 30, 5),
    ("Whitening", "Professional tooth whitening", 60, 6),
]

STAFF = [
    # name, title, sort_order
    ("Taro Hiko", "Director", 1),
    ("Hanako Yamada", "Dentist", 2),
    ("Ichiro Suzuki", "Dental hygienist", 3),
]


# ======================================================
# MAIN LOGIC
# ======================================================

def main():
    db = SessionLocal()
    try:
        # --- services ---
        if db.query(Services).count() == 0:
            for name, description, duration, sort_order in SERVICES:
                db.add(Services(
                    name=name,
                    description=description,
                    duration_minutes=duration,
                    sort_order=sort_order,
                ))
            print(f"[SEED] {len(SERVICES)} services created")
        else:
            print("[SEED] Services already exist, nothing to do")

        # --- staff ---
        if db.query(Staff).count() == 0:
            for name, title, sort_order in STAFF:
                db.add(Staff(name=name, title=title, sort_order=sort_order))
            print(f"[SEED] {len(STAFF)} staff created")
        else:
            print("[SEED] Staff already exist, nothing to do")

        db.commit()
    finally:
        db.close()


# ======================================================
# ENTRYPOINT
# ======================================================

if __name__ == "__main__":
    main()
