from decimal import Decimal

from railbook.database import SessionLocal, engine
from railbook import models
from railbook.config import settings

models.Base.metadata.create_all(bind=engine)

# Initialize DB Session
db = SessionLocal()

TRAINS = [
    {"train_no": 12301, "train_name": "Rajdhani Express", "source": "New Delhi", "destination": "Howrah", "total_capacity": 100},
    {"train_no": 12951, "train_name": "Tejas Express", "source": "New Delhi", "destination": "Mumbai Central", "total_capacity": 50},
    {"train_no": 12201, "train_name": "Garib Rath", "source": "New Delhi", "destination": "Howrah", "total_capacity": 120},
    {"train_no": 12002, "train_name": "Shatabdi Express", "source": "New Delhi", "destination": "Jaipur", "total_capacity": None},
]

FARES = {
    12301: {"1A": "4550.00", "2A": "2700.00", "3A": "1900.00"},
    12951: {"CC": "1450.00", "EC": "2850.00"},
    12201: {"3A": "1250.00"},
    12002: {"CC": "850.00", "EC": "1650.00"},
}


def seed_data():
    try:
        # --- 1. CLEAN SLATE (children before parents) ---
        print("Clearing old data...")
        db.query(models.Payment).delete()
        db.query(models.Ticket).delete()
        db.query(models.TrainClass).delete()
        db.query(models.Train).delete()
        # Users are kept so logins survive a reseed
        db.commit()
        print("Database clean.")
    except Exception as e:
        db.rollback()
        print(f"Error during cleanup: {e}")
        return

    print("Planting new seeds...")

    # --- 2. CREATE TRAINS (counter starts full) ---
    for t_data in TRAINS:
        capacity = t_data["total_capacity"] or settings.default_capacity
        db.add(models.Train(**{**t_data, "total_capacity": capacity, "seat_available": capacity}))
    db.commit()
    print(f"Created {len(TRAINS)} trains.")

    # --- 3. FARE CLASSES ---
    classes = [
        models.TrainClass(train_no=train_no, class_type=class_type, fare=Decimal(fare))
        for train_no, fares in FARES.items()
        for class_type, fare in fares.items()
    ]
    db.add_all(classes)
    db.commit()
    print(f"Added {len(classes)} fare classes.")

    print("SYSTEM READY!")


if __name__ == "__main__":
    try:
        seed_data()
    finally:
        db.close()
