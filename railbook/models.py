from sqlalchemy import Column, Integer, String, ForeignKey, Numeric, DateTime, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func # <--- server-side time

from .database import Base


# --- LAYER 1: ASSETS ---
class Train(Base):
    __tablename__ = "trains"
    train_no = Column(Integer, primary_key=True, autoincrement=False, index=True)
    train_name = Column(String, nullable=False)
    source = Column(String, index=True)
    destination = Column(String, index=True)
    total_capacity = Column(Integer, nullable=False, default=50)
    seat_available = Column(Integer, nullable=False)   # denormalized counter, see services/inventory.py

    classes = relationship("TrainClass", back_populates="train", order_by="TrainClass.class_type")
    tickets = relationship("Ticket", back_populates="train")

    __table_args__ = (
        CheckConstraint("seat_available >= 0 AND seat_available <= total_capacity", name="trains_seat_available_check"),
    )


class TrainClass(Base):
    __tablename__ = "train_classes"
    id = Column(Integer, primary_key=True, index=True)
    train_no = Column(Integer, ForeignKey("trains.train_no"), nullable=False)
    class_type = Column(String, nullable=False)
    fare = Column(Numeric(10, 2), nullable=False)

    train = relationship("Train", back_populates="classes")
    __table_args__ = (UniqueConstraint("train_no", "class_type", name="train_classes_train_no_class_type_key"),)


# --- LAYER 2: PEOPLE ---
class User(Base):
    __tablename__ = "users"
    user_id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, nullable=False)
    password = Column(String, nullable=False)    # bcrypt hash, never plaintext
    f_name = Column(String)
    l_name = Column(String)
    mobile_no = Column(String, unique=True, nullable=True)


# --- LAYER 3: TRANSACTIONS ---
class Ticket(Base):
    __tablename__ = "tickets"
    pnr_no = Column(String, primary_key=True, index=True)
    train_no = Column(Integer, ForeignKey("trains.train_no"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False, index=True)
    passenger_name = Column(String, nullable=False)
    class_type = Column(String, nullable=False)
    seat_no = Column(String, nullable=True)     # free text, no seat map
    source = Column(String, nullable=False)
    destination = Column(String, nullable=False)
    date_time = Column(DateTime, nullable=False)   # departure, naive UTC
    booking_time = Column(DateTime, server_default=func.now())

    train = relationship("Train", back_populates="tickets")
    user = relationship("User")
    payment = relationship("Payment", back_populates="ticket", uselist=False)


class Payment(Base):
    __tablename__ = "payments"
    transaction_id = Column(Integer, primary_key=True, index=True)
    pnr_no = Column(String, ForeignKey("tickets.pnr_no"), unique=True, nullable=False)
    bank = Column(String, nullable=False, default="N/A")
    card_no = Column(String(4), nullable=False, default="XXXX")   # last 4 digits only
    amount = Column(Numeric(10, 2), nullable=False, default=0)

    ticket = relationship("Ticket", back_populates="payment")
