from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime, timezone
from decimal import Decimal


MAX_PASSWORD_BYTES = 72
MAX_AMOUNT = Decimal("99999999.99")


#------------------------USER------------------------
class UserCreate(BaseModel):
    username: str
    password: str
    f_name: Optional[str] = None
    l_name: Optional[str] = None
    mobile_no: Optional[str] = None

    @field_validator("username", "password")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("username/password required")
        return value

    @field_validator("password")
    @classmethod
    def fits_bcrypt(cls, value: str) -> str:
        # bcrypt only takes the first 72 bytes and refuses anything longer
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
        return value


class UserLogin(BaseModel):
    username: str
    password: str


class UserRegistered(BaseModel):
    message: str
    user_id: int


class UserProfile(BaseModel):
    user_id: int
    username: str
    f_name: Optional[str] = None

    class Config:
        from_attributes = True


#------------------------TOKEN------------------------
class Token(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserProfile


class TokenData(BaseModel):
    user_id: int
    username: str


#------------------------TRAIN------------------------
class FareClass(BaseModel):
    class_type: str
    fare: Decimal

    class Config:
        from_attributes = True


class TrainResponse(BaseModel):
    train_no: int
    train_name: str
    source: Optional[str] = None
    destination: Optional[str] = None
    total_capacity: int
    seat_available: int
    classes: List[FareClass] = []

    class Config:
        from_attributes = True


class SeatAvailability(BaseModel):
    train_no: int
    available_seats: int
    total_capacity: int


class RecentBooking(BaseModel):
    pnr_no: str
    passenger_name: str
    booking_time: Optional[datetime] = None

    class Config:
        from_attributes = True


class TrainStatus(BaseModel):
    train_details: TrainResponse
    booked_tickets_count: int
    actual_available: int
    recent_bookings: List[RecentBooking]


#------------------------BOOKING------------------------
class BookingCreate(BaseModel):
    train_no: int
    passenger_name: str
    class_type: str
    seat_no: Optional[str] = None
    source: str
    destination: str
    date_time: datetime      # departure
    amount: Decimal = Field(default=Decimal("0.00"), ge=0, le=MAX_AMOUNT)   # fits payments.amount NUMERIC(10, 2)
    bank: Optional[str] = None
    card_no: Optional[str] = None

    @field_validator("passenger_name", "class_type", "source", "destination")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("date_time")
    @classmethod
    def to_naive_utc(cls, value: datetime) -> datetime:
        # Everything is stored as naive UTC, naive input is taken to be UTC already
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value


class BookingResponse(BaseModel):
    message: str
    pnr_no: str
    transaction_id: int


class CancelResponse(BaseModel):
    message: str
    pnr_no: str


class TicketDetails(BaseModel):
    pnr_no: str
    train_no: int
    passenger_name: str
    class_type: str
    seat_no: Optional[str] = None
    source: str
    destination: str
    date_time: datetime
    booking_time: Optional[datetime] = None
    transaction_id: Optional[int] = None

    class Config:
        from_attributes = True


#------------------------PAYMENT------------------------
class PaymentResponse(BaseModel):
    transaction_id: int
    pnr_no: str
    bank: str
    card_no: str
    amount: Decimal

    class Config:
        from_attributes = True


#------------------------REPORTS------------------------
class Summary(BaseModel):
    total_users: int
    total_trains: int
    total_bookings: int
    total_revenue: Decimal
    today_bookings: int


class PopularTrain(BaseModel):
    train_no: int
    train_name: str
    source: Optional[str] = None
    destination: Optional[str] = None
    total_bookings: int


#------------------------ADMIN------------------------
class Correction(BaseModel):
    train_no: int
    old_available: int
    new_available: int
    booked_tickets: int


class ReconcileResponse(BaseModel):
    fixes_applied: int
    fixes: List[Correction]
