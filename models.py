from datetime import datetime
from sqlalchemy import (
    Column, String, Integer, Float, Date, DateTime,
    Enum, ForeignKey, Boolean
)
from sqlalchemy.orm import relationship
from database import Base

USER_TYPES = ("Student", "Staff", "Visitor")
ZONE_TYPES = ("Student", "Staff", "Visitor", "Mixed", "Disabled")
LOT_STATUSES = ("Available", "Occupied", "Reserved", "Maintenance")
RESERVATION_STATUSES = ("Reserved", "CheckedIn", "Completed", "Cancelled")
# Reservations in these states hold their lot for their time window
ACTIVE_RESERVATION_STATUSES = ("Reserved", "CheckedIn")


class Faculty(Base):
    __tablename__ = "faculties"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    code = Column(String, unique=True, nullable=False)
    location_desc = Column(String, nullable=True)

    campus_users = relationship("CampusUser", back_populates="faculty")
    parking_zones = relationship("ParkingZone", back_populates="faculty")
    reservations = relationship("Reservation", back_populates="faculty")


class CampusUser(Base):
    __tablename__ = "campus_users"
    id = Column(Integer, primary_key=True, index=True)
    faculty_id = Column(Integer, ForeignKey("faculties.id"), nullable=False)
    full_name = Column(String, nullable=False)
    user_type = Column(Enum("Student", "Staff", name="campus_user_types"), nullable=False)
    student_no = Column(String, unique=True, index=True, nullable=True)
    staff_no = Column(String, unique=True, index=True, nullable=True)
    email = Column(String, unique=True, index=True, nullable=False)
    phone_num = Column(String, nullable=True)
    status = Column(Enum("Active", "Inactive", name="campus_user_status"), default="Active", nullable=False)

    faculty = relationship("Faculty", back_populates="campus_users")
    vehicles = relationship("Vehicle", back_populates="campus_user")


class Admin(Base):
    __tablename__ = "admins"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    username = Column(String, unique=True, nullable=False)
    password_hash = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False)
    phone_num = Column(String, nullable=True)
    role = Column(String, default="admin", nullable=False)

    fines = relationship("Fine", back_populates="admin")
    payments = relationship("Payment", back_populates="admin")


class ParkingZone(Base):
    __tablename__ = "parking_zones"
    id = Column(Integer, primary_key=True, index=True)
    faculty_id = Column(Integer, ForeignKey("faculties.id"), nullable=False)
    name = Column(String, nullable=False)
    zone_type = Column(Enum(*ZONE_TYPES, name="zone_types"), nullable=False)
    capacity = Column(Integer, default=0, nullable=False)
    location_desc = Column(String, nullable=True)

    faculty = relationship("Faculty", back_populates="parking_zones")
    parking_lots = relationship("ParkingLot", back_populates="zone")
    permits = relationship("Permit", back_populates="zone")
    reservations = relationship("Reservation", back_populates="zone")


class ParkingLot(Base):
    __tablename__ = "parking_lots"
    id = Column(Integer, primary_key=True, index=True)
    zone_id = Column(Integer, ForeignKey("parking_zones.id"), nullable=False)
    lot_number = Column(String, nullable=False)
    status = Column(Enum(*LOT_STATUSES, name="lot_status"), default="Available", nullable=False)
    is_disabled_friendly = Column(Boolean, default=False, nullable=False)

    zone = relationship("ParkingZone", back_populates="parking_lots")
    reservations = relationship("Reservation", back_populates="lot")
    parking_sessions = relationship("ParkingSession", back_populates="lot")


class Vehicle(Base):
    __tablename__ = "vehicles"
    id = Column(Integer, primary_key=True, index=True)
    campus_user_id = Column(Integer, ForeignKey("campus_users.id"), nullable=True)
    plate_num = Column(String, unique=True, index=True, nullable=False)
    vehicle_type = Column(String, nullable=False)
    owner_name = Column(String, nullable=False)
    owner_type = Column(Enum(*USER_TYPES, name="owner_types"), nullable=False)
    contact_num = Column(String, nullable=True)

    campus_user = relationship("CampusUser", back_populates="vehicles")
    permits = relationship("Permit", back_populates="vehicle")
    reservations = relationship("Reservation", back_populates="vehicle")
    parking_sessions = relationship("ParkingSession", back_populates="vehicle")


class Permit(Base):
    __tablename__ = "permits"
    id = Column(Integer, primary_key=True, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False)
    zone_id = Column(Integer, ForeignKey("parking_zones.id"), nullable=False)
    permit_type = Column(String, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    status = Column(Enum("Active", "Expired", "Revoked", name="permit_status"), default="Active", nullable=False)

    vehicle = relationship("Vehicle", back_populates="permits")
    zone = relationship("ParkingZone", back_populates="permits")


class Reservation(Base):
    __tablename__ = "reservations"
    id = Column(Integer, primary_key=True, index=True)
    faculty_id = Column(Integer, ForeignKey("faculties.id"), nullable=False)
    zone_id = Column(Integer, ForeignKey("parking_zones.id"), nullable=False)
    lot_id = Column(Integer, ForeignKey("parking_lots.id"), nullable=False, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False)
    reservation_date = Column(Date, nullable=False, index=True)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    status = Column(Enum(*RESERVATION_STATUSES, name="reservation_status"), default="Reserved", nullable=False)
    user_type = Column(Enum(*USER_TYPES, name="reservation_user_types"), nullable=False)
    proof_code = Column(String, unique=True, index=True, nullable=False)

    faculty = relationship("Faculty", back_populates="reservations")
    zone = relationship("ParkingZone", back_populates="reservations")
    lot = relationship("ParkingLot", back_populates="reservations")
    vehicle = relationship("Vehicle", back_populates="reservations")
    parking_sessions = relationship("ParkingSession", back_populates="reservation")


class ParkingSession(Base):
    __tablename__ = "parking_sessions"
    id = Column(Integer, primary_key=True, index=True)
    lot_id = Column(Integer, ForeignKey("parking_lots.id"), nullable=False)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False)
    reservation_id = Column(Integer, ForeignKey("reservations.id"), nullable=True)
    entry_time = Column(DateTime, default=datetime.utcnow, nullable=False)
    exit_time = Column(DateTime, nullable=True)
    session_type = Column(Enum("Reservation", "WalkIn", name="session_types"), nullable=False)
    is_violation = Column(Boolean, default=False, nullable=False)

    lot = relationship("ParkingLot", back_populates="parking_sessions")
    vehicle = relationship("Vehicle", back_populates="parking_sessions")
    reservation = relationship("Reservation", back_populates="parking_sessions")
    fines = relationship("Fine", back_populates="session")


class Fine(Base):
    __tablename__ = "fines"
    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(Integer, ForeignKey("parking_sessions.id"), nullable=False)
    admin_id = Column(Integer, ForeignKey("admins.id"), nullable=False)
    issued_date = Column(DateTime, default=datetime.utcnow, nullable=False)
    fine_type = Column(String, nullable=False)
    amount = Column(Float, nullable=False)
    status = Column(Enum("Unpaid", "Paid", name="fine_status"), default="Unpaid", nullable=False)
    remarks = Column(String, nullable=True)

    session = relationship("ParkingSession", back_populates="fines")
    admin = relationship("Admin", back_populates="fines")
    payments = relationship("Payment", back_populates="fine")


class Payment(Base):
    __tablename__ = "payments"
    id = Column(Integer, primary_key=True, index=True)
    fine_id = Column(Integer, ForeignKey("fines.id"), nullable=False)
    admin_id = Column(Integer, ForeignKey("admins.id"), nullable=True) # null for online payments
    payment_date = Column(DateTime, default=datetime.utcnow, nullable=False)
    amount_paid = Column(Float, nullable=False)
    payment_method = Column(Enum("Cash", "Card", name="payment_methods"), nullable=False)
    receipt_num = Column(String, nullable=True)
    gateway_ref = Column(String, unique=True, nullable=True)

    fine = relationship("Fine", back_populates="payments")
    admin = relationship("Admin", back_populates="payments")
