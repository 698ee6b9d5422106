"""
SQLAlchemy ORM Models
"""

from sqlalchemy import Column, Integer, String, Boolean, Date, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship, declarative_base
from sqlalchemy.sql import func

Base = declarative_base()

# Condition flags a report can carry, in display order
REPORT_FLAGS = ('obstacle', 'groomed', 'icy', 'powder', 'moguls', 'granular', 'thin_cover', 'packed', 'wet')

class Resort(Base):
    __tablename__ = 'resorts'

    resort_id = Column(Integer, primary_key=True)
    resort_name = Column(String(100), nullable=False)
    city = Column(String(50))
    state = Column(String(2))
    website = Column(String(200))
    total_acres = Column(Integer)
    canyon_name = Column(String(50))
    ski_patrol_phone = Column(String(12))
    has_night_skiing = Column(Boolean, default=False)
    date_created = Column(DateTime, server_default=func.now())

    # Relationships
    areas = relationship("Area", back_populates="resort", cascade="all, delete-orphan", passive_deletes=True)
    fans = relationship("User", back_populates="favorite_resort", passive_deletes=True)

class Area(Base):
    __tablename__ = 'areas'

    area_id = Column(Integer, primary_key=True)
    resort_id = Column(Integer, ForeignKey('resorts.resort_id', ondelete='CASCADE'), nullable=False, index=True)
    base_area = Column(String(50))
    area_name = Column(String(50))
    date_created = Column(DateTime, server_default=func.now())

    # Relationships
    resort = relationship("Resort", back_populates="areas")
    runs = relationship("Run", back_populates="area", cascade="all, delete-orphan", passive_deletes=True)

class Run(Base):
    __tablename__ = 'runs'

    run_id = Column(Integer, primary_key=True)
    area_id = Column(Integer, ForeignKey('areas.area_id', ondelete='CASCADE'), nullable=False, index=True)
    run_name = Column(String(100), nullable=False)
    difficulty = Column(String(20))
    condition = Column(String(100))
    is_open = Column(Boolean, default=True)
    is_terrain_park = Column(Boolean, default=False)
    backcountry_access = Column(Boolean, default=False)
    bootpack_req = Column(Boolean, default=False)
    date_created = Column(DateTime, server_default=func.now())

    # Relationships
    area = relationship("Area", back_populates="runs")
    reports = relationship("Report", back_populates="run", cascade="all, delete-orphan", passive_deletes=True)

class User(Base):
    __tablename__ = 'users'

    user_id = Column(Integer, primary_key=True)
    # Not unique in storage; registration checks it before inserting
    username = Column(String(50), nullable=False)
    email = Column(String(100), unique=True, nullable=False)
    password = Column(Text, nullable=False)  # Stored verbatim, not hashed
    first_name = Column(String(50))
    last_name = Column(String(50))
    birthday = Column(Date)
    fav_resort = Column(Integer, ForeignKey('resorts.resort_id', ondelete='SET NULL'), nullable=True)
    date_created = Column(DateTime, server_default=func.now())

    # Relationships
    favorite_resort = relationship("Resort", back_populates="fans")
    reports = relationship("Report", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)

class Report(Base):
    __tablename__ = 'reports'

    report_id = Column(Integer, primary_key=True)
    run_id = Column(Integer, ForeignKey('runs.run_id', ondelete='CASCADE'), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False, index=True)
    description = Column(Text)
    image_url = Column(Text)
    obstacle = Column(Boolean, default=False)
    groomed = Column(Boolean, default=False)
    icy = Column(Boolean, default=False)
    powder = Column(Boolean, default=False)
    moguls = Column(Boolean, default=False)
    granular = Column(Boolean, default=False)
    thin_cover = Column(Boolean, default=False)
    packed = Column(Boolean, default=False)
    wet = Column(Boolean, default=False)
    date_reported = Column(DateTime, server_default=func.now(), index=True)

    # Relationships
    run = relationship("Run", back_populates="reports")
    user = relationship("User", back_populates="reports")

class WebSession(Base):
    __tablename__ = 'web_sessions'

    session_id = Column(String(64), primary_key=True)
    data = Column(Text, nullable=False)
    expires_at = Column(DateTime, nullable=False, index=True)
