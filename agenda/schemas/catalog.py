"""Catalog schemas - employees, services and working hours."""

from datetime import datetime, time
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Employees
# =============================================================================

class EmployeeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)


class EmployeeUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    is_active: bool | None = None


class EmployeeRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    is_active: bool
    created_at: datetime


# =============================================================================
# Services
# =============================================================================

class ServiceCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    duration_minutes: int = Field(..., gt=0, le=1440)
    cost: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)


class ServiceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str | None
    duration_minutes: int
    cost: Decimal
    is_active: bool


# =============================================================================
# Working Hours
# =============================================================================

class WorkingIntervalInput(BaseModel):
    """Schema for a single working interval."""
    day_of_week: int = Field(..., ge=1, le=7, description="Monday=1, Sunday=7")
    start_time: time
    end_time: time


class WorkingIntervalsSet(BaseModel):
    """Schema for adding several intervals at once."""
    intervals: list[WorkingIntervalInput] = Field(..., min_length=1)


class WorkingIntervalRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    employee_id: UUID
    day_of_week: int
    start_time: time
    end_time: time
    is_active: bool


class WorksOnResponse(BaseModel):
    employee_id: UUID
    day_of_week: int
    works: bool
