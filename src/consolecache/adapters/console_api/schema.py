"""Minimal Pydantic models for the console backend's JSON records."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ConsoleBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ConsoleRecord(ConsoleBaseModel):
    id: str = Field(alias="_id", min_length=1)


class StateRecord(ConsoleRecord):
    name: str


class CityRecord(ConsoleRecord):
    name: str
    state_id: str | None = Field(default=None, alias="stateId")
    state_name: str | None = Field(default=None, alias="statename")
    image: str | None = None


class CompanyRecord(ConsoleRecord):
    name: str
    address: str | None = None
    city_id: str | None = Field(default=None, alias="cityId")
    city_name: str | None = Field(default=None, alias="cityname")


class DepartmentRecord(ConsoleRecord):
    name: str


class SkillRecord(ConsoleRecord):
    name: str


class ShiftRecord(ConsoleRecord):
    title: str
    created_at: str | None = Field(default=None, alias="createdAt")
    updated_at: str | None = Field(default=None, alias="updatedAt")


class BankRecord(ConsoleRecord):
    name: str
