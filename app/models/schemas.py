from __future__ import annotations

from pydantic import BaseModel


class CreateUser(BaseModel):
    name: str


class User(BaseModel):
    name: str
