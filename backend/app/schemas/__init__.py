"""Pydantic schemas for the Landlord Ledger API."""

from app.schemas.base import *
from app.schemas.landlord import *
from app.schemas.review import *
from app.schemas.contribution import *
