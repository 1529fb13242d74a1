"""Utility functions for familyhub."""

from familyhub.utils.date_parser import parse_date, parse_datetime
from familyhub.utils.id_generator import generate_id

__all__ = ["parse_date", "parse_datetime", "generate_id"]
