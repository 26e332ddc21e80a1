# rental_admin/models/base.py
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


def sql_in_list(values) -> str:
    """Render values as a quoted list for CHECK ... IN (...) constraints"""
    return ",".join(f"'{value}'" for value in values)
