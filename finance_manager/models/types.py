"""
Column types and SQL helpers for money.

Money is stored as fixed-point NUMERIC(20, 8) on PostgreSQL. SQLite
has no exact decimal type: a NUMERIC column there is a float, so
amounts are kept as their decimal text instead and summed with an
aggregate registered on every SQLite connection.

Arithmetic on stored amounts happens in Python on Decimal values.
numeric() gives a castable expression for ordering and range
filters, which only need to compare amounts, not keep them exact.
"""

from decimal import Decimal

from sqlalchemy import Numeric, String, cast, func
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.functions import GenericFunction
from sqlalchemy.types import TypeDecorator

PRECISION = 20
SCALE = 8
QUANTUM = Decimal(1).scaleb(-SCALE)


class Money(TypeDecorator):
    """An exact Decimal amount with 8 decimal places."""

    impl = Numeric
    cache_ok = True

    def __init__(self):
        super().__init__(precision=PRECISION, scale=SCALE, asdecimal=True)

    def load_dialect_impl(self, dialect):
        if dialect.name == "sqlite":
            # sign, point and every digit
            return dialect.type_descriptor(String(PRECISION + 2))
        return dialect.type_descriptor(
            Numeric(PRECISION, SCALE, asdecimal=True)
        )

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        value = Decimal(value).quantize(QUANTUM)
        if dialect.name == "sqlite":
            return str(value)
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(value).quantize(QUANTUM)


def numeric(column):
    """Money column as a number, for ORDER BY and range filters."""
    return cast(column, Numeric(PRECISION, SCALE))


class money_sum(GenericFunction):
    """SUM() over a Money column that stays exact on every backend."""

    type = Money()
    inherit_cache = True


@compiles(money_sum)
def _compile_money_sum(element, compiler, **kw):
    return "sum(%s)" % compiler.process(element.clauses, **kw)


@compiles(money_sum, "sqlite")
def _compile_money_sum_sqlite(element, compiler, **kw):
    return "decimal_sum(%s)" % compiler.process(element.clauses, **kw)


class year_month(GenericFunction):
    """A timestamp's calendar month as 'YYYY-MM'."""

    type = String()
    inherit_cache = True


@compiles(year_month)
def _compile_year_month(element, compiler, **kw):
    return "to_char(%s, 'YYYY-MM')" % compiler.process(element.clauses, **kw)


@compiles(year_month, "sqlite")
def _compile_year_month_sqlite(element, compiler, **kw):
    return compiler.process(
        func.strftime("%Y-%m", *element.clauses.clauses), **kw
    )


class DecimalSum:
    """SQLite aggregate: exact sum of decimal text values."""

    def __init__(self):
        self.total = Decimal("0")
        self.seen = False

    def step(self, value):
        if value is None:
            return
        self.seen = True
        self.total += Decimal(value)

    def finalize(self):
        if not self.seen:
            return None
        return str(self.total)


def register_sqlite_functions(dbapi_connection, connection_record):
    """Engine "connect" listener installing the SQLite money helpers."""
    dbapi_connection.create_aggregate("decimal_sum", 1, DecimalSum)
