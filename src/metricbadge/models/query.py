"""Typed query results returned by the Prometheus client.

Prometheus answers an instant query with one of several result shapes. They
are normalised into a single tagged variant so that extraction never needs to
inspect raw payloads:

- SCALAR: exactly one unlabeled series
- VECTOR: one series per sample
- MATRIX: one series per stream, carrying its most recent value
- EMPTY: no series (a successful query that matched nothing)
"""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ResultType(StrEnum):
    SCALAR = "scalar"
    VECTOR = "vector"
    MATRIX = "matrix"
    EMPTY = "empty"


class Series(BaseModel):
    """One labeled time-series row."""

    labels: dict[str, str] = Field(default_factory=dict)
    value: float

    model_config = {"frozen": True}


class QueryResult(BaseModel):
    kind: ResultType
    series: tuple[Series, ...] = ()

    model_config = {"frozen": True}

    @classmethod
    def empty(cls) -> "QueryResult":
        return cls(kind=ResultType.EMPTY)

    @classmethod
    def scalar(cls, value: float) -> "QueryResult":
        return cls(kind=ResultType.SCALAR, series=(Series(value=value),))

    @classmethod
    def vector(cls, series: list[Series] | tuple[Series, ...]) -> "QueryResult":
        if not series:
            return cls.empty()
        return cls(kind=ResultType.VECTOR, series=tuple(series))

    @classmethod
    def matrix(cls, series: list[Series] | tuple[Series, ...]) -> "QueryResult":
        if not series:
            return cls.empty()
        return cls(kind=ResultType.MATRIX, series=tuple(series))

    @property
    def is_empty(self) -> bool:
        return not self.series


class QueryResponse(BaseModel):
    """A successful query execution.

    ``raw_result`` is the backend's decoded ``data.result``, served verbatim
    by the raw output format.
    """

    result: QueryResult
    warnings: tuple[str, ...] = ()
    raw_result: Any = Field(default_factory=list)

    model_config = {"frozen": True}
