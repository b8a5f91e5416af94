from datetime import date
from typing import Callable

import pytest

from studentmanager.model.store import StudentStore
from studentmanager.model.student import StudentRecord


TODAY = date(2024, 9, 1)


@pytest.fixture
def today() -> date:
    """Fixed 'today' so birth date rules do not drift."""
    return TODAY


@pytest.fixture
def make_student() -> Callable[..., StudentRecord]:
    """Factory for valid records; override any field by keyword."""
    def _make(**overrides) -> StudentRecord:
        values = dict(
            last_name="Ivanov",
            first_name="Ivan",
            middle_name="Ivanovich",
            course=2,
            group="G1",
            birth_date=date(2003, 5, 17),
            email="ivanov@gmail.com",
        )
        values.update(overrides)
        return StudentRecord(**values)
    return _make


@pytest.fixture
def data_path(tmp_path) -> str:
    return str(tmp_path / "students.json")


@pytest.fixture
def store(data_path) -> StudentStore:
    return StudentStore(filepath=data_path)


@pytest.fixture
def populated_store(store, make_student) -> StudentStore:
    store.add(make_student(last_name="Petrov", first_name="Petr", course=3, group="G2",
                           email="petrov@yandex.ru"))
    store.add(make_student(last_name="Ivanova", first_name="Anna", course=1, group="g1",
                           email="anna.iv@icloud.com"))
    store.add(make_student(last_name="Sidorov", first_name="Oleg", middle_name="", course=2,
                           group="G1", birth_date=date(1999, 12, 31), email="sidorov@gmail.com"))
    return store
