import threading
from datetime import datetime

import pytest

from src.canteen_admin.canteen_admin.attendance.locks import KeyedLocks
from src.canteen_admin.canteen_admin.attendance.model import Admitted, Denied
from src.canteen_admin.canteen_admin.attendance.policy import AdmissionPolicy
from src.canteen_admin.canteen_admin.attendance.service import AdmissionService, result_to_dict
from src.canteen_admin.canteen_admin.core.enums import DenialReason, MealSlot
from src.canteen_admin.canteen_admin.core.exceptions import (
    AdmissionConflict,
    IdentityNotRecognized,
    StoreUnavailable,
    StudentNotFound,
)
from tests.fakes import InMemoryAttendance, InMemoryRecordStore, InMemoryStudents, make_student


NOON = datetime(2025, 3, 10, 12, 0, 0)


def _service(*students, **store_kwargs):
    repo = InMemoryStudents(students)
    attendance = InMemoryAttendance(repo)
    store = InMemoryRecordStore(repo, attendance, **store_kwargs)
    return AdmissionService(store, lock_timeout=1.0), store


def test_admit_records_once_and_takes_one_token():
    service, store = _service(make_student(lunch=3))

    result = service.admit(1, MealSlot.LUNCH, now=NOON)

    assert isinstance(result, Admitted)
    assert result.student.tokens.lunch == 2
    assert result.record.meal_type == MealSlot.LUNCH
    assert result.record.meal_date == NOON.date()
    assert len(store.attendance.records) == 1
    assert store.students.get_by_id(1).tokens.lunch == 2


def test_second_admission_same_day_is_denied_without_decrement():
    service, store = _service(make_student(lunch=3))

    service.admit(1, MealSlot.LUNCH, now=NOON)
    second = service.admit(1, MealSlot.LUNCH, now=NOON.replace(hour=13))

    assert isinstance(second, Denied)
    assert second.reason == DenialReason.ALREADY_MARKED
    assert len(store.attendance.records) == 1
    assert store.students.get_by_id(1).tokens.lunch == 2


def test_same_meal_next_day_is_admitted_again():
    service, store = _service(make_student(lunch=3))

    service.admit(1, MealSlot.LUNCH, now=NOON)
    result = service.admit(1, MealSlot.LUNCH, now=NOON.replace(day=11))

    assert isinstance(result, Admitted)
    assert store.students.get_by_id(1).tokens.lunch == 1


def test_mixed_balance_scenario():
    service, store = _service(make_student(breakfast=1, lunch=0, dinner=5))

    lunch = service.admit(1, MealSlot.LUNCH, now=NOON)
    breakfast = service.admit(1, MealSlot.BREAKFAST, now=NOON)

    assert isinstance(lunch, Denied)
    assert lunch.reason == DenialReason.NO_TOKENS_AVAILABLE
    assert isinstance(breakfast, Admitted)
    assert breakfast.student.tokens.as_dict() == {"breakfast": 0, "lunch": 0, "dinner": 5}


def test_meal_defaults_to_time_of_day():
    service, _ = _service(make_student())

    result = service.admit(1, now=datetime(2025, 3, 10, 7, 45))

    assert result.record.meal_type == MealSlot.BREAKFAST


def test_unknown_student_raises():
    service, _ = _service(make_student())

    with pytest.raises(StudentNotFound):
        service.admit(42, MealSlot.DINNER, now=NOON)


def test_conflict_from_commit_becomes_denial():
    class LosingStore(InMemoryRecordStore):
        def commit_admission(self, intent):
            raise AdmissionConflict(DenialReason.ALREADY_MARKED)

    repo = InMemoryStudents([make_student(dinner=2)])
    store = LosingStore(repo, InMemoryAttendance(repo))
    service = AdmissionService(store)

    result = service.admit(1, MealSlot.DINNER, now=NOON)

    assert isinstance(result, Denied)
    assert result.reason == DenialReason.ALREADY_MARKED
    assert result.message == "John Doe already marked attendance for dinner today"


def test_store_failure_propagates_and_leaves_no_partial_state():
    service, store = _service(make_student(lunch=3), fail_commit_with=StoreUnavailable("timed out"))

    with pytest.raises(StoreUnavailable):
        service.admit(1, MealSlot.LUNCH, now=NOON)

    assert store.attendance.records == []
    assert store.students.get_by_id(1).tokens.lunch == 3


def test_lock_wait_is_bounded():
    repo = InMemoryStudents([make_student()])
    locks = KeyedLocks()
    service = AdmissionService(InMemoryRecordStore(repo, InMemoryAttendance(repo)), locks=locks, lock_timeout=0.05)

    held = threading.Event()
    release = threading.Event()

    def _hold():
        with locks.hold((1, MealSlot.LUNCH, NOON.date()), timeout=1.0):
            held.set()
            release.wait(2.0)

    t = threading.Thread(target=_hold)
    t.start()
    try:
        assert held.wait(1.0)
        with pytest.raises(StoreUnavailable):
            service.admit(1, MealSlot.LUNCH, now=NOON)
        # Other meals for the same student are not blocked.
        assert isinstance(service.admit(1, MealSlot.DINNER, now=NOON), Admitted)
    finally:
        release.set()
        t.join()


def test_admit_image_uses_identifier():
    class FixedIdentifier:
        def __init__(self, student_id):
            self.student_id = student_id
            self.seen = []

        def identify(self, image):
            self.seen.append(image)
            return self.student_id

    repo = InMemoryStudents([make_student(lunch=1)])
    store = InMemoryRecordStore(repo, InMemoryAttendance(repo))
    identifier = FixedIdentifier(1)
    service = AdmissionService(store, identifier=identifier)

    result = service.admit_image(b"frame", MealSlot.LUNCH, now=NOON)

    assert isinstance(result, Admitted)
    assert identifier.seen == [b"frame"]

    no_match = AdmissionService(store, identifier=FixedIdentifier(None))
    with pytest.raises(IdentityNotRecognized):
        no_match.admit_image(b"frame", MealSlot.LUNCH, now=NOON)


def test_admit_image_without_identifier_is_not_recognized():
    service, _ = _service(make_student())

    with pytest.raises(IdentityNotRecognized):
        service.admit_image(b"frame", now=NOON)


def test_result_to_dict_shapes():
    service, _ = _service(make_student(lunch=1))

    admitted = result_to_dict(service.admit(1, MealSlot.LUNCH, now=NOON))
    denied = result_to_dict(service.admit(1, MealSlot.LUNCH, now=NOON))

    assert admitted["admitted"] is True
    assert admitted["record"]["meal_type"] == "lunch"
    assert admitted["record"]["date"] == "2025-03-10"
    assert admitted["student"]["tokens"]["lunch"] == 0
    assert denied["admitted"] is False
    assert denied["reason"] == "NO_TOKENS_AVAILABLE"
    assert "record" not in denied


def test_services_sharing_a_lock_registry_wait_on_each_other():
    repo = InMemoryStudents([make_student()])
    store = InMemoryRecordStore(repo, InMemoryAttendance(repo))
    shared = KeyedLocks()
    first = AdmissionService(store, locks=shared, lock_timeout=1.0)
    second = AdmissionService(store, locks=shared, lock_timeout=0.05)

    entered = threading.Event()
    leave = threading.Event()

    class BlockingPolicy:
        def evaluate(self, **kwargs):
            entered.set()
            leave.wait(2.0)
            return AdmissionPolicy().evaluate(**kwargs)

    blocked = AdmissionService(store, policy=BlockingPolicy(), locks=shared, lock_timeout=1.0)
    t = threading.Thread(target=blocked.admit, args=(1, MealSlot.LUNCH), kwargs={"now": NOON})
    t.start()
    try:
        assert entered.wait(1.0)
        assert len(shared) == 1
        with pytest.raises(StoreUnavailable):
            second.admit(1, MealSlot.LUNCH, now=NOON)
    finally:
        leave.set()
        t.join()

    assert isinstance(first.admit(1, MealSlot.LUNCH, now=NOON), Denied)
    assert len(shared) == 0
