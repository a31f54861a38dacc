from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .admins.mysql_admin_repository import MySQLAdminRepository
from .admins.repository import AdminRepository
from .admins.service import AuthService, SettingsService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.mysql_record_store import MySQLRecordStore
from .attendance.policy import AdmissionPolicy
from .attendance.repository import AttendanceRepository
from .attendance.service import AdmissionService, AttendanceQueryService
from .attendance.store import RecordStore
from .core.constants import ADMISSION_LOCK_TIMEOUT_SECONDS, STUDENTS_PER_PAGE
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .recognition.identifier import StudentIdentifier
from .recognition.qr_identifier import QRCodeIdentifier
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService


@dataclass(frozen=True)
class Container:
    students_repo: StudentRepository
    attendance_repo: AttendanceRepository
    notifications_repo: NotificationRepository
    admins_repo: AdminRepository
    record_store: RecordStore

    auth_service: AuthService
    settings_service: SettingsService
    student_service: StudentService
    admission_service: AdmissionService
    attendance_query_service: AttendanceQueryService
    notification_service: NotificationService
    dashboard_service: DashboardService


def assemble(
    *,
    students_repo: StudentRepository,
    attendance_repo: AttendanceRepository,
    notifications_repo: NotificationRepository,
    admins_repo: AdminRepository,
    record_store: RecordStore,
    identifier: Optional[StudentIdentifier] = None,
    lock_timeout: float = ADMISSION_LOCK_TIMEOUT_SECONDS,
    page_size: int = STUDENTS_PER_PAGE,
) -> Container:
    """Wire services over any repository implementations (MySQL or in-memory)."""

    attendance_query_service = AttendanceQueryService(attendance_repo)
    notification_service = NotificationService(notifications_repo, students_repo, attendance_query_service)

    return Container(
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        notifications_repo=notifications_repo,
        admins_repo=admins_repo,
        record_store=record_store,
        auth_service=AuthService(admins_repo),
        settings_service=SettingsService(admins_repo),
        student_service=StudentService(students_repo, page_size=page_size),
        admission_service=AdmissionService(
            record_store,
            policy=AdmissionPolicy(),
            identifier=identifier,
            lock_timeout=lock_timeout,
        ),
        attendance_query_service=attendance_query_service,
        notification_service=notification_service,
        dashboard_service=DashboardService(students_repo, attendance_query_service, notification_service),
    )


def build_container(
    *,
    db_config: dict,
    lock_timeout: float = ADMISSION_LOCK_TIMEOUT_SECONDS,
    page_size: int = STUDENTS_PER_PAGE,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    students_repo = MySQLStudentRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)

    return assemble(
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        notifications_repo=MySQLNotificationRepository(conn),
        admins_repo=MySQLAdminRepository(conn),
        record_store=MySQLRecordStore(conn, students_repo, attendance_repo),
        identifier=QRCodeIdentifier(),
        lock_timeout=lock_timeout,
        page_size=page_size,
    )
