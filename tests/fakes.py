"""In-memory repositories shared by the service and HTTP tests."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from decimal import Decimal

from werkzeug.security import generate_password_hash

from src.internship_tracker.internship_tracker.attendance.model import AttendanceRecord, AttendanceReportRow
from src.internship_tracker.internship_tracker.container import wire
from src.internship_tracker.internship_tracker.core.enums import AttendanceStatus, ReviewStatus, Role
from src.internship_tracker.internship_tracker.core.exceptions import ConflictError, NotFoundError
from src.internship_tracker.internship_tracker.identity.model import Caller
from src.internship_tracker.internship_tracker.journals.model import JournalEntry, JournalReportRow
from src.internship_tracker.internship_tracker.leaves.model import LeaveReportRow, LeaveRequest
from src.internship_tracker.internship_tracker.users.model import Profile, User

FIXED_CREATED_AT = datetime(2024, 5, 1, 9, 0, 0)


class FakeUsersRepo:
    def __init__(self):
        self._next_id = 1
        self.users: dict[int, User] = {}
        self.profiles: dict[int, Profile] = {}

    def add(self, identifier, role=Role.STUDENT, *, password="secret123", full_name=None, email=None, is_active=True, supervisor_id=None):
        user_id = self.create_user(
            identifier=identifier,
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
            full_name=full_name,
        )
        if not is_active:
            self.set_active(user_id, is_active=False)
        if supervisor_id is not None:
            self.upsert_profile(Profile(user_id=user_id, full_name=full_name, supervisor_id=supervisor_id))
        return self.users[user_id]

    def get_by_id(self, user_id):
        return self.users.get(int(user_id))

    def get_by_identifier(self, identifier):
        return next((u for u in self.users.values() if u.identifier == identifier), None)

    def identifier_or_email_taken(self, identifier, email):
        return any(u.identifier == identifier or (email and u.email == email) for u in self.users.values())

    def email_taken(self, email):
        return any(u.email == email for u in self.users.values())

    def create_user(self, *, identifier, email, password_hash, role, full_name, profile=None):
        if self.identifier_or_email_taken(identifier, email):
            raise ConflictError("Record already exists")
        uid = self._next_id
        self._next_id += 1
        self.users[uid] = User(
            user_id=uid,
            identifier=identifier,
            email=email,
            password_hash=password_hash,
            role=role,
            full_name=full_name,
        )
        if profile is not None:
            self.profiles[uid] = replace(profile, user_id=uid)
        return uid

    def set_active(self, user_id, *, is_active):
        user = self.users.get(int(user_id))
        if not user:
            return False
        self.users[user.user_id] = replace(user, is_active=is_active)
        return True

    def count_by_role(self, role):
        return sum(1 for u in self.users.values() if u.role == role and u.is_active)

    def _row(self, u: User) -> dict:
        p = self.profiles.get(u.user_id) or Profile(user_id=u.user_id)
        return {
            "user_id": u.user_id,
            "identifier": u.identifier,
            "email": u.email,
            "full_name": p.full_name or u.full_name,
            "phone": p.phone,
            "program": p.program,
            "division": p.division,
            "cohort": p.cohort,
            "is_active": u.is_active,
        }

    def list_by_role(self, role):
        return [self._row(u) for u in sorted(self.users.values(), key=lambda u: -u.user_id) if u.role == role]

    def get_student_detail(self, identifier):
        u = self.get_by_identifier(identifier)
        if not u or u.role != Role.STUDENT:
            return None
        row = self._row(u)
        row["supervisor_id"] = self.supervisor_of(u.user_id)
        return row

    def list_students_of(self, supervisor_id):
        return [
            self._row(self.users[p.user_id])
            for p in self.profiles.values()
            if p.supervisor_id == supervisor_id and self.users[p.user_id].role == Role.STUDENT
        ]

    def supervisor_summary(self):
        return [
            {**self._row(u), "total_students": len(self.list_students_of(u.user_id))}
            for u in self.users.values()
            if u.role == Role.SUPERVISOR
        ]

    def get_profile(self, user_id):
        return self.profiles.get(int(user_id))

    def upsert_profile(self, profile, *, email=None):
        if email is not None:
            user = self.users[profile.user_id]
            self.users[user.user_id] = replace(user, email=email)
        self.profiles[profile.user_id] = profile

    def supervisor_of(self, student_id):
        p = self.profiles.get(int(student_id))
        if not p or self.users[p.user_id].role != Role.STUDENT:
            return None
        return p.supervisor_id


class FakeAttendanceRepo:
    def __init__(self, users: FakeUsersRepo, leaves: "FakeLeavesRepo | None" = None):
        self._next_id = 1
        self._users = users
        self.leaves = leaves
        self.records: dict[int, AttendanceRecord] = {}

    def get_recent_for_user(self, user_id, limit):
        rows = [r for r in self.records.values() if r.user_id == user_id]
        return sorted(rows, key=lambda r: r.work_date, reverse=True)[:limit]

    def get_for_user_and_date(self, user_id, work_date):
        return next((r for r in self.records.values() if r.user_id == user_id and r.work_date == work_date), None)

    def create_checkin(self, *, user_id, work_date, check_in_time, status, note=None):
        if self._users.get_by_id(user_id) is None:
            raise NotFoundError("User not found")
        if self.leaves is not None and self.leaves.get_for_user_and_date(user_id, work_date):
            raise ConflictError("A leave request already exists for this date")
        if self.get_for_user_and_date(user_id, work_date):
            raise ConflictError("Record already exists")
        aid = self._next_id
        self._next_id += 1
        self.records[aid] = AttendanceRecord(
            attendance_id=aid,
            user_id=user_id,
            work_date=work_date,
            check_in_time=check_in_time,
            check_out_time=None,
            status=status,
            note=note,
        )
        return aid

    def update_checkout(self, *, attendance_id, check_out_time):
        rec = self.records.get(attendance_id)
        if not rec or rec.check_out_time is not None:
            return False
        self.records[attendance_id] = replace(rec, check_out_time=check_out_time)
        return True

    def count_for_date(self, work_date):
        return sum(1 for r in self.records.values() if r.work_date == work_date)

    def stats_for_user(self, user_id):
        mine = [r for r in self.records.values() if r.user_id == user_id]
        return {"days": len(mine), "late_days": sum(1 for r in mine if r.status == AttendanceStatus.LATE)}

    def get_report_rows(self, *, scope, work_date=None):
        rows = []
        for r in self.records.values():
            if work_date is not None and r.work_date != work_date:
                continue
            if not scope.allows(r.user_id, self._users.supervisor_of(r.user_id)):
                continue
            u = self._users.get_by_id(r.user_id)
            rows.append(
                AttendanceReportRow(
                    user_id=r.user_id,
                    identifier=u.identifier,
                    full_name=u.full_name,
                    work_date=r.work_date,
                    check_in_time=r.check_in_time,
                    check_out_time=r.check_out_time,
                    status=r.status,
                    note=r.note,
                )
            )
        rows.sort(key=lambda x: x.identifier)
        rows.sort(key=lambda x: x.work_date, reverse=True)
        return rows


class FakeLeavesRepo:
    def __init__(self, users: FakeUsersRepo, attendance: FakeAttendanceRepo | None = None):
        self._next_id = 1
        self._users = users
        self.attendance = attendance
        self.requests: dict[int, LeaveRequest] = {}

    def get_by_id(self, request_id):
        return self.requests.get(int(request_id))

    def get_for_user_and_date(self, user_id, leave_date):
        return next((r for r in self.requests.values() if r.user_id == user_id and r.leave_date == leave_date), None)

    def create_leave(self, *, user_id, leave_date, reason):
        if self.attendance is not None and self.attendance.get_for_user_and_date(user_id, leave_date):
            raise ConflictError("Attendance already recorded for this date")
        if self.get_for_user_and_date(user_id, leave_date):
            raise ConflictError("Record already exists")
        rid = self._next_id
        self._next_id += 1
        self.requests[rid] = LeaveRequest(
            request_id=rid,
            user_id=user_id,
            leave_date=leave_date,
            reason=reason,
            status=ReviewStatus.PENDING,
            created_at=FIXED_CREATED_AT,
        )
        return rid

    def decide(self, *, request_id, status, decided_by, reviewer_note=None):
        req = self.requests.get(int(request_id))
        if not req or req.status != ReviewStatus.PENDING:
            return False
        self.requests[req.request_id] = replace(
            req,
            status=status,
            decided_by=decided_by,
            decided_at=FIXED_CREATED_AT,
            reviewer_note=reviewer_note,
        )
        return True

    def get_recent_for_user(self, user_id, limit):
        rows = [r for r in self.requests.values() if r.user_id == user_id]
        return sorted(rows, key=lambda r: r.leave_date, reverse=True)[:limit]

    def get_report_rows(self, *, scope, leave_date=None):
        rows = []
        for r in self.requests.values():
            if leave_date is not None and r.leave_date != leave_date:
                continue
            if not scope.allows(r.user_id, self._users.supervisor_of(r.user_id)):
                continue
            u = self._users.get_by_id(r.user_id)
            rows.append(
                LeaveReportRow(
                    request_id=r.request_id,
                    user_id=r.user_id,
                    identifier=u.identifier,
                    full_name=u.full_name,
                    leave_date=r.leave_date,
                    reason=r.reason,
                    status=r.status,
                    reviewer_note=r.reviewer_note,
                )
            )
        rows.sort(key=lambda x: x.identifier)
        rows.sort(key=lambda x: x.leave_date, reverse=True)
        return rows


class FakeJournalsRepo:
    def __init__(self, users: FakeUsersRepo):
        self._next_id = 1
        self._users = users
        self.entries: dict[int, JournalEntry] = {}

    def get_by_id(self, entry_id):
        return self.entries.get(int(entry_id))

    def create_entry(self, *, user_id, entry_date, activity, description, hours_worked, obstacles=None, next_plan=None):
        eid = self._next_id
        self._next_id += 1
        self.entries[eid] = JournalEntry(
            entry_id=eid,
            user_id=user_id,
            entry_date=entry_date,
            activity=activity,
            description=description,
            hours_worked=Decimal(hours_worked),
            obstacles=obstacles,
            next_plan=next_plan,
            created_at=FIXED_CREATED_AT,
        )
        return eid

    def set_review(self, *, entry_id, status, comment, reviewed_by):
        entry = self.entries[int(entry_id)]
        self.entries[entry.entry_id] = replace(entry, status=status, reviewer_comment=comment, reviewed_by=reviewed_by)

    def list_for_user(self, user_id, *, limit=None):
        rows = sorted(
            (e for e in self.entries.values() if e.user_id == user_id),
            key=lambda e: (e.entry_date, e.entry_id),
            reverse=True,
        )
        return rows if limit is None else rows[:limit]

    def stats_for_user(self, user_id):
        mine = [e for e in self.entries.values() if e.user_id == user_id]
        return {
            "total": len(mine),
            "approved": sum(1 for e in mine if e.status == ReviewStatus.APPROVED),
            "total_hours": sum((e.hours_worked for e in mine), Decimal("0")),
        }

    def _visible(self, scope):
        return [e for e in self.entries.values() if scope.allows(e.user_id, self._users.supervisor_of(e.user_id))]

    def _report_row(self, e: JournalEntry) -> JournalReportRow:
        u = self._users.get_by_id(e.user_id)
        return JournalReportRow(
            entry_id=e.entry_id,
            user_id=e.user_id,
            identifier=u.identifier,
            full_name=u.full_name,
            entry_date=e.entry_date,
            activity=e.activity,
            hours_worked=e.hours_worked,
            status=e.status,
            reviewer_comment=e.reviewer_comment,
        )

    def count_by_status(self, status, *, scope):
        return sum(1 for e in self._visible(scope) if e.status == status)

    def latest_pending(self, *, scope, limit):
        pending = [e for e in self._visible(scope) if e.status == ReviewStatus.PENDING]
        pending.sort(key=lambda e: e.entry_id, reverse=True)
        return [self._report_row(e) for e in pending[:limit]]

    def get_report_rows(self, *, scope, entry_date=None):
        rows = [self._report_row(e) for e in self._visible(scope) if entry_date is None or e.entry_date == entry_date]
        rows.sort(key=lambda x: x.identifier)
        rows.sort(key=lambda x: x.entry_date, reverse=True)
        return rows


def build_fake_repos():
    users = FakeUsersRepo()
    attendance = FakeAttendanceRepo(users)
    leaves = FakeLeavesRepo(users, attendance)
    attendance.leaves = leaves
    journals = FakeJournalsRepo(users)
    return users, attendance, leaves, journals


def build_fake_container(*, jwt_secret="test-jwt-secret", **kwargs):
    users, attendance, leaves, journals = build_fake_repos()
    return wire(
        users_repo=users,
        attendance_repo=attendance,
        leaves_repo=leaves,
        journals_repo=journals,
        jwt_secret=jwt_secret,
        **kwargs,
    )


def caller_of(user: User) -> Caller:
    return Caller(user_id=user.user_id, identifier=user.identifier, role=user.role)
