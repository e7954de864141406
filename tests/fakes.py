"""In-memory repositories used by the service tests.

They follow the repository protocols closely enough for the services; SQL
specifics (joins, ordering) are approximated.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Callable, Optional, Sequence

from src.hris.hris.attendance.model import AttendanceRecord, AttendanceRow
from src.hris.hris.core.enums import AttendanceStatus, OvertimeStatus, Role
from src.hris.hris.core.exceptions import AlreadyCheckedInError
from src.hris.hris.employees.model import Education, Employee, EmployeeContract, PersonnelDetails
from src.hris.hris.locations.model import Location, LocationWifi
from src.hris.hris.overtime.model import OvertimeFilter, OvertimeRecord
from src.hris.hris.schedules.model import ScheduleRow, ShiftSchedule
from src.hris.hris.shifts.model import WorkShift
from src.hris.hris.users.model import User


class FakeTransaction:
    def __init__(self):
        self.events: list[str] = []

    @contextmanager
    def transaction(self):
        self.events.append("begin")
        try:
            yield None
        except Exception:
            self.events.append("rollback")
            raise
        self.events.append("commit")


class InMemoryEmployees:
    def __init__(self, employees: Sequence[Employee] = (), contracts: Sequence[EmployeeContract] = ()):
        self.employees: dict[int, Employee] = {e.employee_id: e for e in employees}
        self.contracts: list[EmployeeContract] = list(contracts)
        self.personnel: dict[int, PersonnelDetails] = {}
        self.educations: dict[int, Education] = {}
        self.fail_on_education = False
        self._id = max(self.employees, default=0)

    def get_by_id(self, employee_id: int, *, include_deleted: bool = False) -> Optional[Employee]:
        e = self.employees.get(employee_id)
        if e and e.deleted_at and not include_deleted:
            return None
        return e

    def list_all(self, *, company_id=None, include_deleted: bool = False):
        return [
            e
            for e in self.employees.values()
            if (include_deleted or not e.deleted_at) and (not company_id or e.company_id == company_id)
        ]

    def find_by_email(self, email: str) -> Optional[Employee]:
        return next((e for e in self.employees.values() if e.email == email and not e.deleted_at), None)

    def count_active(self, *, company_id: int, on: date) -> int:
        return sum(
            1
            for e in self.employees.values()
            if e.company_id == company_id
            and not e.deleted_at
            and (e.hire_date is None or e.hire_date <= on)
            and (e.termination_date is None or e.termination_date >= on)
        )

    def create(self, fields: dict[str, Any]) -> int:
        self._id += 1
        self.employees[self._id] = Employee(employee_id=self._id, **fields)
        return self._id

    def update(self, employee_id: int, fields: dict[str, Any], *, updated_at: datetime) -> bool:
        e = self.get_by_id(employee_id)
        if not e:
            return False
        self.employees[employee_id] = replace(e, **fields)
        return True

    def soft_delete(self, employee_id: int, *, deleted_at: datetime) -> bool:
        e = self.get_by_id(employee_id)
        if not e:
            return False
        self.employees[employee_id] = replace(e, deleted_at=deleted_at)
        return True

    def restore(self, employee_id: int) -> bool:
        e = self.employees.get(employee_id)
        if not e or not e.deleted_at:
            return False
        self.employees[employee_id] = replace(e, deleted_at=None)
        return True

    def get_active_contract(self, employee_id: int, *, on: date) -> Optional[EmployeeContract]:
        active = [c for c in self.contracts if c.employee_id == employee_id and c.is_active_on(on)]
        return max(active, key=lambda c: c.start_date) if active else None

    def list_contracts(self, employee_id: int):
        return [c for c in self.contracts if c.employee_id == employee_id]

    def create_contract(self, *, employee_id, contract_type, start_date, end_date, salary_base) -> int:
        contract_id = len(self.contracts) + 1
        self.contracts.append(
            EmployeeContract(
                contract_id=contract_id,
                employee_id=employee_id,
                contract_type=contract_type,
                start_date=start_date,
                end_date=end_date,
                salary_base=salary_base,
            )
        )
        return contract_id

    def get_personnel_details(self, employee_id: int) -> Optional[PersonnelDetails]:
        return self.personnel.get(employee_id)

    def upsert_personnel_details(self, details: PersonnelDetails) -> None:
        self.personnel[details.employee_id] = details

    def list_educations(self, employee_id: int):
        return [e for e in self.educations.values() if e.employee_id == employee_id]

    def create_education(self, *, employee_id, degree, institution, major, graduation_year) -> int:
        if self.fail_on_education:
            raise RuntimeError("education insert failed")
        education_id = len(self.educations) + 1
        self.educations[education_id] = Education(
            education_id=education_id,
            employee_id=employee_id,
            degree=degree,
            institution=institution,
            major=major,
            graduation_year=graduation_year,
        )
        return education_id

    def update_education(self, *, education_id, degree, institution, major, graduation_year) -> bool:
        e = self.educations.get(education_id)
        if not e:
            return False
        self.educations[education_id] = replace(
            e, degree=degree, institution=institution, major=major, graduation_year=graduation_year
        )
        return True

    def delete_education(self, education_id: int, *, deleted_at: datetime) -> bool:
        return self.educations.pop(education_id, None) is not None


class InMemoryUsers:
    def __init__(self, users: Sequence[User] = ()):
        self.users: dict[int, User] = {u.user_id: u for u in users}

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users.get(user_id)

    def get_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.username == username), None)

    def get_by_employee_id(self, employee_id: int) -> Optional[User]:
        return next((u for u in self.users.values() if u.employee_id == employee_id), None)

    def create_user(self, *, employee_id, username, password_hash, role: Role, role_id=None) -> int:
        user_id = max(self.users, default=0) + 1
        self.users[user_id] = User(
            user_id=user_id,
            username=username,
            password_hash=password_hash,
            role=role,
            employee_id=employee_id,
            role_id=role_id,
        )
        return user_id

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        u = self.users.get(user_id)
        if not u:
            return False
        self.users[user_id] = replace(u, is_active=is_active)
        return True

    def set_password_hash(self, user_id: int, password_hash: str) -> bool:
        u = self.users.get(user_id)
        if not u:
            return False
        self.users[user_id] = replace(u, password_hash=password_hash)
        return True

    def count_with_role_id(self, role_id: int) -> int:
        return sum(1 for u in self.users.values() if u.role_id == role_id)


class InMemoryShifts:
    def __init__(self, shifts: Sequence[WorkShift] = ()):
        self.shifts: dict[int, WorkShift] = {s.shift_id: s for s in shifts}
        self.deleted: set[int] = set()
        self.attendance_refs: dict[int, int] = {}

    def _live(self):
        return [s for s in self.shifts.values() if s.shift_id not in self.deleted]

    def list_all(self, *, position_id=None):
        return [s for s in self._live() if not position_id or s.position_id == position_id]

    def get_by_id(self, shift_id: int) -> Optional[WorkShift]:
        return self.shifts.get(shift_id) if shift_id not in self.deleted else None

    def first_for_position(self, position_id: int) -> Optional[WorkShift]:
        found = sorted(self.list_all(position_id=position_id), key=lambda s: s.shift_id)
        return found[0] if found else None

    def find_by_name(self, *, position_id: int, name: str) -> Optional[WorkShift]:
        return next((s for s in self.list_all(position_id=position_id) if s.name == name), None)

    def create(self, *, position_id, **fields) -> int:
        shift_id = max(self.shifts, default=0) + 1
        self.shifts[shift_id] = WorkShift(shift_id=shift_id, position_id=position_id, **fields)
        return shift_id

    def update(self, *, shift_id, updated_at, **fields) -> bool:
        s = self.get_by_id(shift_id)
        if not s:
            return False
        self.shifts[shift_id] = replace(s, **fields)
        return True

    def soft_delete(self, shift_id: int, *, deleted_at: datetime) -> bool:
        if not self.get_by_id(shift_id):
            return False
        self.deleted.add(shift_id)
        return True

    def soft_delete_for_positions(self, position_ids, *, deleted_at: datetime) -> int:
        hit = [s.shift_id for s in self._live() if s.position_id in set(position_ids)]
        self.deleted.update(hit)
        return len(hit)

    def count_attendances(self, shift_id: int) -> int:
        return self.attendance_refs.get(shift_id, 0)


class InMemorySchedules:
    def __init__(self):
        self.by_key: dict[tuple[int, date], ShiftSchedule] = {}
        self._id = 0

    def get_by_id(self, schedule_id: int) -> Optional[ShiftSchedule]:
        return next((s for s in self.by_key.values() if s.schedule_id == schedule_id), None)

    def get_for_employee_and_date(self, *, employee_id: int, work_date: date) -> Optional[ShiftSchedule]:
        return self.by_key.get((employee_id, work_date))

    def upsert(self, *, employee_id: int, work_date: date, shift_id: int, notes=None) -> int:
        existing = self.by_key.get((employee_id, work_date))
        if existing:
            schedule_id = existing.schedule_id
        else:
            self._id += 1
            schedule_id = self._id
        self.by_key[(employee_id, work_date)] = ShiftSchedule(
            schedule_id=schedule_id, employee_id=employee_id, work_date=work_date, shift_id=shift_id, notes=notes
        )
        return schedule_id

    def soft_delete(self, schedule_id: int, *, deleted_at: datetime) -> bool:
        for key, s in list(self.by_key.items()):
            if s.schedule_id == schedule_id:
                del self.by_key[key]
                return True
        return False

    def list_range(self, *, start: date, end: date, employee_id=None):
        return [
            ScheduleRow(
                schedule_id=s.schedule_id,
                work_date=s.work_date,
                employee_id=s.employee_id,
                full_name=f"Employee {s.employee_id}",
                shift_id=s.shift_id,
                shift_name=f"Shift {s.shift_id}",
                start_time="08:00",
                end_time="17:00",
                notes=s.notes,
            )
            for s in sorted(self.by_key.values(), key=lambda s: (s.work_date, s.employee_id))
            if start <= s.work_date <= end and (not employee_id or s.employee_id == employee_id)
        ]


class InMemoryLocations:
    def __init__(self, locations: Sequence[Location] = ()):
        self.locations: dict[int, Location] = {l.location_id: l for l in locations}
        self.wifi: dict[int, LocationWifi] = {w.wifi_id: w for l in locations for w in l.wifi}

    def _with_wifi(self, location: Location) -> Location:
        return replace(
            location,
            wifi=tuple(w for w in self.wifi.values() if w.location_id == location.location_id),
        )

    def list_all(self):
        return [self._with_wifi(l) for l in self.locations.values()]

    def list_for_company(self, company_id: int):
        return [l for l in self.list_all() if l.company_id == company_id]

    def get_by_id(self, location_id: int) -> Optional[Location]:
        l = self.locations.get(location_id)
        return self._with_wifi(l) if l else None

    def create(self, *, company_id, name, latitude, longitude, radius_meter) -> int:
        location_id = max(self.locations, default=0) + 1
        self.locations[location_id] = Location(
            location_id=location_id,
            company_id=company_id,
            name=name,
            latitude=latitude,
            longitude=longitude,
            radius_meter=radius_meter,
        )
        return location_id

    def update(self, *, location_id, name, latitude, longitude, radius_meter, updated_at) -> bool:
        l = self.locations.get(location_id)
        if not l:
            return False
        self.locations[location_id] = replace(
            l, name=name, latitude=latitude, longitude=longitude, radius_meter=radius_meter
        )
        return True

    def soft_delete(self, location_id: int, *, deleted_at: datetime) -> bool:
        return self.locations.pop(location_id, None) is not None

    def count_wifi(self, location_id: int) -> int:
        return sum(1 for w in self.wifi.values() if w.location_id == location_id)

    def get_wifi(self, wifi_id: int) -> Optional[LocationWifi]:
        return self.wifi.get(wifi_id)

    def find_wifi_by_mac(self, *, location_id: int, mac_address: str) -> Optional[LocationWifi]:
        return next(
            (w for w in self.wifi.values() if w.location_id == location_id and w.mac_address == mac_address),
            None,
        )

    def create_wifi(self, *, location_id, ssid_name, mac_address) -> int:
        wifi_id = max(self.wifi, default=0) + 1
        self.wifi[wifi_id] = LocationWifi(
            wifi_id=wifi_id, location_id=location_id, ssid_name=ssid_name, mac_address=mac_address
        )
        return wifi_id

    def update_wifi(self, *, wifi_id, ssid_name, mac_address) -> bool:
        w = self.wifi.get(wifi_id)
        if not w:
            return False
        self.wifi[wifi_id] = replace(w, ssid_name=ssid_name, mac_address=mac_address)
        return True

    def delete_wifi(self, wifi_id: int, *, deleted_at: datetime) -> bool:
        return self.wifi.pop(wifi_id, None) is not None


class InMemoryAttendance:
    def __init__(self, rows: Sequence[AttendanceRow] = ()):
        self.records: dict[int, AttendanceRecord] = {}
        self.rows = list(rows)
        self.list_args: Optional[dict] = None
        # Simulates another request completing the row between read and update.
        self.lose_checkout_race = False

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self.records.get(attendance_id)

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return next(
            (r for r in self.records.values() if r.employee_id == employee_id and r.work_date == work_date),
            None,
        )

    def get_recent_for_employee(self, employee_id: int, limit: int):
        items = [r for r in self.records.values() if r.employee_id == employee_id]
        items.sort(key=lambda r: r.check_in, reverse=True)
        return items[:limit]

    def create_check_in(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in: datetime,
        status: AttendanceStatus,
        is_late: bool,
        late_minutes: int,
        shift_id=None,
        location_id=None,
        wifi_id=None,
        notes=None,
    ) -> int:
        if self.get_for_employee_and_date(employee_id, work_date):
            raise AlreadyCheckedInError("You have already checked in today")
        attendance_id = len(self.records) + 1
        self.records[attendance_id] = AttendanceRecord(
            attendance_id=attendance_id,
            employee_id=employee_id,
            work_date=work_date,
            check_in=check_in,
            check_out=None,
            status=status,
            is_late=is_late,
            late_minutes=late_minutes,
            shift_id=shift_id,
            location_id=location_id,
            wifi_id=wifi_id,
            notes=notes,
        )
        return attendance_id

    def complete_check_out(self, *, attendance_id, check_out, working_hours, overtime_hours, notes=None) -> bool:
        r = self.records.get(attendance_id)
        if not r or r.check_out is not None or self.lose_checkout_race:
            return False
        self.records[attendance_id] = replace(
            r,
            check_out=check_out,
            working_hours=working_hours,
            overtime_hours=overtime_hours,
            notes=notes or r.notes,
        )
        return True

    def list_rows(self, *, company_id: int, start_date: date, end_date: date, employee_id=None):
        self.list_args = {
            "company_id": company_id,
            "start_date": start_date,
            "end_date": end_date,
            "employee_id": employee_id,
        }
        return [r for r in self.rows if start_date <= r.work_date <= end_date]


class InMemoryOvertime:
    def __init__(self, records: Sequence[OvertimeRecord] = ()):
        self.records: dict[int, OvertimeRecord] = {r.overtime_id: r for r in records}
        self.lose_decision_race = False

    def get_by_id(self, overtime_id: int) -> Optional[OvertimeRecord]:
        return self.records.get(overtime_id)

    def search(self, filters: OvertimeFilter):
        out = []
        for r in sorted(self.records.values(), key=lambda r: r.overtime_id):
            if filters.employee_id and r.employee_id != filters.employee_id:
                continue
            if filters.status and r.status != filters.status:
                continue
            if filters.start_date and r.overtime_date < filters.start_date:
                continue
            if filters.end_date and r.overtime_date > filters.end_date:
                continue
            out.append(r)
        return out

    def create_pending(
        self,
        *,
        employee_id,
        attendance_id,
        overtime_date,
        start_time,
        end_time,
        duration_hours,
        multiplier,
        reason=None,
    ) -> int:
        overtime_id = max(self.records, default=0) + 1
        self.records[overtime_id] = OvertimeRecord(
            overtime_id=overtime_id,
            employee_id=employee_id,
            attendance_id=attendance_id,
            overtime_date=overtime_date,
            start_time=start_time,
            end_time=end_time,
            duration_hours=duration_hours,
            multiplier=multiplier,
            status=OvertimeStatus.PENDING,
            reason=reason,
        )
        return overtime_id

    def decide(self, *, overtime_id, status, approver_id, approved_at, notes, total_compensation) -> bool:
        r = self.records.get(overtime_id)
        if not r or not r.is_pending or self.lose_decision_race:
            return False
        self.records[overtime_id] = replace(
            r,
            status=status,
            approver_id=approver_id,
            approved_at=approved_at,
            notes=notes,
            total_compensation=total_compensation,
        )
        return True


class InMemoryMaster:
    """Generic master-data table keyed by id; ``build(id, fields)`` makes the model."""

    def __init__(self, build: Callable[[int, dict], Any], *, id_attr: str, parent_attr: Optional[str] = None):
        self.rows: dict[int, Any] = {}
        self.deleted: set[int] = set()
        self._build = build
        self._id_attr = id_attr
        self._parent_attr = parent_attr

    def add(self, fields: dict[str, Any]) -> Any:
        row_id = self.create(fields)
        return self.rows[row_id]

    def list_all(self, *, parent_id=None):
        return [
            r
            for i, r in self.rows.items()
            if i not in self.deleted
            and (not parent_id or not self._parent_attr or getattr(r, self._parent_attr) == parent_id)
        ]

    def get_by_id(self, row_id: int):
        return self.rows.get(row_id) if row_id not in self.deleted else None

    def find_by_name(self, name: str, *, parent_id=None):
        return next((r for r in self.list_all(parent_id=parent_id) if r.name == name), None)

    def create(self, fields: dict[str, Any]) -> int:
        row_id = max(self.rows, default=0) + 1
        self.rows[row_id] = self._build(row_id, fields)
        return row_id

    def update(self, row_id: int, fields: dict[str, Any], *, updated_at: datetime) -> bool:
        if not self.get_by_id(row_id):
            return False
        self.rows[row_id] = self._build(row_id, fields)
        return True

    def soft_delete(self, row_id: int, *, deleted_at: datetime) -> bool:
        if not self.get_by_id(row_id):
            return False
        self.deleted.add(row_id)
        return True

    def ids_for_parents(self, parent_ids) -> list[int]:
        return [
            getattr(r, self._id_attr)
            for r in self.list_all()
            if self._parent_attr and getattr(r, self._parent_attr) in set(parent_ids)
        ]

    def soft_delete_for_parents(self, parent_ids, *, deleted_at: datetime) -> int:
        ids = self.ids_for_parents(parent_ids)
        self.deleted.update(ids)
        return len(ids)
