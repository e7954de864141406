from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..database.mysql_base import MySQLRepository, fetchall, fetchone, to_float
from .model import Location, LocationWifi
from .repository import LocationRepository

_LOCATION_COLUMNS = "l.id, l.company_id, l.name, l.latitude, l.longitude, l.radius_meter, c.name AS company_name"


def _to_wifi(r: dict) -> LocationWifi:
    return LocationWifi(
        wifi_id=int(r["id"]),
        location_id=int(r["location_id"]),
        ssid_name=r["ssid_name"],
        mac_address=r["mac_address"],
    )


class MySQLLocationRepository(MySQLRepository, LocationRepository):
    table = "locations"
    alias = "l"

    def _to_model(self, r: dict, wifi: Sequence[LocationWifi] = ()) -> Location:
        return Location(
            location_id=int(r["id"]),
            company_id=int(r["company_id"]),
            name=r["name"],
            latitude=to_float(r["latitude"]),
            longitude=to_float(r["longitude"]),
            radius_meter=to_float(r["radius_meter"]),
            wifi=tuple(wifi),
            company_name=r.get("company_name"),
        )

    def _load(self, where: str, params: tuple) -> list[Location]:
        with self._cursor() as (_, cur):
            cur.execute(
                f"""
                SELECT {_LOCATION_COLUMNS}
                FROM locations l
                LEFT JOIN companies c ON c.id = l.company_id
                WHERE {where}
                ORDER BY l.name, l.id
                """,
                params,
            )
            rows = fetchall(cur)
            if not rows:
                return []

            ids = [int(r["id"]) for r in rows]
            placeholders = ",".join(["%s"] * len(ids))
            cur.execute(
                f"""
                SELECT id, location_id, ssid_name, mac_address
                FROM location_wifi
                WHERE deleted_at IS NULL AND location_id IN ({placeholders})
                ORDER BY id
                """,
                tuple(ids),
            )
            wifi_by_location: dict[int, list[LocationWifi]] = {}
            for w in fetchall(cur):
                wifi = _to_wifi(w)
                wifi_by_location.setdefault(wifi.location_id, []).append(wifi)

            return [self._to_model(r, wifi_by_location.get(int(r["id"]), [])) for r in rows]

    def list_all(self) -> Sequence[Location]:
        return self._load(self._active(), ())

    def list_for_company(self, company_id: int) -> Sequence[Location]:
        return self._load(self._active("l.company_id=%s"), (int(company_id),))

    def get_by_id(self, location_id: int) -> Optional[Location]:
        found = self._load(self._active("l.id=%s"), (int(location_id),))
        return found[0] if found else None

    def create(self, *, company_id: int, name: str, latitude: float, longitude: float, radius_meter: float) -> int:
        with self._cursor() as (_, cur):
            cur.execute(
                """
                INSERT INTO locations(company_id, name, latitude, longitude, radius_meter)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(company_id), name, latitude, longitude, radius_meter),
            )
            return int(cur.lastrowid)

    def update(
        self,
        *,
        location_id: int,
        name: str,
        latitude: float,
        longitude: float,
        radius_meter: float,
        updated_at: datetime,
    ) -> bool:
        with self._cursor() as (_, cur):
            cur.execute(
                """
                UPDATE locations
                SET name=%s, latitude=%s, longitude=%s, radius_meter=%s, updated_at=%s
                WHERE id=%s AND deleted_at IS NULL
                """,
                (name, latitude, longitude, radius_meter, updated_at, int(location_id)),
            )
            return cur.rowcount > 0

    def count_wifi(self, location_id: int) -> int:
        with self._cursor() as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS n FROM location_wifi WHERE location_id=%s AND deleted_at IS NULL",
                (int(location_id),),
            )
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def get_wifi(self, wifi_id: int) -> Optional[LocationWifi]:
        with self._cursor() as (_, cur):
            cur.execute(
                """
                SELECT id, location_id, ssid_name, mac_address
                FROM location_wifi
                WHERE id=%s AND deleted_at IS NULL
                """,
                (int(wifi_id),),
            )
            r = fetchone(cur)
            return _to_wifi(r) if r else None

    def find_wifi_by_mac(self, *, location_id: int, mac_address: str) -> Optional[LocationWifi]:
        with self._cursor() as (_, cur):
            cur.execute(
                """
                SELECT id, location_id, ssid_name, mac_address
                FROM location_wifi
                WHERE location_id=%s AND mac_address=%s AND deleted_at IS NULL
                """,
                (int(location_id), mac_address),
            )
            r = fetchone(cur)
            return _to_wifi(r) if r else None

    def create_wifi(self, *, location_id: int, ssid_name: str, mac_address: str) -> int:
        with self._cursor() as (_, cur):
            cur.execute(
                "INSERT INTO location_wifi(location_id, ssid_name, mac_address) VALUES(%s,%s,%s)",
                (int(location_id), ssid_name, mac_address),
            )
            return int(cur.lastrowid)

    def update_wifi(self, *, wifi_id: int, ssid_name: str, mac_address: str) -> bool:
        with self._cursor() as (_, cur):
            cur.execute(
                "UPDATE location_wifi SET ssid_name=%s, mac_address=%s WHERE id=%s AND deleted_at IS NULL",
                (ssid_name, mac_address, int(wifi_id)),
            )
            return cur.rowcount > 0

    def delete_wifi(self, wifi_id: int, *, deleted_at: datetime) -> bool:
        with self._cursor() as (_, cur):
            cur.execute(
                "UPDATE location_wifi SET deleted_at=%s WHERE id=%s AND deleted_at IS NULL",
                (deleted_at, int(wifi_id)),
            )
            return cur.rowcount > 0
