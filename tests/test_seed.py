from clinic_scheduling.models.doctor import Doctor
from clinic_scheduling.models.room import Room
from clinic_scheduling.seed import DEFAULT_DOCTORS, DEFAULT_ROOMS, seed_reference_data


def test_seed_reference_data_inserts_defaults_into_empty_tables(scheduling_db) -> None:
    doctors_added, rooms_added = seed_reference_data(scheduling_db)

    assert doctors_added == len(DEFAULT_DOCTORS)
    assert rooms_added == len(DEFAULT_ROOMS)
    assert sorted(room.room_number for room in scheduling_db.query(Room).all()) == [101, 102, 201]


def test_seed_reference_data_is_idempotent(scheduling_db) -> None:
    seed_reference_data(scheduling_db)

    assert seed_reference_data(scheduling_db) == (0, 0)
    assert scheduling_db.query(Doctor).count() == len(DEFAULT_DOCTORS)


def test_seed_reference_data_keeps_existing_doctors(scheduling_db, clinic) -> None:
    doctors_added, rooms_added = seed_reference_data(scheduling_db)

    assert (doctors_added, rooms_added) == (0, 0)
    assert scheduling_db.query(Doctor).count() == 2
