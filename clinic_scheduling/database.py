from threading import Lock

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import declarative_base, sessionmaker

from clinic_scheduling.core import config


def _engine_options() -> dict:
    options: dict = {}
    if config.DATABASE_ISOLATION_LEVEL:
        options['isolation_level'] = config.DATABASE_ISOLATION_LEVEL
    if config.DATABASE_URL.startswith('sqlite'):
        options['connect_args'] = {'check_same_thread': False}
    return options


engine = create_engine(config.DATABASE_URL, **_engine_options())

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_appointment_schema_checked = False

APPOINTMENT_INDEXES = [
    'CREATE INDEX IF NOT EXISTS idx_appointments_room_time ON appointments(room_id, scheduled_time)',
    'CREATE INDEX IF NOT EXISTS idx_appointments_doctor_time ON appointments(doctor_id, scheduled_time)',
    'CREATE INDEX IF NOT EXISTS idx_appointments_patient_time ON appointments(patient_name, scheduled_time)',
]


def ensure_appointment_schema() -> None:
    global _appointment_schema_checked

    if _appointment_schema_checked:
        return

    with _schema_lock:
        if _appointment_schema_checked:
            return

        inspector = inspect(engine)

        if 'appointments' not in inspector.get_table_names():
            _appointment_schema_checked = True
            return

        with engine.begin() as connection:
            for statement in APPOINTMENT_INDEXES:
                connection.execute(text(statement))

        _appointment_schema_checked = True
