"""Custom SQLAlchemy column types shared by the models"""
from sqlalchemy import TypeDecorator, String
import uuid


def generate_uuid() -> str:
    return str(uuid.uuid4())


class GUID(TypeDecorator):
    """UUID stored as VARCHAR(36) on every backend (SQLite in tests, PostgreSQL in prod)"""
    impl = String(36)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        return dialect.type_descriptor(String(36))

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        return str(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return value
        return str(value)
