"""
Persistence gateway for the admin dashboard.

Every router talks to the database through a Storage instance instead of
building queries inline. Inputs to create/update must already be validated
(see app.schemas); the gateway trusts their types and performs no coercion
of relational references.

Conventions shared by all entities:
- get-by-id returns None for a missing or malformed (non-numeric) id
- update applies only the supplied keys and returns None if the row is absent
- delete returns True only when a row was actually removed
- storage failures (connection errors, constraint violations) propagate
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Type
import enum
import logging

from fastapi import Depends
from pydantic import BaseModel
from sqlalchemy import Enum as SQLEnum, func, inspect
from sqlalchemy.orm import Session

from app.database import Base, get_db
from app.models import (
    Agent, Application, Program, Student, University, User
)

logger = logging.getLogger(__name__)


def parse_id(value: Any) -> Optional[int]:
    """Return value as an integer id, or None if it does not look like one"""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


class Storage(ABC):
    """Data-access contract used by the route layer"""

    # User operations
    @abstractmethod
    def get_user(self, user_id) -> Optional[User]:
        pass

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]:
        """Exact, case-sensitive username lookup"""
        pass

    @abstractmethod
    def get_users(self) -> List[User]:
        pass

    @abstractmethod
    def create_user(self, data: Mapping[str, Any]) -> User:
        """Persist a user; data['password'] must already be hashed"""
        pass

    @abstractmethod
    def update_user(self, user_id, data: Mapping[str, Any]) -> Optional[User]:
        pass

    @abstractmethod
    def delete_user(self, user_id) -> bool:
        pass

    # Student operations
    @abstractmethod
    def get_students(self) -> List[Student]:
        pass

    @abstractmethod
    def get_student_by_id(self, student_id) -> Optional[Student]:
        pass

    @abstractmethod
    def create_student(self, data: Mapping[str, Any]) -> Student:
        pass

    @abstractmethod
    def update_student(self, student_id, data: Mapping[str, Any]) -> Optional[Student]:
        pass

    @abstractmethod
    def delete_student(self, student_id) -> bool:
        pass

    @abstractmethod
    def get_students_by_filter(self, filters: Mapping[str, Any]) -> List[Student]:
        pass

    @abstractmethod
    def get_students_by_stage(self, stage: str) -> List[Student]:
        pass

    @abstractmethod
    def get_student_count_by_stage(self) -> Dict[str, int]:
        """Stage -> count; stages without students are absent, not zero"""
        pass

    # University operations
    @abstractmethod
    def get_universities(self) -> List[University]:
        pass

    @abstractmethod
    def get_university_by_id(self, university_id) -> Optional[University]:
        pass

    @abstractmethod
    def create_university(self, data: Mapping[str, Any]) -> University:
        pass

    @abstractmethod
    def update_university(self, university_id, data: Mapping[str, Any]) -> Optional[University]:
        pass

    @abstractmethod
    def delete_university(self, university_id) -> bool:
        pass

    # Program operations
    @abstractmethod
    def get_programs(self) -> List[Program]:
        pass

    @abstractmethod
    def get_program_by_id(self, program_id) -> Optional[Program]:
        pass

    @abstractmethod
    def get_programs_by_university_id(self, university_id) -> List[Program]:
        pass

    @abstractmethod
    def create_program(self, data: Mapping[str, Any]) -> Program:
        pass

    @abstractmethod
    def update_program(self, program_id, data: Mapping[str, Any]) -> Optional[Program]:
        pass

    @abstractmethod
    def delete_program(self, program_id) -> bool:
        pass

    # Agent operations
    @abstractmethod
    def get_agents(self) -> List[Agent]:
        pass

    @abstractmethod
    def get_agent_by_id(self, agent_id) -> Optional[Agent]:
        pass

    @abstractmethod
    def create_agent(self, data: Mapping[str, Any]) -> Agent:
        pass

    @abstractmethod
    def update_agent(self, agent_id, data: Mapping[str, Any]) -> Optional[Agent]:
        pass

    @abstractmethod
    def delete_agent(self, agent_id) -> bool:
        pass

    # Application operations
    @abstractmethod
    def get_applications(self) -> List[Application]:
        pass

    @abstractmethod
    def get_application_by_id(self, application_id) -> Optional[Application]:
        pass

    @abstractmethod
    def create_application(self, data: Mapping[str, Any]) -> Application:
        pass

    @abstractmethod
    def update_application(self, application_id, data: Mapping[str, Any]) -> Optional[Application]:
        pass

    @abstractmethod
    def delete_application(self, application_id) -> bool:
        pass

    @abstractmethod
    def get_applications_by_filter(self, filters: Mapping[str, Any]) -> List[Application]:
        pass

    @abstractmethod
    def get_applications_by_stage(self, stage: str) -> List[Application]:
        pass

    @abstractmethod
    def get_applications_by_student_id(self, student_id) -> List[Application]:
        pass

    @abstractmethod
    def get_applications_by_university_id(self, university_id) -> List[Application]:
        pass

    @abstractmethod
    def get_applications_by_program_id(self, program_id) -> List[Application]:
        pass

    @abstractmethod
    def get_application_count_by_stage(self) -> Dict[str, int]:
        """Stage -> count; stages without applications are absent, not zero"""
        pass


class DatabaseStorage(Storage):
    """Storage backed by a SQLAlchemy session (PostgreSQL in production)"""

    def __init__(self, db: Session):
        self.db = db

    # ---- generic helpers ----

    @staticmethod
    def _attributes(model: Type[Base]) -> Dict[str, Any]:
        return {attr.key: attr.columns[0] for attr in inspect(model).column_attrs}

    @staticmethod
    def _as_dict(data) -> Dict[str, Any]:
        if isinstance(data, BaseModel):
            return data.model_dump(exclude_unset=True)
        return dict(data)

    @staticmethod
    def _is_known_enum_value(column, value) -> bool:
        """False when value can never match an enum column (the query would raise instead)"""
        if not isinstance(column.type, SQLEnum) or value is None:
            return True
        return value in column.type.enums

    def _get(self, model: Type[Base], raw_id) -> Optional[Any]:
        row_id = parse_id(raw_id)
        if row_id is None:
            return None
        return self.db.query(model).filter(model.id == row_id).first()

    def _list(self, model: Type[Base]) -> List[Any]:
        return self.db.query(model).order_by(model.id).all()

    def _filter(self, model: Type[Base], filters: Mapping[str, Any]) -> List[Any]:
        attributes = self._attributes(model)
        unknown = [key for key in filters if key not in attributes]
        if unknown:
            raise ValueError(f"Unknown filter field(s) for {model.__tablename__}: {', '.join(unknown)}")

        query = self.db.query(model)
        for key, value in filters.items():
            if not self._is_known_enum_value(attributes[key], value):
                return []
            query = query.filter(getattr(model, key) == value)
        return query.order_by(model.id).all()

    def _filter_by_id(self, model: Type[Base], key: str, raw_id) -> List[Any]:
        row_id = parse_id(raw_id)
        if row_id is None:
            return []
        return self._filter(model, {key: row_id})

    def _create(self, model: Type[Base], data) -> Any:
        values = self._as_dict(data)
        row = model(**values)
        try:
            self.db.add(row)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(row)
        logger.info(f"Created {model.__tablename__} row id={row.id}")
        return row

    def _update(self, model: Type[Base], raw_id, data) -> Optional[Any]:
        row = self._get(model, raw_id)
        if row is None:
            return None

        values = self._as_dict(data)
        attributes = self._attributes(model)
        for field, value in values.items():
            if field not in attributes or field == "id":
                raise ValueError(f"Cannot update field '{field}' on {model.__tablename__}")
            setattr(row, field, value)

        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(row)
        return row

    def _delete(self, model: Type[Base], raw_id) -> bool:
        row_id = parse_id(raw_id)
        if row_id is None:
            return False
        try:
            deleted = self.db.query(model).filter(model.id == row_id).delete(synchronize_session=False)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        if deleted:
            logger.info(f"Deleted {model.__tablename__} row id={row_id}")
        return deleted > 0

    def _count_by_stage(self, model: Type[Base]) -> Dict[str, int]:
        rows = (
            self.db.query(model.stage, func.count(model.id))
            .group_by(model.stage)
            .all()
        )
        counts = {}
        for stage, count in rows:
            key = stage.value if isinstance(stage, enum.Enum) else stage
            counts[key] = count
        return counts

    # ---- users ----

    def get_user(self, user_id) -> Optional[User]:
        return self._get(User, user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self.db.query(User).filter(User.username == username).first()

    def get_users(self) -> List[User]:
        return self._list(User)

    def create_user(self, data: Mapping[str, Any]) -> User:
        return self._create(User, data)

    def update_user(self, user_id, data: Mapping[str, Any]) -> Optional[User]:
        return self._update(User, user_id, data)

    def delete_user(self, user_id) -> bool:
        return self._delete(User, user_id)

    # ---- students ----

    def get_students(self) -> List[Student]:
        return self._list(Student)

    def get_student_by_id(self, student_id) -> Optional[Student]:
        return self._get(Student, student_id)

    def create_student(self, data: Mapping[str, Any]) -> Student:
        return self._create(Student, data)

    def update_student(self, student_id, data: Mapping[str, Any]) -> Optional[Student]:
        return self._update(Student, student_id, data)

    def delete_student(self, student_id) -> bool:
        return self._delete(Student, student_id)

    def get_students_by_filter(self, filters: Mapping[str, Any]) -> List[Student]:
        return self._filter(Student, filters)

    def get_students_by_stage(self, stage: str) -> List[Student]:
        return self._filter(Student, {"stage": stage})

    def get_student_count_by_stage(self) -> Dict[str, int]:
        return self._count_by_stage(Student)

    # ---- universities ----

    def get_universities(self) -> List[University]:
        return self._list(University)

    def get_university_by_id(self, university_id) -> Optional[University]:
        return self._get(University, university_id)

    def create_university(self, data: Mapping[str, Any]) -> University:
        return self._create(University, data)

    def update_university(self, university_id, data: Mapping[str, Any]) -> Optional[University]:
        return self._update(University, university_id, data)

    def delete_university(self, university_id) -> bool:
        return self._delete(University, university_id)

    # ---- programs ----

    def get_programs(self) -> List[Program]:
        return self._list(Program)

    def get_program_by_id(self, program_id) -> Optional[Program]:
        return self._get(Program, program_id)

    def get_programs_by_university_id(self, university_id) -> List[Program]:
        return self._filter_by_id(Program, "university_id", university_id)

    def create_program(self, data: Mapping[str, Any]) -> Program:
        return self._create(Program, data)

    def update_program(self, program_id, data: Mapping[str, Any]) -> Optional[Program]:
        return self._update(Program, program_id, data)

    def delete_program(self, program_id) -> bool:
        return self._delete(Program, program_id)

    # ---- agents ----

    def get_agents(self) -> List[Agent]:
        return self._list(Agent)

    def get_agent_by_id(self, agent_id) -> Optional[Agent]:
        return self._get(Agent, agent_id)

    def create_agent(self, data: Mapping[str, Any]) -> Agent:
        return self._create(Agent, data)

    def update_agent(self, agent_id, data: Mapping[str, Any]) -> Optional[Agent]:
        return self._update(Agent, agent_id, data)

    def delete_agent(self, agent_id) -> bool:
        return self._delete(Agent, agent_id)

    # ---- applications ----

    def get_applications(self) -> List[Application]:
        return self._list(Application)

    def get_application_by_id(self, application_id) -> Optional[Application]:
        return self._get(Application, application_id)

    def create_application(self, data: Mapping[str, Any]) -> Application:
        return self._create(Application, data)

    def update_application(self, application_id, data: Mapping[str, Any]) -> Optional[Application]:
        return self._update(Application, application_id, data)

    def delete_application(self, application_id) -> bool:
        return self._delete(Application, application_id)

    def get_applications_by_filter(self, filters: Mapping[str, Any]) -> List[Application]:
        return self._filter(Application, filters)

    def get_applications_by_stage(self, stage: str) -> List[Application]:
        return self._filter(Application, {"stage": stage})

    def get_applications_by_student_id(self, student_id) -> List[Application]:
        return self._filter_by_id(Application, "student_id", student_id)

    def get_applications_by_university_id(self, university_id) -> List[Application]:
        return self._filter_by_id(Application, "university_id", university_id)

    def get_applications_by_program_id(self, program_id) -> List[Application]:
        return self._filter_by_id(Application, "program_id", program_id)

    def get_application_count_by_stage(self) -> Dict[str, int]:
        return self._count_by_stage(Application)


def get_storage(db: Session = Depends(get_db)) -> Storage:
    return DatabaseStorage(db)

def find_missing_references(storage: Storage, **references) -> List[str]:
    """
    Names of the supplied, non-null references that don't resolve to a row,
    e.g. find_missing_references(storage, student=5, agent=None) -> ["student"]
    """
    lookups = {
        "student": storage.get_student_by_id,
        "university": storage.get_university_by_id,
        "program": storage.get_program_by_id,
        "agent": storage.get_agent_by_id,
    }
    missing = []
    for name, ref_id in references.items():
        if ref_id is None:
            continue
        if lookups[name](ref_id) is None:
            missing.append(name)
    return missing
