"""
DDL 파싱에 사용되는 데이터 타입 정의

파싱 결과는 모두 frozen dataclass로 만들어지며, 시퀀스는 tuple로 보관합니다.
파싱 호출마다 새로 생성되고 반환 이후에는 변경되지 않습니다.
"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class SQLDialect(str, Enum):
    """지원하는 SQL dialect"""
    MYSQL = "mysql"
    POSTGRESQL = "postgresql"
    SQLITE = "sqlite"
    AUTO = "auto"


class FieldConstraintType(str, Enum):
    """컬럼 단위 제약조건 종류"""
    PRIMARY_KEY = "PRIMARY_KEY"
    UNIQUE = "UNIQUE"
    FOREIGN_KEY = "FOREIGN_KEY"
    CHECK = "CHECK"
    AUTO_INCREMENT = "AUTO_INCREMENT"


class TableConstraintType(str, Enum):
    """테이블 단위 제약조건 종류"""
    PRIMARY_KEY = "PRIMARY_KEY"
    FOREIGN_KEY = "FOREIGN_KEY"
    UNIQUE = "UNIQUE"
    INDEX = "INDEX"


@dataclass(frozen=True)
class BaseSchema:
    """스키마 타입 공통 유틸리티"""

    def to_dict(self) -> Dict[str, Any]:
        return _plain(asdict(self))


@dataclass(frozen=True)
class FieldConstraint(BaseSchema):
    """컬럼 제약조건. FOREIGN_KEY는 "table(cols)", CHECK는 조건식을 value로 가짐"""
    type: FieldConstraintType
    value: Optional[str] = None


@dataclass(frozen=True)
class ForeignKeyReference(BaseSchema):
    """FOREIGN KEY가 참조하는 테이블과 컬럼"""
    table: str
    fields: Tuple[str, ...]


@dataclass(frozen=True)
class TableConstraint(BaseSchema):
    """테이블 제약조건 (복합 PK, FK, UNIQUE, INDEX)"""
    type: TableConstraintType
    fields: Tuple[str, ...]
    reference: Optional[ForeignKeyReference] = None
    name: Optional[str] = None


@dataclass(frozen=True)
class FieldSchema(BaseSchema):
    """컬럼 정보를 담는 데이터클래스"""
    name: str
    type: str  # 원본 DB 타입 (크기/수식어 포함)
    nullable: bool
    default_value: Optional[str] = None
    constraints: Tuple[FieldConstraint, ...] = ()
    comment: Optional[str] = None

    def has_constraint(self, constraint_type: FieldConstraintType) -> bool:
        return any(c.type == constraint_type for c in self.constraints)


@dataclass(frozen=True)
class TableSchema(BaseSchema):
    """테이블 정보를 담는 데이터클래스"""
    name: str
    fields: Tuple[FieldSchema, ...]
    constraints: Tuple[TableConstraint, ...] = ()
    comment: Optional[str] = None

    @property
    def primary_keys(self) -> Tuple[str, ...]:
        """컬럼 PK와 테이블 PK 제약조건을 합친 PK 컬럼 목록"""
        keys = [f.name for f in self.fields if f.has_constraint(FieldConstraintType.PRIMARY_KEY)]
        for constraint in self.constraints:
            if constraint.type == TableConstraintType.PRIMARY_KEY:
                keys.extend(name for name in constraint.fields if name not in keys)
        return tuple(keys)

    def get_field(self, name: str) -> Optional[FieldSchema]:
        return next((f for f in self.fields if f.name == name), None)


@dataclass(frozen=True)
class RawTableDefinition:
    """SQLParser가 추출한 CREATE TABLE 원문 정보"""
    name: str
    fields_string: str
    line_number: int
    original_match: str
    comment: Optional[str] = None


def _plain(value: Any) -> Any:
    """asdict 결과에서 Enum과 tuple을 JSON 호환 값으로 변환합니다."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value
