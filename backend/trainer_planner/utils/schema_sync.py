"""기존 DB에 모델에서 새로 추가된 컬럼/인덱스를 반영하는 유틸리티입니다.

create_all은 이미 존재하는 테이블을 건드리지 않으므로, 배포 후 요금제/세션 등에
추가된 컬럼은 여기서 ALTER TABLE로 보충한다. 컬럼 삭제나 타입 변경은 다루지 않는다.
"""

from __future__ import annotations

import logging
from typing import List

from sqlalchemy import Column, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.schema import CreateIndex, MetaData

logger = logging.getLogger(__name__)


def _column_ddl(engine: Engine, column: Column) -> str:
    preparer = engine.dialect.identifier_preparer
    parts = [preparer.format_column(column), column.type.compile(dialect=engine.dialect)]
    if column.server_default is not None and hasattr(column.server_default, "arg"):
        default = column.server_default.arg
        if isinstance(default, str):
            parts.append(f"DEFAULT '{default}'")
        else:
            parts.append(f"DEFAULT {default.compile(dialect=engine.dialect)}")
    elif not column.nullable:
        # 기존 행이 있는 테이블에는 기본값 없는 NOT NULL 컬럼을 추가할 수 없다.
        logger.warning("[schema] %s.%s added as nullable (no server default)", column.table.name, column.name)
    return " ".join(str(part) for part in parts)


def sync_missing_schema_objects(engine: Engine, metadata: MetaData) -> List[str]:
    """누락된 컬럼/인덱스를 추가하고 추가한 객체 이름 목록을 돌려준다."""
    inspector = inspect(engine)
    existing_tables = set(inspector.get_table_names())
    preparer = engine.dialect.identifier_preparer
    added: List[str] = []

    with engine.begin() as conn:
        for table in metadata.sorted_tables:
            if table.name not in existing_tables:
                continue

            known_columns = {row["name"] for row in inspector.get_columns(table.name)}
            for column in table.columns:
                if column.name in known_columns or column.primary_key:
                    continue
                conn.execute(text(
                    f"ALTER TABLE {preparer.format_table(table)} ADD COLUMN {_column_ddl(engine, column)}"
                ))
                added.append(f"{table.name}.{column.name}")

            known_indexes = {row.get("name") for row in inspector.get_indexes(table.name)}
            for index in table.indexes:
                if index.name and index.name not in known_indexes:
                    conn.execute(CreateIndex(index))
                    added.append(index.name)

    if added:
        logger.info("[schema] added missing objects: %s", ", ".join(added))
    return added
