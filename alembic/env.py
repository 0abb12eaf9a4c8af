import os
import sys
from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool
from alembic import context

# 프로젝트 루트 (walktrack 패키지 import 용)
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from walktrack.core.config import settings
from walktrack.models import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# users / owners / walkers / dogs / assessments / walks
target_metadata = Base.metadata

DATABASE_URL = settings.DATABASE_URL


def _options() -> dict:
    return {
        "target_metadata": target_metadata,
        # JSON 위치 컬럼, enum 변경까지 autogenerate 대상
        "compare_type": True,
        # SQLite는 ALTER 지원이 제한적이라 batch 모드로 테이블 재생성
        "render_as_batch": DATABASE_URL.startswith("sqlite"),
    }


def run_migrations_offline():
    context.configure(
        url=DATABASE_URL,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_options(),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    section = config.get_section(config.config_ini_section) or {}
    section["sqlalchemy.url"] = DATABASE_URL

    connectable = engine_from_config(section, prefix="sqlalchemy.", poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(connection=connection, **_options())
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
