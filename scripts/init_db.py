#!/usr/bin/env python3
"""
Создать таблицы scripts / whitelist_entries / execution_logs (если их нет).
Запуск из корня проекта: python -m scripts.init_db
"""
import os
import sys

# корень проекта в PYTHONPATH
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import app.models  # noqa: F401  регистрирует модели в Base.metadata
from app.db.base import Base
from app.db.session import engine


def main():
    Base.metadata.create_all(bind=engine)
    print("Таблицы: " + ", ".join(sorted(Base.metadata.tables)))


if __name__ == "__main__":
    main()
