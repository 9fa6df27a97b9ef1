#!/usr/bin/env python3
"""
Вывести loader URL всех скриптов владельца (имя + ссылка для game:HttpGet).
Запуск из корня проекта: python -m scripts.print_loader_urls <owner_id>
или: PYTHONPATH=. python scripts/print_loader_urls.py <owner_id>
"""
import os
import sys

# корень проекта в PYTHONPATH
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.db.session import SessionLocal
from app.loader.generator import loader_url
from app.services.scripts.service import ScriptService


def main():
    if len(sys.argv) < 2:
        print("Использование: print_loader_urls.py <owner_id>")
        return
    owner_id = sys.argv[1]
    db = SessionLocal()
    try:
        scripts = ScriptService(db).list_for_owner(owner_id)
        if not scripts:
            print("Скриптов у владельца нет.")
            return
        print(f"Loader URL (владелец: {owner_id}):\n")
        for s in scripts:
            state = s.access_tier if s.is_active else f"{s.access_tier}, inactive"
            print(f"  {s.name} [{state}]\n    {loader_url(s.id)}\n")
    finally:
        db.close()


if __name__ == "__main__":
    main()
