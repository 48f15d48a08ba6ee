#!/usr/bin/env python3
"""
Gestionar las migraciones de base de datos con Alembic.

Uso:
    python migrate.py create "mensaje"   # Crear migración (autogenerate)
    python migrate.py upgrade [rev]       # Ejecutar migraciones (default: head)
    python migrate.py downgrade [rev]     # Rollback (default: -1)
    python migrate.py history             # Ver historial
    python migrate.py current             # Ver revisión actual
"""
import argparse
import sys
from pathlib import Path

# Agregar el directorio raíz al path
root_dir = Path(__file__).parent
sys.path.insert(0, str(root_dir))

from alembic import command
from alembic.config import Config

from app.core.config import settings


def get_alembic_config() -> Config:
    alembic_cfg = Config(str(root_dir / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(root_dir / "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", settings.database_url)
    return alembic_cfg


def main():
    parser = argparse.ArgumentParser(description="Migraciones de FinTrack API")
    subparsers = parser.add_subparsers(dest="action", required=True)

    create = subparsers.add_parser("create", help="Crear nueva migración")
    create.add_argument("message")
    upgrade = subparsers.add_parser("upgrade", help="Ejecutar migraciones pendientes")
    upgrade.add_argument("revision", nargs="?", default="head")
    downgrade = subparsers.add_parser("downgrade", help="Revertir migraciones")
    downgrade.add_argument("revision", nargs="?", default="-1")
    subparsers.add_parser("history", help="Mostrar historial de migraciones")
    subparsers.add_parser("current", help="Mostrar migración actual")

    args = parser.parse_args()
    alembic_cfg = get_alembic_config()

    if args.action == "create":
        command.revision(alembic_cfg, autogenerate=True, message=args.message)
        print(f"Migración creada: {args.message}")
    elif args.action == "upgrade":
        command.upgrade(alembic_cfg, args.revision)
        print("Migraciones ejecutadas exitosamente")
    elif args.action == "downgrade":
        command.downgrade(alembic_cfg, args.revision)
        print("Rollback ejecutado exitosamente")
    elif args.action == "history":
        command.history(alembic_cfg)
    elif args.action == "current":
        command.current(alembic_cfg)


if __name__ == "__main__":
    main()
