"""
Bulk import projects from a JSON file into the projects table.

Usage:
    python scripts/import_projects.py [data/projects.json]

The file holds a list of objects with name, description, url and optionally
stars, forks, tags and languages. Existing project names are skipped, so the
script is safe to run multiple times. Imported projects have no last_updated
and are picked up first by the next refresh batch.
"""
import json
import sys
from pathlib import Path

from pydantic import ValidationError

from app.core.database import Base, SessionLocal, engine
from app.models.project import Project
from app.repositories.project_repository import ProjectRepository
from app.schemas.project_schemas import ProjectCreate

DEFAULT_PATH = Path(__file__).resolve().parents[1] / 'data' / 'projects.json'


def import_projects(db, entries):
    repo = ProjectRepository(Project, db)
    created, skipped, invalid = 0, 0, 0
    for entry in entries:
        try:
            project = ProjectCreate.model_validate(entry)
        except ValidationError as e:
            print('Invalid entry', entry.get('name') if isinstance(entry, dict) else entry, '-', e.error_count(), 'errors')
            invalid += 1
            continue
        if repo.get_by_name(project.name):
            skipped += 1
            continue
        repo.create(project.model_dump())
        created += 1
    return created, skipped, invalid


def main():
    path = Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_PATH
    if not path.exists():
        print('File not found:', path)
        sys.exit(1)

    entries = json.loads(path.read_text(encoding='utf-8'))
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        created, skipped, invalid = import_projects(db, entries)
    finally:
        db.close()

    print(f'Imported {created} projects ({skipped} already present, {invalid} invalid)')


if __name__ == '__main__':
    main()
