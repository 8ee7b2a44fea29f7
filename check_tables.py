#!/usr/bin/env python3
"""
Print the clinic booking schema as the database sees it: tables, columns,
keys, unique constraints, indexes, views and row counts.
Run with: python check_tables.py
"""
from sqlalchemy import inspect

from clinic_booking import create_app
from clinic_booking.extensions import db


def report_schema():
    """Print the schema report for the current app's database."""
    inspector = inspect(db.engine)

    print("=" * 60)
    print("DATABASE TABLES")
    print("=" * 60)

    tables = inspector.get_table_names()
    print(f"\nFound {len(tables)} table(s):")
    for table in tables:
        print(f"  - {table}")

    print("\n" + "=" * 60)
    print("TABLE DETAILS")
    print("=" * 60)

    for table_name in tables:
        print(f"\nTable: {table_name}")
        print("-" * 60)

        print("Columns:")
        for col in inspector.get_columns(table_name):
            nullable = "NULL" if col['nullable'] else "NOT NULL"
            default = f" DEFAULT {col['default']}" if col.get('default') else ""
            print(f"  • {col['name']:20} {str(col['type']):30} {nullable}{default}")

        pk_constraint = inspector.get_pk_constraint(table_name)
        if pk_constraint['constrained_columns']:
            print(f"\nPrimary Key: {', '.join(pk_constraint['constrained_columns'])}")

        fks = inspector.get_foreign_keys(table_name)
        if fks:
            print("\nForeign Keys:")
            for fk in fks:
                options = fk.get('options') or {}
                on_delete = options.get('ondelete', 'NO ACTION')
                print(f"  • {fk['constrained_columns']} → {fk['referred_table']}.{fk['referred_columns']} ON DELETE {on_delete}")

        unique_constraints = inspector.get_unique_constraints(table_name)
        if unique_constraints:
            print("\nUnique Constraints:")
            for uc in unique_constraints:
                print(f"  • {uc['name']}: {uc['column_names']}")

        check_constraints = inspector.get_check_constraints(table_name)
        if check_constraints:
            print("\nCheck Constraints:")
            for cc in check_constraints:
                print(f"  • {cc['name']}: {cc['sqltext']}")

        indexes = inspector.get_indexes(table_name)
        if indexes:
            print("\nIndexes:")
            for idx in indexes:
                unique = "UNIQUE " if idx['unique'] else ""
                print(f"  • {unique}{idx['name']}: {idx['column_names']}")

    views = inspector.get_view_names()
    print("\n" + "=" * 60)
    print("VIEWS")
    print("=" * 60)
    for view in views:
        print(f"  - {view}")

    print("\n" + "=" * 60)
    print("Row Counts")
    print("=" * 60)

    for table_name in tables + views:
        if table_name != 'alembic_version':
            count = db.session.execute(db.text(f"SELECT COUNT(*) FROM {table_name}")).scalar()
            print(f"  {table_name:26} : {count} row(s)")


if __name__ == '__main__':
    app = create_app()
    with app.app_context():
        report_schema()
