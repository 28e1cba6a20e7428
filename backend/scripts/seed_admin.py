#!/usr/bin/env python
"""Seed script to create an admin user and a sample declaration.

Accounts and templates are normally managed outside this service. This script
bootstraps a fresh database so the API can be exercised: it creates an admin
user, optionally a sample declaration template, and prints a bearer token for
the admin.

Usage:
    python backend/scripts/seed_admin.py

Environment Variables:
    DATABASE_URL: PostgreSQL connection string
    JWT_SECRET: Token signing key (must match the running API)
    ADMIN_EMAIL: Email for admin user (default: admin@example.com)
    ADMIN_NAME: Display name for admin user (default: System Administrator)
    SEED_DECLARATION: Set to "false" to skip the sample declaration
"""

import os
import sys
from pathlib import Path

# Add backend/src to Python path
backend_src = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(backend_src))

from sqlalchemy.exc import SQLAlchemyError

from auth.jwt import create_access_token
from database import SessionLocal
from models.declaration import Declaration
from models.user import User


SAMPLE_DECLARATION = {
    "type": "Declaração de Residência",
    "title": "DECLARAÇÃO DE RESIDÊNCIA",
    "content": (
        "Declaramos, para os devidos fins, que {{nome}}, portador(a) do RG nº {{rg}} "
        "expedido por {{orgao_emissor}} e inscrito(a) no CPF sob o nº {{cpf}}, reside "
        "à {{rua}}, nº {{numero_casa}}{{complemento}}, bairro {{bairro}}, "
        "{{cidade}} - {{estado}}, CEP {{cep}}.\n"
        "Por ser verdade, firmamos a presente declaração."
    ),
    "footer": "São Paulo, {{data_atual}}.\n\n\n_______________________________\nSecretaria",
}


def main():
    """Create the admin user and sample declaration."""
    admin_email = os.getenv("ADMIN_EMAIL", "admin@example.com").lower()
    admin_name = os.getenv("ADMIN_NAME", "System Administrator")
    seed_declaration = os.getenv("SEED_DECLARATION", "true").lower() == "true"

    session = SessionLocal()

    try:
        admin_user = session.query(User).filter(User.email == admin_email).first()

        if admin_user:
            if not admin_user.is_admin:
                print(f"ERROR: User {admin_email} exists but is not an admin")
                sys.exit(1)
            print(f"Admin user {admin_email} already exists, reusing it")
        else:
            admin_user = User(email=admin_email, name=admin_name, is_admin=True)
            session.add(admin_user)

        declaration = None
        if seed_declaration:
            declaration = session.query(Declaration).filter(
                Declaration.type == SAMPLE_DECLARATION["type"]
            ).first()
            if declaration is None:
                declaration = Declaration(**SAMPLE_DECLARATION)
                session.add(declaration)

        session.commit()

        print("SUCCESS: Admin user ready")
        print(f"  ID:    {admin_user.id}")
        print(f"  Email: {admin_user.email}")
        print(f"  Name:  {admin_user.name}")
        if declaration is not None:
            print(f"  Sample declaration: {declaration.id} ({declaration.type})")
        print()
        print("Bearer token:")
        print(create_access_token(admin_user.id, is_admin=True, email=admin_user.email))

    except SQLAlchemyError as e:
        session.rollback()
        print(f"ERROR: Failed to seed database: {e}")
        sys.exit(1)

    finally:
        session.close()


if __name__ == "__main__":
    main()
