from typing import Tuple

from sqlmodel import Session, select

from barberpro.config import get_settings
from barberpro.database import create_db_and_tables, make_engine
from barberpro.models.client import Client, ClientCreate
from barberpro.models.professional import Professional, ProfessionalCreate
from barberpro.services import accounts


PROFESSIONAL_EMAIL = "barbeiro@gmail.com"
CLIENT_EMAIL = "cliente@gmail.com"
DEMO_PASSWORD = "123456"


def seed_demo_accounts(session: Session) -> Tuple[Professional, Client]:
    # 1) profissional de teste (se não existir)
    professional = session.exec(
        select(Professional).where(Professional.email == PROFESSIONAL_EMAIL)
    ).first()

    if not professional:
        professional = accounts.create_professional(
            session,
            ProfessionalCreate(
                name="Barbeiro Demo",
                profession="Barbeiro",
                specialties="Corte, Barba, Degradê",
                whatsapp="+5511999999999",
                instagram="@barbeirodemo",
                address="Rua das Tesouras, 10",
                bio="Conta criada pelo seed.",
                email=PROFESSIONAL_EMAIL,
                password=DEMO_PASSWORD,
            ),
        )

    # 2) cliente de teste (se não existir)
    client = session.exec(
        select(Client).where(Client.email == CLIENT_EMAIL)
    ).first()

    if not client:
        client = accounts.create_client(
            session,
            ClientCreate(
                name="Cliente Demo",
                whatsapp="+5511888888888",
                email=CLIENT_EMAIL,
                password=DEMO_PASSWORD,
            ),
        )

    return professional, client


def main():
    engine = make_engine(get_settings())
    create_db_and_tables(engine)

    with Session(engine) as session:
        professional, client = seed_demo_accounts(session)

        print("✅ Seed concluído!")
        print(f"Profissional: {professional.id} ({professional.email})")
        print(f"Cliente: {client.id} ({client.email})")
        print(f"Senha das duas contas: {DEMO_PASSWORD}")


if __name__ == "__main__":
    main()
