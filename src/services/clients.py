# src/services/clients.py
from __future__ import annotations

import logging
from typing import List

from sqlmodel import Session, select

from src.core.context import RequestContext
from src.core.errors import NotFound
from src.server.models import Client
from src.server.schemas.client import ClientIn

log = logging.getLogger("lagerkoll.clients")


def get_client(*, session: Session, ctx: RequestContext, client_id: int) -> Client:
    client = session.get(Client, client_id)
    if client is None or client.user_id != ctx.user_id:
        raise NotFound("Kund", client_id)
    return client


def list_clients(*, session: Session, ctx: RequestContext) -> List[Client]:
    stmt = select(Client).where(Client.user_id == ctx.user_id).order_by(Client.full_name)
    return list(session.exec(stmt).all())


def create_client(*, session: Session, ctx: RequestContext, payload: ClientIn) -> Client:
    client = Client(user_id=ctx.user_id, **payload.model_dump())
    session.add(client)
    session.commit()
    session.refresh(client)
    log.info("Kund %s skapad (%s)", client.id, client.full_name)
    return client


def update_client(
    *, session: Session, ctx: RequestContext, client_id: int, payload: ClientIn
) -> Client:
    client = get_client(session=session, ctx=ctx, client_id=client_id)
    for key, value in payload.model_dump().items():
        setattr(client, key, value)
    session.add(client)
    session.commit()
    session.refresh(client)
    return client


def delete_client(*, session: Session, ctx: RequestContext, client_id: int) -> None:
    client = get_client(session=session, ctx=ctx, client_id=client_id)
    session.delete(client)
    session.commit()
