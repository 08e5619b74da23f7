"""
Router dependencies - data clients per access mode
"""

from fastapi import Depends, Request

from charmemo.core.port import DataClient
from charmemo.core.security import get_current_owner


def get_catalog_client(request: Request) -> DataClient:
    """Client without an owner identity (character catalog only)"""
    return request.app.state.data_client


def get_owner_client(request: Request, owner: str = Depends(get_current_owner)) -> DataClient:
    """Client bound to the authenticated owner"""
    return request.app.state.data_client.with_owner(owner)
