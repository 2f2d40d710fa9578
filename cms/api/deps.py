"""Request-scoped dependencies shared by the routers."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from cms.core.config import Settings
from cms.core.database import get_db


def get_app_settings(request: Request) -> Settings:
    """Settings the app was built with (see cms.main.create_app)."""
    return request.app.state.settings


DbSession = Annotated[Session, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]
