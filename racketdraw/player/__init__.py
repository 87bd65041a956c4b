"""Player blueprint."""

from flask import Blueprint

bp = Blueprint("player", __name__, url_prefix="/players")

from . import routes  # noqa: E402, F401
from .models import Player  # noqa: E402
from .services import PlayerService  # noqa: E402

__all__ = ["Player", "PlayerService", "routes"]
