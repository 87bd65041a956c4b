"""Club blueprint."""

from flask import Blueprint

bp = Blueprint("club", __name__, url_prefix="/clubs")

from . import routes  # noqa: E402, F401
from .models import Club  # noqa: E402
from .services import ClubService  # noqa: E402

__all__ = ["Club", "ClubService", "routes"]
