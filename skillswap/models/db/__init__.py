# SQLAlchemy database models
from .message_model import MessageModel
from .swap_request_model import SwapRequestModel
from .user_model import UserModel

__all__ = ["MessageModel", "SwapRequestModel", "UserModel"]
