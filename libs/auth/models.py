from typing import Optional

from libs.common.schemas import CamelModel


class User(CamelModel):
    """
    Represents the signed-in storefront user.
    """

    id: int
    username: str = ""
    email: str = ""
    phone: Optional[str] = None
    role: str = "buyer"
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    avatar_url: Optional[str] = None


class LoginResponse(CamelModel):
    """
    Body of a successful OTP verification.

    The session cookie is set by the server on the same response; ``token``
    is kept for clients that need it explicitly.
    """

    token: Optional[str] = None
    user: Optional[User] = None
    is_new_user: Optional[bool] = None
    email: Optional[str] = None
