"""Username/password strategy models

Configuration for the LDAP and local strategies, and the user record a
local user store hands back.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class LdapConfig(BaseModel):
    """Per-directory LDAP configuration.

    The password scheme is chosen here, once per directory; it is never
    inferred from the stored value at runtime.

    Attributes:
        platform: Name reported on the authenticated user
        url: Directory URL, passed through to the directory client
        base_dn: Search base for user entries
        bind_dn: Service account DN, passed through to the directory client
        bind_password: Service account password
        password_scheme: Scheme tag of the stored passwords (e.g. ``SSHA``)
        id_attribute: Entry attribute used as the external id
        password_attribute: Entry attribute holding the stored password
        username_param: Request parameter carrying the username
        password_param: Request parameter carrying the password
    """
    model_config = ConfigDict(frozen=True)

    platform: str = "ldap"
    url: Optional[str] = None
    base_dn: Optional[str] = None
    bind_dn: Optional[str] = None
    bind_password: Optional[str] = None
    password_scheme: str = "SSHA"
    id_attribute: str = "uid"
    password_attribute: str = "userPassword"
    username_param: str = "username"
    password_param: str = "password"


class LocalConfig(BaseModel):
    """Local credential configuration"""
    model_config = ConfigDict(frozen=True)

    platform: str = "local"
    username_param: str = "username"
    password_param: str = "password"


@dataclass
class LocalUser:
    """User record returned by a local user store

    Attributes:
        user_id: Unique identifier
        username: Login name
        password_hash: bcrypt hash of the password
        is_active: Account active status
        attributes: Extra profile fields copied into the claims
    """
    user_id: str
    username: str
    password_hash: str
    is_active: bool = True
    attributes: dict[str, Any] = field(default_factory=dict)
