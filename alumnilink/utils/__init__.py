__all__ = [
    "create_access_token",
    "decode_access_token",
    "get_current_user",
    "oauth2_scheme",
    "is_email_enabled",
    "send_email",
    "get_avatar_url",
]


def __getattr__(name):
    if name in {
        "create_access_token",
        "decode_access_token",
        "get_current_user",
        "oauth2_scheme",
    }:
        from . import security as _security
        return getattr(_security, name)
    if name in {"is_email_enabled", "send_email"}:
        from . import email as _email
        return getattr(_email, name)
    if name == "get_avatar_url":
        from . import avatar as _avatar
        return _avatar.get_avatar_url
    raise AttributeError(f"module 'alumnilink.utils' has no attribute '{name}'")
