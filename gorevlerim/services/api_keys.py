from gorevlerim.services import store


def api_key_exists(key: str) -> bool:
    """Whether the key is stored in the api_keys table."""
    return store.select_maybe_one("api_keys", {"key": key}, columns="user_id") is not None
