from .env import Env, get_env, is_prod

__all__ = ["Env", "get_env", "is_prod"]
