class ApiError(Exception):
    pass


def ping():
    return "pong"


def fetch_user(user_id):
    raise ApiError(f"no backend for user {user_id}")


def save_profile(user_id, name):
    raise ApiError(f"no backend for user {user_id}")
