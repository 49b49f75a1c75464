import time

def build_full_name(first_name: str, last_name: str) -> str:
    return f"{first_name} {last_name}".strip()

def generate_username(email: str, role: str) -> str:
    # Local part of the email; timestamped fallback when the email has none
    local_part = email.split("@")[0].strip()
    if local_part:
        return local_part
    return f"{role}_{int(time.time() * 1000)}"

def like_pattern(term: str) -> str:
    # Escape LIKE wildcards so the search term matches literally
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"
