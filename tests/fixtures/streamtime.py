"""Streamtime payload builders and a canned client."""


def st_user(user_id, first, last, role="", **extra) -> dict:
    """A /users record."""
    user = {
        "id": user_id,
        "firstName": first,
        "lastName": last,
        "displayName": f"{first} {last[:1]}".strip(),
        "role": {"id": 1, "name": role} if role else None,
    }
    user.update(extra)
    return user


def st_job(job_id, number, name, company="Acme", status="In Progress", user_ids=()) -> dict:
    """A jobs search result."""
    return {
        "id": job_id,
        "number": number,
        "name": name,
        "company": {"id": 9, "name": company},
        "jobStatus": {"id": 2, "name": status},
        "users": [{"id": uid} for uid in user_ids],
    }


def st_item(item_id, job_id, name) -> dict:
    """A job items search result."""
    return {"id": item_id, "jobId": job_id, "name": name}


def st_item_user(item_id, user_id, minutes=0, status="Completed", start="", end="", row_id=None) -> dict:
    """A job item users search result."""
    return {
        "id": row_id or f"{item_id}-{user_id}",
        "jobItemId": item_id,
        "userId": user_id,
        "totalLoggedMinutes": minutes,
        "jobItemUserStatus": {"id": 1, "name": status},
        "earliestStartDate": start,
        "latestEndDate": end,
    }


class FakeStreamtimeClient:
    """Serves canned relations; counts calls so cache tests can assert on them."""

    def __init__(self, users=None, jobs=None, job_items=None, job_item_users=None):
        self.users = users
        self.views = {7: jobs or [], 16: job_items or [], 17: job_item_users or []}
        self.user_calls = 0
        self.search_calls: list[tuple[int, int, int]] = []

    def list_users(self):
        self.user_calls += 1
        return self.users

    def search_all(self, search_view, max_total=2000, page_size=200):
        self.search_calls.append((search_view, max_total, page_size))
        return list(self.views.get(search_view, []))[:max_total]
