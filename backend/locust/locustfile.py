"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags concurrency  # Test overbooking
  locust -f locustfile.py --tags read         # Availability reads
  locust -f locustfile.py --tags edge         # Test bad input
  locust -f locustfile.py                     # All tests
"""

import random
from locust import HttpUser, task, between, tag, events
from datetime import datetime, timezone, timedelta

# Shared state
CONCURRENCY_CAPACITY = 10
SETUP = {}


def random_email():
    return f"load_{random.randint(10000, 99999)}@example.com"


def ensure_setup(client):
    """Create one event, one occurrence and one small-capacity ticket, once."""
    if SETUP:
        return

    resp = client.post("/api/v1/events/", json={"title": "Concurrency Test Event", "location": "Test"})
    if resp.status_code != 201:
        return
    event_id = resp.json()["id"]

    start = (datetime.now(timezone.utc) + timedelta(days=3)).isoformat()
    resp = client.post(f"/api/v1/events/{event_id}/occurrences", json={"start_time": start})
    if resp.status_code != 201:
        return
    occurrence_id = resp.json()["id"]

    resp = client.post(f"/api/v1/events/{event_id}/tickets", json={
        "title": "General Admission",
        "start_type": "time_before",
        "start_days": 7,
        "end_type": "time_before",
        "max_per_order": 1,
        "total_capacity": CONCURRENCY_CAPACITY,
    })
    if resp.status_code != 201:
        return

    SETUP.update(event_id=event_id, occurrence_id=occurrence_id, ticket_id=resp.json()["id"])
    print(f"\nCreated ticket {SETUP['ticket_id']} with {CONCURRENCY_CAPACITY} units\n")


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    print("\n" + "=" * 60)
    print("SETUP: first user creates the concurrency test ticket")
    print("=" * 60)


class ConcurrencyUser(HttpUser):
    """
    TEST 1: Concurrency - 100 users fight for 10 tickets

    Run: locust -f locustfile.py --tags concurrency -u 100 -r 50 --run-time 30s

    After test, verify:
      SELECT SUM(quantity) FROM reservation_tickets WHERE ticket_id = X;
    Should be <= 10
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        ensure_setup(self.client)

    @tag("concurrency")
    @task
    def reserve_limited_ticket(self):
        if not SETUP:
            return

        with self.client.post("/api/v1/reservations/",
            json={
                "occurrence_id": SETUP["occurrence_id"],
                "name": "Load Test",
                "email": random_email(),
                "tickets": [{"ticket_id": SETUP["ticket_id"], "quantity": 1}],
            },
            catch_response=True
        ) as resp:
            if resp.status_code in (201, 409):
                resp.success()  # 409: sold out
            elif resp.status_code == 503:
                resp.success()  # lock timeout under heavy contention
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class AvailabilityUser(HttpUser):
    """
    TEST 2: Availability reads while reservations are being written

    Run: locust -f locustfile.py --tags read -u 100 -r 20 --run-time 60s
    """
    wait_time = between(0.1, 0.5)

    def on_start(self):
        ensure_setup(self.client)

    @tag("read")
    @task(10)
    def check_availability(self):
        if not SETUP:
            return
        self.client.get(
            f"/api/v1/tickets/{SETUP['ticket_id']}/availability?occurrence_id={SETUP['occurrence_id']}",
            name="/api/v1/tickets/{id}/availability",
        )

    @tag("read")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(HttpUser):
    """
    TEST 3: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    System should NOT crash, return proper error codes.
    """
    wait_time = between(0.5, 1.5)

    def _reserve(self, payload, expected):
        with self.client.post("/api/v1/reservations/", json=payload, catch_response=True) as resp:
            if resp.status_code in expected:
                resp.success()
            else:
                resp.failure(f"Expected {expected}, got {resp.status_code}")

    @tag("edge")
    @task
    def unknown_occurrence(self):
        self._reserve({
            "occurrence_id": 999999,
            "name": "Edge",
            "email": random_email(),
            "tickets": [{"ticket_id": 1, "quantity": 1}],
        }, (404,))

    @tag("edge")
    @task
    def zero_quantity(self):
        self._reserve({
            "occurrence_id": 1,
            "name": "Edge",
            "email": random_email(),
            "tickets": [{"ticket_id": 1, "quantity": 0}],
        }, (422,))

    @tag("edge")
    @task
    def huge_quantity(self):
        self._reserve({
            "occurrence_id": SETUP.get("occurrence_id", 1),
            "name": "Edge",
            "email": random_email(),
            "tickets": [{"ticket_id": SETUP.get("ticket_id", 1), "quantity": 999999}],
        }, (404, 409, 422))

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post("/api/v1/reservations/",
            data="not json at all",
            catch_response=True
        ) as resp:
            if resp.status_code in [400, 422]:
                resp.success()
            else:
                resp.failure(f"Expected 400/422, got {resp.status_code}")
