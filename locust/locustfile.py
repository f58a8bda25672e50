"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags contention   # Test duplicate bookings
  locust -f locustfile.py --tags throughput   # Test cache
  locust -f locustfile.py --tags edge         # Test bad input
  locust -f locustfile.py                     # All tests
"""

import json
import random
import string

from locust import HttpUser, between, events, tag, task

# Shared state
EVENT_IDS = []
CONTENTION_EVENT_ID = None
CONTENTION_EMAILS = [f"crowd_{i}@example.com" for i in range(10)]

MODES = ["online", "offline", "hybrid"]
POSTER = b"\x89PNG\r\n\x1a\n" + b"\x00" * 256


def random_email():
    return f"load_{random.randint(10000, 99999)}@example.com"


def random_title():
    return "Meetup " + "".join(random.choices(string.ascii_lowercase, k=10))


def event_form(title, mode=None):
    return {
        "title": title,
        "description": "Load test event",
        "overview": "Generated by locust",
        "venue": "Main Hall",
        "location": "Berlin, Germany",
        "date": "2026-11-20",
        "time": random.choice(["09:00", "6:30 PM", "14:15"]),
        "mode": mode or random.choice(MODES),
        "audience": "Developers",
        "organizer": "Load Testers",
        "tags": json.dumps(["load", "test"]),
        "agenda": json.dumps(["Welcome", "Talks"]),
    }


def poster():
    return {"image": ("poster.png", POSTER, "image/png")}


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    print("\n" + "=" * 60)
    print("SETUP: Creating contention test event...")
    print("=" * 60)


class ContentionUser(HttpUser):
    """
    TEST 1: Contention - many users, 10 emails, one event

    Run: locust -f locustfile.py --tags contention -u 100 -r 50 --run-time 30s

    After test, verify:
      SELECT COUNT(*) FROM bookings WHERE event_id = X;
    Should be exactly 10
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        global CONTENTION_EVENT_ID
        if CONTENTION_EVENT_ID:
            return
        resp = self.client.post(
            "/api/events",
            data=event_form(random_title(), mode="offline"),
            files=poster(),
        )
        if resp.status_code == 201:
            CONTENTION_EVENT_ID = resp.json()["event"]["id"]
            print(f"\n✓ Created event {CONTENTION_EVENT_ID}\n")

    @tag("contention")
    @task
    def book_same_event(self):
        """Users race to book with a small pool of emails."""
        if not CONTENTION_EVENT_ID:
            return

        with self.client.post(
            "/api/bookings",
            json={"eventId": CONTENTION_EVENT_ID, "email": random.choice(CONTENTION_EMAILS)},
            catch_response=True,
        ) as resp:
            body = resp.json() if resp.status_code in (200, 201) else {}
            if resp.status_code == 201:
                resp.success()
            elif body.get("error", {}).get("code") == "DUPLICATE_BOOKING":
                resp.success()  # Expected: already booked
            else:
                resp.failure(f"Unexpected: {resp.status_code} {resp.text[:100]}")


class ThroughputUser(HttpUser):
    """
    TEST 2: Throughput - Cache effectiveness

    Run twice:
      1. With Redis: locust -f locustfile.py --tags throughput -u 100 -r 20 --run-time 60s
      2. Without Redis: REDIS_ENABLED=false, run again

    Compare:
      - Avg response time
      - Requests/sec
      - P95/P99 latency
    """
    wait_time = between(0.1, 0.5)

    @tag("throughput", "read")
    @task(10)
    def list_events_cached(self):
        """Hammer the cached endpoint."""
        resp = self.client.get("/api/events", name="/api/events [cached]")
        if resp.status_code == 200:
            for event in resp.json().get("events", [])[:20]:
                if event["slug"] not in EVENT_IDS:
                    EVENT_IDS.append(event["slug"])

    @tag("throughput", "read")
    @task(5)
    def list_events_by_mode(self):
        mode = random.choice(MODES)
        self.client.get(
            f"/api/events?date=2026-11-20&mode={mode}",
            name="/api/events?date&mode [cached]",
        )

    @tag("throughput", "read")
    @task(3)
    def get_event_detail(self):
        if EVENT_IDS:
            self.client.get(f"/api/events/{random.choice(EVENT_IDS)}", name="/api/events/{slug}")

    @tag("throughput")
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

    def _expect_booking_error(self, payload, code=None, **kwargs):
        with self.client.post("/api/bookings", json=payload, catch_response=True, **kwargs) as resp:
            if resp.status_code != 200:
                resp.failure(f"Expected 200, got {resp.status_code}")
                return
            body = resp.json()
            if body.get("success") is False and (code is None or body["error"]["code"] == code):
                resp.success()
            else:
                resp.failure(f"Unexpected body: {body}")

    @tag("edge")
    @task
    def invalid_event_id(self):
        self._expect_booking_error(
            {"eventId": 999999, "email": random_email()}, "EVENT_NOT_FOUND",
            name="/api/bookings [missing event]",
        )

    @tag("edge")
    @task
    def invalid_email(self):
        self._expect_booking_error(
            {"eventId": 1, "email": "not-an-email"}, name="/api/bookings [bad email]"
        )

    @tag("edge")
    @task
    def missing_image(self):
        with self.client.post(
            "/api/events", data=event_form(random_title()),
            name="/api/events [no image]", catch_response=True,
        ) as resp:
            if resp.status_code == 400:
                resp.success()
            else:
                resp.failure(f"Expected 400, got {resp.status_code}")

    @tag("edge")
    @task
    def malformed_tags(self):
        form = {**event_form(random_title()), "tags": "load, test"}
        with self.client.post(
            "/api/events", data=form, files=poster(),
            name="/api/events [bad tags]", catch_response=True,
        ) as resp:
            if resp.status_code == 400:
                resp.success()
            else:
                resp.failure(f"Expected 400, got {resp.status_code}")

    @tag("edge")
    @task
    def bad_date_filter(self):
        with self.client.get(
            "/api/events?date=someday", name="/api/events [bad date]", catch_response=True
        ) as resp:
            if resp.status_code == 400:
                resp.success()
            else:
                resp.failure(f"Expected 400, got {resp.status_code}")


class RealisticUser(HttpUser):
    """
    TEST 4: Realistic mixed workload

    Run: locust -f locustfile.py -u 200 -r 20 --run-time 120s

    Simulates real traffic:
      - Mostly browsing (80%)
      - Some bookings (15%)
      - Rare creates (5%)
    """
    wait_time = between(1, 3)

    @task(50)
    def browse_events(self):
        resp = self.client.get("/api/events")
        if resp.status_code == 200:
            for event in resp.json().get("events", [])[:20]:
                if event["slug"] not in EVENT_IDS:
                    EVENT_IDS.append(event["slug"])

    @task(20)
    def view_event(self):
        if EVENT_IDS:
            self.client.get(f"/api/events/{random.choice(EVENT_IDS)}", name="/api/events/{slug}")

    @task(10)
    def book_event(self):
        if not EVENT_IDS:
            return
        slug = random.choice(EVENT_IDS)
        resp = self.client.get(f"/api/events/{slug}", name="/api/events/{slug}")
        if resp.status_code == 200:
            event = resp.json()["event"]
            self.client.post(
                "/api/bookings",
                json={"eventId": event["id"], "slug": event["slug"], "email": random_email()},
            )

    @task(3)
    def create_event(self):
        resp = self.client.post("/api/events", data=event_form(random_title()), files=poster())
        if resp.status_code == 201:
            EVENT_IDS.append(resp.json()["event"]["slug"])
