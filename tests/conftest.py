import json

import pytest

from config import Settings


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None, reason="OK"):
        self.status_code = status_code
        self.payload = payload
        self.text = text if text is not None else (json.dumps(payload) if payload is not None else "")
        self.reason = reason

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self.payload is None:
            return json.loads(self.text)
        return self.payload


class FakeSession:
    """Records requests and replays queued responses (the last one repeats)"""

    def __init__(self, *responses):
        self.responses = list(responses) or [FakeResponse(204)]
        self.calls = []

    def _next(self):
        if len(self.responses) > 1:
            response = self.responses.pop(0)
        else:
            response = self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response

    def get(self, url, **kwargs):
        self.calls.append(("GET", url, kwargs))
        return self._next()

    def post(self, url, **kwargs):
        self.calls.append(("POST", url, kwargs))
        return self._next()


def make_raw_record(recordid, date="2024-01-05", numero=1, **fields):
    data = {"dateparution": date, "numeroannonce": numero, "commercant": "ACME"}
    data.update(fields)
    return {"recordid": recordid, "datasetid": "annonces-commerciales", "fields": data}


@pytest.fixture
def settings(tmp_path):
    return Settings(
        webhook_url="https://discord.test/api/webhooks/1/abc",
        companies=("ACME", "GLOBEX"),
        company_delay_ms=0,
        state_file_path=str(tmp_path / "state.json"),
    )
