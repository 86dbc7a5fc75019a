import logging
import re

import httpx
import pytest

IDENTITY_ENDPOINT = "https://iam.eu-de.example.test/v3"
PROJECT_NAME = "eu-de_test"
PROJECT_ID = "0f1e2d3c4b5a69788796a5b4c3d2e1f0"
ELB_URL = f"https://elb.eu-de.example.test/v1.0/{PROJECT_ID}"

LOG_LINE = re.compile(r"^(?P<prefix>.*) request (?P<kind>sent|received) \[(?P<id>[0-9a-f-]{36})\]: (?P<dump>.*)$", re.S)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def otcelb_logs(caplog):
    """caplog capturing the otcelb logger at INFO."""
    caplog.set_level(logging.INFO, logger="otcelb")
    return caplog


def exchange_lines(records):
    """Parse request/response log records into (kind, id, dump, prefix) tuples."""
    lines = []
    for record in records:
        match = LOG_LINE.match(record.getMessage())
        if match:
            lines.append((match["kind"], match["id"], match["dump"], match["prefix"]))
    return lines


class FakeCloud:
    """A MockTransport handler playing IAM and the classic ELB API."""

    def __init__(self):
        self.requests = []
        self.overrides = {}
        self.projects = [{"id": PROJECT_ID, "name": PROJECT_NAME, "domain_id": "d0"}]
        self.catalog = [
            {
                "type": "identity",
                "name": "iam",
                "endpoints": [{"interface": "public", "region": "*", "url": IDENTITY_ENDPOINT}],
            },
            {
                "type": "elb",
                "name": "elb",
                "endpoints": [
                    {
                        "interface": "public",
                        "region": "eu-de",
                        "region_id": "eu-de",
                        "url": "https://elb.eu-de.example.test/v1.0/$(tenant_id)s",
                    },
                    {
                        "interface": "public",
                        "region": "eu-nl",
                        "region_id": "eu-nl",
                        "url": "https://elb.eu-nl.example.test",
                    },
                ],
            },
        ]
        self.listeners = [
            {
                "id": "lst-1",
                "name": "web",
                "loadbalancer_id": "lb-1",
                "protocol": "HTTP",
                "port": 80,
                "backend_protocol": "HTTP",
                "backend_port": 8080,
                "lb_algorithm": "roundrobin",
                "status": "ACTIVE",
                "admin_state_up": True,
            }
        ]
        self.loadbalancers = {
            "instance_num": "1",
            "loadbalancers": [
                {
                    "id": "lb-1",
                    "name": "elb",
                    "type": "External",
                    "status": "ACTIVE",
                    "admin_state_up": 1,
                    "vpc_id": "vpc-1",
                    "vip_address": "80.158.0.10",
                    "bandwidth": 5,
                    "update_time": "2024-01-01 00:00:00",
                }
            ],
        }

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path in self.overrides:
            return self.overrides[path]()
        if path == "/v3/projects":
            name = request.url.params.get("name")
            return httpx.Response(200, json={"projects": [p for p in self.projects if p["name"] == name]})
        if path == "/v3/auth/catalog":
            return httpx.Response(200, json={"catalog": self.catalog})
        if path.endswith("/elbaas/listeners"):
            return httpx.Response(200, json=self.listeners)
        if path.endswith("/elbaas/loadbalancers"):
            return httpx.Response(200, json=self.loadbalancers)
        return httpx.Response(404, json={"error_code": "APIGW.0101", "error_msg": "The API does not exist"})

    def paths(self):
        return [r.url.path for r in self.requests]

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def cloud():
    return FakeCloud()
