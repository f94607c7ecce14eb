"""
A simple smoke-test script for a running server.

Usage:
    python -m injurybot.check_api

Note: This expects the service to be running at http://127.0.0.1:3000
(override with BASE_URL). It prints the local configuration summary, then
calls each read-only endpoint and reports what came back.
"""

import os

import requests
from dotenv import load_dotenv

from injurybot.config import get_configuration_status

BASE = os.environ.get("BASE_URL", "http://127.0.0.1:3000")

CHECKS = [
    ("health", "/health"),
    ("articles", "/api/articles"),
    ("law firms", "/api/law-firms?specialty=mesothelioma"),
    ("settlements", "/api/settlements?condition=mesothelioma"),
    ("search", "/api/search/mesothelioma"),
    ("active cases", "/api/lia/active-cases"),
]


def print_configuration():
    status = get_configuration_status()
    print("OpenAI configured:", status["openai"]["configured"], "model:", status["openai"]["model"])
    print("Google Sheets configured:", status["google"]["configured"])
    print("HubSpot configured:", status["hubspot"]["configured"])
    for error in status["validation"]["errors"]:
        print("  -", error)


def main():
    load_dotenv(".env.local")
    print_configuration()
    try:
        for name, path in CHECKS:
            r = requests.get(f"{BASE}{path}", timeout=10)
            body = r.json()
            size = len(body) if isinstance(body, list) else len(body.keys())
            print(f"{name}: status={r.status_code} items={size}")
        r = requests.post(f"{BASE}/api/cache/clear", timeout=10)
        print("cache clear:", r.status_code, r.json().get("message"))
    except requests.exceptions.ConnectionError:
        print(f"Could not reach {BASE}; start the server with: uvicorn injurybot.main:app")


if __name__ == '__main__':
    main()
