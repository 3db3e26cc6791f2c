#!/usr/bin/env python3
"""
TrackLife - Health Check Script
Checks a running TrackLife API server.

This script checks:
1. Liveness and readiness endpoints
2. The tracker API health endpoint
3. Every tracker status endpoint
"""

import argparse
import sys
import time
from typing import Dict, List, Optional

import requests

TRACKERS = ["sleep", "period", "workout", "habits", "budget", "mood", "water"]


class HealthChecker:
    """Health checker for a TrackLife API server."""

    def __init__(self, api_url: str = "http://127.0.0.1:8000", timeout: float = 5.0):
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.results: List[Dict] = []

    def log_result(self, component: str, status: str, message: str, details: Optional[Dict] = None):
        """Record and print one check result."""
        self.results.append({
            "component": component,
            "status": status,  # "pass", "fail", "warn"
            "message": message,
            "details": details or {},
            "timestamp": time.time(),
        })

        marker = {"pass": "[PASS]", "fail": "[FAIL]", "warn": "[WARN]"}.get(status, "[????]")
        print(f"{marker} {component}: {message}")
        for key, value in (details or {}).items():
            print(f"   {key}: {value}")

    def _get(self, path: str) -> requests.Response:
        return requests.get(f"{self.api_url}{path}", timeout=self.timeout)

    def check_liveness(self) -> bool:
        try:
            response = self._get("/health")
        except requests.RequestException as e:
            self.log_result("Server", "fail", f"Cannot reach {self.api_url}: {e}")
            return False

        if response.status_code != 200:
            self.log_result("Server", "fail", f"/health returned HTTP {response.status_code}")
            return False

        data = response.json()
        self.log_result("Server", "pass", "Server is alive", {"version": data.get("version", "unknown")})
        return True

    def check_readiness(self) -> bool:
        try:
            response = self._get("/ready")
        except requests.RequestException as e:
            self.log_result("Readiness", "fail", f"Request failed: {e}")
            return False

        data = response.json()
        if response.status_code == 200:
            self.log_result("Readiness", "pass", "Server is ready",
                            {"response_time_ms": data.get("response_time_ms")})
            return True

        self.log_result("Readiness", "fail", "Server is not ready", {
            "checks": data.get("checks"),
            "errors": "; ".join(data.get("errors", [])),
        })
        return False

    def check_trackers(self) -> bool:
        all_passed = True
        for path in ["health"] + TRACKERS:
            try:
                response = self._get(f"/api/{path}")
            except requests.RequestException as e:
                self.log_result(f"/api/{path}", "fail", f"Request failed: {e}")
                all_passed = False
                continue

            if response.status_code == 200:
                self.log_result(f"/api/{path}", "pass", str(response.json()))
            else:
                self.log_result(f"/api/{path}", "fail", f"HTTP {response.status_code}")
                all_passed = False
        return all_passed

    def run_all_checks(self) -> bool:
        """Run all checks and return overall success."""
        print("TrackLife - Health Check")
        print("=" * 50)

        if not self.check_liveness():
            self.print_summary()
            return False

        all_passed = self.check_readiness()
        all_passed &= self.check_trackers()

        self.print_summary()
        return all_passed

    def print_summary(self):
        counts = {status: sum(1 for r in self.results if r["status"] == status) for status in ("pass", "warn", "fail")}
        print("=" * 50)
        print(f"Passed: {counts['pass']}  Warnings: {counts['warn']}  Failed: {counts['fail']}")


def main():
    parser = argparse.ArgumentParser(description="TrackLife health check")
    parser.add_argument("--url", default="http://127.0.0.1:8000", help="API server URL")
    parser.add_argument("--timeout", type=float, default=5.0, help="Request timeout in seconds")
    args = parser.parse_args()

    checker = HealthChecker(args.url, args.timeout)
    sys.exit(0 if checker.run_all_checks() else 1)


if __name__ == "__main__":
    main()
