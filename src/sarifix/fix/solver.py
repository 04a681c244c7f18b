"""HTTP client for the remote SARIF fix solver."""

from __future__ import annotations

import logging
from typing import Any

import requests

from sarifix.core.errors import SolverError

logger = logging.getLogger(__name__)


class SolverClient:
    """Posts one annotated SARIF result and returns the first proposed solution."""

    def __init__(
        self,
        url: str,
        api_key: str,
        timeout: float = 120,
        session: requests.Session | None = None,
    ):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        })

    def solve(self, annotated_result: dict[str, Any]) -> str:
        payload = {"runs": [{"results": [annotated_result]}]}
        description = f"POST {self.url}"
        try:
            response = self.session.post(self.url, json=payload, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise SolverError(f"No response from solver: {e}", request=description) from e

        if not response.ok:
            raise SolverError(
                f"Solver returned {response.status_code}",
                request=description,
                status=response.status_code,
                response_body=response.text,
                response_headers=dict(response.headers),
            )

        try:
            data = response.json()
        except ValueError as e:
            raise SolverError(
                "Solver response is not JSON",
                request=description,
                status=response.status_code,
                response_body=response.text,
            ) from e

        solutions = data.get("solutions") if isinstance(data, dict) else None
        if not solutions or not isinstance(solutions[0], dict):
            raise SolverError(
                "Solver returned no solutions",
                request=description,
                status=response.status_code,
                response_body=data,
            )
        solution = solutions[0].get("solution")
        if not isinstance(solution, str):
            raise SolverError(
                "Solver solution is not text",
                request=description,
                status=response.status_code,
                response_body=data,
            )
        if len(solutions) > 1:
            logger.debug("Solver returned %d solutions, using the first", len(solutions))
        return solution
